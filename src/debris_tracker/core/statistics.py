"""Catalog aggregations behind the altitude, heatmap and timeline charts."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Sequence

import numpy as np

from .config import CHART_CFG, ChartCfg
from .model import TrackedObject


def nice_step(start: float, stop: float, count: int) -> float:
    """Tick spacing of 1, 2 or 5 times a power of ten, close to ``(stop - start) / count``."""

    raw = (stop - start) / max(1, count)
    if raw <= 0.0:
        return 1.0
    power = math.floor(math.log10(raw))
    step = 10.0**power
    error = raw / step
    if error >= math.sqrt(50.0):
        step *= 10.0
    elif error >= math.sqrt(10.0):
        step *= 5.0
    elif error >= math.sqrt(2.0):
        step *= 2.0
    return step


def bin_edges(start: float, stop: float, count: int) -> np.ndarray:
    step = nice_step(start, stop, count)
    first = math.ceil(start / step) * step
    inner = np.arange(first, stop, step)
    inner = inner[(inner > start) & (inner < stop)]
    return np.concatenate(([start], inner, [stop]))


@dataclass(frozen=True)
class AltitudeHistogram:
    edges: np.ndarray
    counts: np.ndarray
    use_log: bool
    full_range: bool

    def bin_at(self, altitude_km: float) -> int | None:
        if altitude_km < self.edges[0] or altitude_km > self.edges[-1]:
            return None
        idx = int(np.searchsorted(self.edges, altitude_km, side="right")) - 1
        return min(idx, len(self.counts) - 1)


def altitude_histogram(
    altitudes: Iterable[float], full_range: bool, cfg: ChartCfg = CHART_CFG
) -> AltitudeHistogram:
    lo, hi = cfg.full_range_km if full_range else cfg.leo_range_km
    bins = cfg.full_bins if full_range else cfg.leo_bins
    values = np.fromiter(altitudes, dtype=float)
    values = values[(values >= lo) & (values <= hi)]
    edges = bin_edges(lo, hi, bins)
    counts, _ = np.histogram(values, bins=edges)
    max_count = int(counts.max()) if counts.size else 0
    use_log = full_range and max_count > cfg.symlog_min_count
    return AltitudeHistogram(edges=edges, counts=counts, use_log=use_log, full_range=full_range)


@dataclass(frozen=True)
class CongestionGrid:
    """Counts indexed ``[altitude_bin, inclination_bin]``."""

    counts: np.ndarray
    altitude_step_km: float
    inclination_step_deg: float

    @property
    def max_count(self) -> int:
        return int(self.counts.max()) if self.counts.size else 0

    def cell_at(self, inclination_deg: float, altitude_km: float) -> tuple[int, int] | None:
        n_alt, n_inc = self.counts.shape
        if not (0.0 <= altitude_km <= n_alt * self.altitude_step_km):
            return None
        if not (0.0 <= inclination_deg <= n_inc * self.inclination_step_deg):
            return None
        ai = min(int(altitude_km // self.altitude_step_km), n_alt - 1)
        ii = min(int(inclination_deg // self.inclination_step_deg), n_inc - 1)
        return ai, ii


def regime_congestion(objects: Iterable[TrackedObject], cfg: ChartCfg = CHART_CFG) -> CongestionGrid:
    alt_bins = cfg.heatmap_altitude_bins
    inc_bins = cfg.heatmap_inclination_bins
    alt_step = cfg.heatmap_altitude_max_km / alt_bins
    inc_step = 180.0 / inc_bins
    counts = np.zeros((alt_bins, inc_bins), dtype=int)
    for obj in objects:
        if obj.altitude_km < 0.0 or obj.altitude_km > cfg.heatmap_altitude_max_km:
            continue
        if obj.inclination_deg < 0.0 or obj.inclination_deg > 180.0:
            continue
        ai = min(int(obj.altitude_km // alt_step), alt_bins - 1)
        ii = min(int(obj.inclination_deg // inc_step), inc_bins - 1)
        counts[ai, ii] += 1
    return CongestionGrid(counts=counts, altitude_step_km=alt_step, inclination_step_deg=inc_step)


@dataclass(frozen=True)
class YearSeries:
    years: list[int]
    counts: list[int]
    raw: list[int]
    cumulative: bool


def launch_year_series(
    objects: Iterable[TrackedObject], cumulative: bool, cfg: ChartCfg = CHART_CFG
) -> YearSeries:
    per_year: dict[int, int] = {}
    for obj in objects:
        year = obj.launch_year
        if year is None or year < cfg.timeline_first_year or year > cfg.timeline_last_year:
            continue
        per_year[year] = per_year.get(year, 0) + 1
    years = sorted(per_year)
    raw = [per_year[year] for year in years]
    if cumulative:
        counts = list(np.cumsum(raw, dtype=int).tolist()) if raw else []
    else:
        counts = list(raw)
    return YearSeries(years=years, counts=counts, raw=raw, cumulative=cumulative)


def altitudes_of(objects: Sequence[TrackedObject]) -> list[float]:
    return [obj.altitude_km for obj in objects]


__all__ = [
    "AltitudeHistogram",
    "CongestionGrid",
    "YearSeries",
    "altitude_histogram",
    "altitudes_of",
    "bin_edges",
    "launch_year_series",
    "nice_step",
    "regime_congestion",
]
