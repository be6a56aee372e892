"""One-shot catalog charts drawn with matplotlib and shown as pygame surfaces."""
from __future__ import annotations

from typing import Sequence

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
import pygame
from matplotlib.axes import Axes
from matplotlib.figure import Figure
from matplotlib.ticker import FuncFormatter, MultipleLocator

from debris_tracker.core.config import CHART_CFG, ChartCfg
from debris_tracker.core.logging_utils import get_logger
from debris_tracker.core.model import AltitudeRange, TimelineMode, TrackedObject, ViewState
from debris_tracker.core.statistics import (
    AltitudeHistogram,
    CongestionGrid,
    YearSeries,
    altitude_histogram,
    altitudes_of,
    launch_year_series,
    regime_congestion,
)

from .ui import Tooltip

logger = get_logger(__name__)


def figure_to_surface(fig: Figure) -> pygame.Surface:
    fig.canvas.draw()
    width, height = fig.canvas.get_width_height()
    rgba = np.asarray(fig.canvas.buffer_rgba())
    return pygame.image.frombuffer(rgba.tobytes(), (width, height), "RGBA")


class ChartView:
    """Base for the non-tracker views.

    Subclasses fill the axes in :meth:`plot` and map data coordinates back to
    tooltip lines in :meth:`lines_at`.
    """

    def __init__(self, catalog: Sequence[TrackedObject], tooltip: Tooltip, cfg: ChartCfg = CHART_CFG) -> None:
        self.catalog = catalog
        self.tooltip = tooltip
        self.cfg = cfg
        self.rect = pygame.Rect(0, 0, 0, 0)
        self.surface: pygame.Surface | None = None
        self._figure: Figure | None = None
        self._ax: Axes | None = None
        self._hovering = False

    def render(self, rect: pygame.Rect, view_state: ViewState) -> pygame.Surface:
        cfg = self.cfg
        self.rect = pygame.Rect(rect)
        width = max(1, self.rect.width)
        height = max(1, self.rect.height)
        fig, ax = plt.subplots(figsize=(width / cfg.dpi, height / cfg.dpi), dpi=cfg.dpi)
        fig.patch.set_facecolor(cfg.face_color)
        ax.set_facecolor(cfg.face_color)
        ax.tick_params(colors=cfg.text_color, labelsize=8)
        for spine in ax.spines.values():
            spine.set_color(cfg.muted_color)
        self.plot(fig, ax, view_state)
        fig.tight_layout()
        self.surface = figure_to_surface(fig)
        plt.close(fig)
        self._figure = fig
        self._ax = ax
        logger.debug("Rendered %s at %sx%s", type(self).__name__, width, height)
        return self.surface

    def plot(self, fig: Figure, ax: Axes, view_state: ViewState) -> None:
        raise NotImplementedError

    def lines_at(self, x: float, y: float) -> list[str] | None:
        raise NotImplementedError

    def _style_labels(self, ax: Axes, title: str, xlabel: str, ylabel: str) -> None:
        cfg = self.cfg
        ax.set_title(title, color=cfg.text_color, fontsize=12)
        ax.set_xlabel(xlabel, color=cfg.text_color)
        ax.set_ylabel(ylabel, color=cfg.text_color)

    def hover_lines(self, local_pos: tuple[float, float]) -> list[str] | None:
        """Tooltip lines for a pointer position relative to the chart's top-left corner."""

        if self._figure is None or self._ax is None or self.surface is None:
            return None
        # matplotlib display coordinates grow upwards from the bottom edge.
        display = (local_pos[0], self.surface.get_height() - local_pos[1])
        if not self._ax.bbox.contains(*display):
            return None
        x, y = self._ax.transData.inverted().transform(display)
        return self.lines_at(float(x), float(y))

    def handle_event(self, event: pygame.event.Event) -> bool:
        if event.type != pygame.MOUSEMOTION:
            return False
        lines = None
        if self.rect.collidepoint(event.pos):
            lines = self.hover_lines((event.pos[0] - self.rect.left, event.pos[1] - self.rect.top))
        if lines:
            self.tooltip.show(lines, event.pos)
            self._hovering = True
        elif self._hovering:
            self.tooltip.hide()
            self._hovering = False
        return lines is not None

    def draw(self, target: pygame.Surface) -> None:
        if self.surface is not None:
            target.blit(self.surface, self.rect.topleft)


def _kilo(value: float, _pos: int) -> str:
    if value >= 1000:
        return f"{value / 1000:g}k"
    return f"{value:g}"


class AltitudeChart(ChartView):
    def __init__(self, catalog: Sequence[TrackedObject], tooltip: Tooltip, cfg: ChartCfg = CHART_CFG) -> None:
        super().__init__(catalog, tooltip, cfg)
        self.histogram: AltitudeHistogram | None = None

    def plot(self, fig: Figure, ax: Axes, view_state: ViewState) -> None:
        cfg = self.cfg
        full = view_state.altitude_range is AltitudeRange.FULL
        hist = altitude_histogram(altitudes_of(self.catalog), full, cfg)
        self.histogram = hist
        edges = hist.edges
        ax.bar(edges[:-1], hist.counts, width=np.diff(edges), align="edge", color=cfg.bar_color, edgecolor=cfg.face_color)
        if hist.use_log:
            ax.set_yscale("symlog", linthresh=cfg.symlog_constant)
            fig.text(0.99, 0.01, "⚠ Y-axis uses symmetric log scale for readability", color=cfg.muted_color, ha="right", fontsize=8)
        ax.set_xlim(edges[0], edges[-1])
        ax.xaxis.set_major_formatter(FuncFormatter(_kilo))

        lines = cfg.full_reference_lines if full else cfg.leo_reference_lines
        top = max(1, int(hist.counts.max()) if hist.counts.size else 1)
        for value, label, color in lines:
            ax.axvline(value, color=color, linestyle="--", linewidth=1, alpha=0.8)
            ax.text(value, top, f" {label}", color=color, fontsize=8, rotation=90, va="top")

        title = "Altitude Distribution — Full Range" if full else "Altitude Distribution — LEO Focus (150–2,000 km)"
        ylabel = "Object Count (symlog scale)" if hist.use_log else "Object Count"
        self._style_labels(ax, title, "Altitude (km)", ylabel)

    def lines_at(self, x: float, y: float) -> list[str] | None:
        hist = self.histogram
        if hist is None:
            return None
        idx = hist.bin_at(x)
        if idx is None:
            return None
        lo, hi = hist.edges[idx], hist.edges[idx + 1]
        return ["Altitude Range", f"{round(lo)}–{round(hi)} km", f"Object Count: {int(hist.counts[idx])}"]


class HeatmapChart(ChartView):
    def __init__(self, catalog: Sequence[TrackedObject], tooltip: Tooltip, cfg: ChartCfg = CHART_CFG) -> None:
        super().__init__(catalog, tooltip, cfg)
        self.grid: CongestionGrid | None = None

    def plot(self, fig: Figure, ax: Axes, view_state: ViewState) -> None:
        cfg = self.cfg
        grid = regime_congestion(self.catalog, cfg)
        self.grid = grid
        n_alt, n_inc = grid.counts.shape
        inc_edges = np.linspace(0.0, n_inc * grid.inclination_step_deg, n_inc + 1)
        alt_edges = np.linspace(0.0, n_alt * grid.altitude_step_km, n_alt + 1)
        cmap = matplotlib.colormaps["inferno"].copy()
        cmap.set_bad(cfg.empty_cell_color)
        masked = np.ma.masked_equal(grid.counts, 0)
        mesh = ax.pcolormesh(inc_edges, alt_edges, masked, cmap=cmap, vmin=0, vmax=max(1, grid.max_count))
        colorbar = fig.colorbar(mesh, ax=ax)
        colorbar.set_label("Count", color=cfg.text_color)
        colorbar.ax.tick_params(colors=cfg.text_color, labelsize=8)
        ax.set_facecolor(cfg.empty_cell_color)
        ax.xaxis.set_major_formatter(FuncFormatter(lambda v, _pos: f"{v:.0f}°"))

        for inc, alt, label, color in cfg.heatmap_annotations:
            ax.plot([inc], [alt], marker="o", markersize=6, markerfacecolor="none", markeredgecolor=color)
            ax.annotate(label, (inc, alt), xytext=(8, 0), textcoords="offset points", color=color, fontsize=8, va="center")

        self._style_labels(
            ax,
            "Orbital Regime Congestion — Altitude vs. Inclination (LEO)",
            "Inclination (degrees)",
            "Altitude (km)",
        )

    def lines_at(self, x: float, y: float) -> list[str] | None:
        grid = self.grid
        if grid is None:
            return None
        cell = grid.cell_at(x, y)
        if cell is None:
            return None
        ai, ii = cell
        alt_low = ai * grid.altitude_step_km
        inc_low = ii * grid.inclination_step_deg
        return [
            "Regime Cell",
            f"Altitude: {round(alt_low)}–{round(alt_low + grid.altitude_step_km)} km",
            f"Inclination: {inc_low:.0f}°–{inc_low + grid.inclination_step_deg:.0f}°",
            f"Objects: {int(grid.counts[ai, ii])}",
        ]


class TimelineChart(ChartView):
    def __init__(self, catalog: Sequence[TrackedObject], tooltip: Tooltip, cfg: ChartCfg = CHART_CFG) -> None:
        super().__init__(catalog, tooltip, cfg)
        self.series: YearSeries | None = None

    def plot(self, fig: Figure, ax: Axes, view_state: ViewState) -> None:
        cfg = self.cfg
        cumulative = view_state.timeline_mode is TimelineMode.CUMULATIVE
        series = launch_year_series(self.catalog, cumulative, cfg)
        self.series = series
        if cumulative:
            ax.fill_between(series.years, series.counts, color=cfg.bar_color, alpha=0.15, linewidth=0)
            ax.plot(series.years, series.counts, color=cfg.bar_color, linewidth=2)
            ax.scatter(series.years, series.counts, s=9, color=cfg.bar_color, edgecolors=cfg.face_color, zorder=3)
        else:
            ax.bar(series.years, series.counts, width=0.8, color=cfg.year_bar_color)
        if series.counts:
            ax.set_ylim(0, max(series.counts) * 1.05)
        ax.xaxis.set_major_locator(MultipleLocator(5))

        for year, label, color in cfg.timeline_events:
            if year in series.years:
                ax.axvline(year, color=color, linestyle="--", linewidth=1)
                ax.annotate(label, (year, 1.0), xycoords=("data", "axes fraction"), xytext=(4, -4),
                            textcoords="offset points", color=color, fontsize=8, va="top")

        title = (
            "Cumulative Debris Accumulation by Launch Year"
            if cumulative
            else "Currently Tracked Objects by Launch Year"
        )
        ylabel = "Cumulative Object Count" if cumulative else "Object Count"
        self._style_labels(ax, title, "Launch Year", ylabel)

    def lines_at(self, x: float, y: float) -> list[str] | None:
        series = self.series
        if series is None or not series.years:
            return None
        year = int(round(x))
        if year not in series.years:
            return None
        i = series.years.index(year)
        if series.cumulative:
            return [f"Year: {year}", f"Launched that year: {series.raw[i]}", f"Cumulative total: {series.counts[i]}"]
        if y > series.counts[i]:
            return None
        return [f"Year: {year}", f"Objects launched: {series.counts[i]}"]


__all__ = ["AltitudeChart", "ChartView", "HeatmapChart", "TimelineChart", "figure_to_surface"]
