"""Catalog ingestion: tabular element-set records to an immutable object list."""
from __future__ import annotations

import csv
import io
from datetime import datetime
from pathlib import Path
from typing import Iterable, Iterator, Mapping, Sequence, overload

import requests

from debris_tracker.core.config import TRACKER_CFG, TrackerCfg
from debris_tracker.core.logging_utils import get_logger
from debris_tracker.core.model import CatalogLoadError, TrackedObject, classify_regime
from debris_tracker.core.propagation import altitude_at, parse_elements
from debris_tracker.core.timekeeping import wall_ms

logger = get_logger(__name__)

_DATE_FORMATS = ("%Y-%m-%d", "%Y-%m-%dT%H:%M:%S", "%Y-%m-%d %H:%M:%S", "%Y/%m/%d", "%d %b %Y")


class Catalog(Sequence[TrackedObject]):
    """Ordered, read-only collection of tracked objects with a name index.

    When names repeat, the index points at the last ingested object.
    """

    def __init__(self, objects: Iterable[TrackedObject], cfg: TrackerCfg = TRACKER_CFG) -> None:
        self._objects: tuple[TrackedObject, ...] = tuple(objects)
        self._by_name: dict[str, TrackedObject] = {obj.name: obj for obj in self._objects}
        self._cfg = cfg

    @overload
    def __getitem__(self, index: int) -> TrackedObject: ...

    @overload
    def __getitem__(self, index: slice) -> Sequence[TrackedObject]: ...

    def __getitem__(self, index):
        return self._objects[index]

    def __len__(self) -> int:
        return len(self._objects)

    def __iter__(self) -> Iterator[TrackedObject]:
        return iter(self._objects)

    @property
    def index(self) -> Mapping[str, TrackedObject]:
        return self._by_name

    def find(self, name: str) -> TrackedObject | None:
        return self._by_name.get(name)

    def search(self, query: str) -> list[TrackedObject]:
        needle = query.upper().strip()
        if len(needle) < self._cfg.search_min_chars:
            return []
        matches: list[TrackedObject] = []
        for obj in self._objects:
            if needle in obj.name.upper():
                matches.append(obj)
                if len(matches) >= self._cfg.search_max_results:
                    break
        return matches


def parse_launch_year(value: str | None) -> int | None:
    if not value:
        return None
    text = value.strip()
    if not text:
        return None
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).year
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).year
        except ValueError:
            continue
    return None


def _field(row: Mapping[str, str | None], key: str, default: str) -> str:
    value = row.get(key)
    if value is None:
        return default
    value = value.strip()
    return value or default


def parse_record(
    row: Mapping[str, str | None], epoch_ms: float, cfg: TrackerCfg = TRACKER_CFG
) -> TrackedObject:
    """Build one object from a CSV row; raises ``ValueError``/``KeyError`` on bad rows."""

    line1 = row.get("TLE_LINE1")
    line2 = row.get("TLE_LINE2")
    if not line1 or not line2:
        raise KeyError("missing element set line")
    elements = parse_elements(line1, line2)

    altitude = altitude_at(elements, epoch_ms, cfg.earth_radius_km)
    if altitude is None:
        altitude = 0.0

    try:
        inclination = float(row.get("INCLINATION") or 0.0)
    except ValueError:
        inclination = 0.0

    launch_year = parse_launch_year(row.get("LAUNCH_DATE")) or parse_launch_year(row.get("EPOCH"))

    return TrackedObject(
        name=_field(row, "OBJECT_NAME", "UNKNOWN"),
        elements=elements,
        altitude_km=altitude,
        inclination_deg=inclination,
        launch_year=launch_year,
        country=_field(row, "COUNTRY_CODE", "UNK"),
        object_type=_field(row, "OBJECT_TYPE", "UNKNOWN"),
        rcs_size=_field(row, "RCS_SIZE", "UNKNOWN"),
        regime=classify_regime(altitude, cfg),
    )


def parse_rows(
    rows: Iterable[Mapping[str, str | None]],
    epoch_ms: float | None = None,
    cfg: TrackerCfg = TRACKER_CFG,
) -> Catalog:
    epoch_ms = wall_ms() if epoch_ms is None else epoch_ms
    objects: list[TrackedObject] = []
    dropped = 0
    for line_no, row in enumerate(rows, start=2):
        try:
            objects.append(parse_record(row, epoch_ms, cfg))
        except (ValueError, KeyError, IndexError) as exc:
            dropped += 1
            logger.debug("Dropping catalog row %d: %s", line_no, exc)
    logger.info("Processed %d objects (%d rows dropped)", len(objects), dropped)
    return Catalog(objects, cfg)


def read_catalog_text(source: str, cfg: TrackerCfg = TRACKER_CFG) -> str:
    if source.startswith(("http://", "https://")):
        try:
            response = requests.get(source, timeout=cfg.fetch_timeout_s)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise CatalogLoadError(f"Could not download catalog from {source}: {exc}") from exc
        return response.text
    path = Path(source)
    try:
        return path.read_text(encoding="utf-8-sig")
    except OSError as exc:
        raise CatalogLoadError(f"Could not read catalog {path}: {exc}") from exc


def load_catalog(source: str, *, epoch_ms: float | None = None, cfg: TrackerCfg = TRACKER_CFG) -> Catalog:
    """Read and parse the catalog at ``source`` (path or URL)."""

    text = read_catalog_text(source, cfg)
    reader = csv.DictReader(io.StringIO(text))
    if not reader.fieldnames or "TLE_LINE1" not in reader.fieldnames:
        raise CatalogLoadError(f"{source} has no TLE_LINE1/TLE_LINE2 columns")
    return parse_rows(reader, epoch_ms, cfg)


__all__ = [
    "Catalog",
    "load_catalog",
    "parse_launch_year",
    "parse_record",
    "parse_rows",
    "read_catalog_text",
]
