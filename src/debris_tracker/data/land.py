"""World land boundaries, fetched once in the background and shared by both surfaces."""
from __future__ import annotations

import json
from concurrent.futures import Executor, Future
from pathlib import Path
from typing import Any, Iterator

import numpy as np
import requests

from debris_tracker.core.config import TRACKER_CFG, TrackerCfg
from debris_tracker.core.logging_utils import get_logger
from debris_tracker.core.model import LandLoadError

logger = get_logger(__name__)

Ring = np.ndarray


def _iter_geometries(node: Any) -> Iterator[dict]:
    kind = node.get("type") if isinstance(node, dict) else None
    if kind == "FeatureCollection":
        for feature in node.get("features") or []:
            yield from _iter_geometries(feature)
    elif kind == "Feature":
        geometry = node.get("geometry")
        if geometry:
            yield from _iter_geometries(geometry)
    elif kind == "GeometryCollection":
        for geometry in node.get("geometries") or []:
            yield from _iter_geometries(geometry)
    elif kind in ("Polygon", "MultiPolygon"):
        yield node


def rings_from_geojson(document: Any) -> list[Ring]:
    """Outer rings of every polygon as ``(n, 2)`` lon/lat arrays in degrees."""

    if not isinstance(document, dict) or "type" not in document:
        raise LandLoadError("land boundary resource is not GeoJSON")
    rings: list[Ring] = []
    for geometry in _iter_geometries(document):
        coordinates = geometry.get("coordinates") or []
        polygons = [coordinates] if geometry["type"] == "Polygon" else coordinates
        for polygon in polygons:
            if not polygon:
                continue
            outer = np.asarray(polygon[0], dtype=float)
            if outer.ndim == 2 and outer.shape[0] >= 3:
                rings.append(outer[:, :2])
    return rings


def fetch_geojson(source: str, cfg: TrackerCfg = TRACKER_CFG) -> Any:
    if source.startswith(("http://", "https://")):
        try:
            response = requests.get(source, timeout=cfg.fetch_timeout_s)
            response.raise_for_status()
            return response.json()
        except (requests.RequestException, ValueError) as exc:
            raise LandLoadError(f"Could not download land boundaries from {source}: {exc}") from exc
    try:
        with Path(source).open("r", encoding="utf-8") as fh:
            return json.load(fh)
    except (OSError, json.JSONDecodeError) as exc:
        raise LandLoadError(f"Could not read land boundaries {source}: {exc}") from exc


def load_land(source: str, cfg: TrackerCfg = TRACKER_CFG) -> list[Ring]:
    rings = rings_from_geojson(fetch_geojson(source, cfg))
    logger.info("Loaded %d land polygons from %s", len(rings), source)
    return rings


class LandAtlas:
    """Holds the land rings once the single background fetch completes."""

    def __init__(self, source: str | None, cfg: TrackerCfg = TRACKER_CFG) -> None:
        self._source = source
        self._cfg = cfg
        self._future: Future[list[Ring]] | None = None
        self._polygons: list[Ring] | None = None if source else []
        self._error: LandLoadError | None = None

    @classmethod
    def disabled(cls) -> "LandAtlas":
        return cls(None)

    @classmethod
    def from_rings(cls, rings: list[Ring]) -> "LandAtlas":
        atlas = cls(None)
        atlas._polygons = list(rings)
        return atlas

    def request(self, executor: Executor) -> None:
        if self._source is None or self._future is not None:
            return
        self._future = executor.submit(load_land, self._source, self._cfg)

    def _collect(self) -> None:
        future = self._future
        if future is None or not future.done() or self._polygons is not None or self._error is not None:
            return
        try:
            self._polygons = future.result()
        except LandLoadError as exc:
            logger.error("%s", exc)
            self._error = exc

    @property
    def polygons(self) -> list[Ring] | None:
        self._collect()
        return self._polygons

    @property
    def error(self) -> LandLoadError | None:
        self._collect()
        return self._error


__all__ = ["LandAtlas", "fetch_geojson", "load_land", "rings_from_geojson"]
