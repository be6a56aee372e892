"""Hit-testing and tooltip content shared by the globe and map surfaces."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable

from debris_tracker.core.config import TRACKER_CFG
from debris_tracker.core.model import GeodeticPoint, TrackedObject


@dataclass(frozen=True)
class Marker:
    """Screen placement of one resolved object for the current tick."""

    obj: TrackedObject
    point: GeodeticPoint
    x: float
    y: float
    is_target: bool = False


def nearest_marker(
    markers: Iterable[Marker],
    pointer: tuple[float, float] | None,
    radius: float = TRACKER_CFG.hover_radius_px,
) -> Marker | None:
    """Closest marker strictly within ``radius`` pixels of ``pointer``."""

    if pointer is None:
        return None
    px, py = pointer
    best: Marker | None = None
    best_distance = radius
    for marker in markers:
        distance = math.hypot(px - marker.x, py - marker.y)
        if distance < best_distance:
            best_distance = distance
            best = marker
    return best


def tooltip_lines(obj: TrackedObject, point: GeodeticPoint) -> list[str]:
    return [
        obj.name,
        f"Alt: {round(obj.altitude_km)} km",
        f"Lat: {point.latitude_deg:.2f}°",
        f"Lon: {point.longitude_deg:.2f}°",
        f"Regime: {obj.regime.label}",
        f"Type: {obj.object_type}",
        f"Country: {obj.country}",
    ]


__all__ = ["Marker", "nearest_marker", "tooltip_lines"]
