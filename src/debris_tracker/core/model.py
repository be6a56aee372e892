"""Data models for the tracked catalog and the dashboard view state."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .config import TRACKER_CFG, TrackerCfg


class Regime(str, Enum):
    LEO = "leo"
    MEO = "meo"
    GEO = "geo"

    @property
    def label(self) -> str:
        return self.value.upper()


class ActiveView(str, Enum):
    TRACKER = "globe"
    ALTITUDE = "altitude"
    HEATMAP = "heatmap"
    TIMELINE = "timeline"


class ProjectionMode(str, Enum):
    PERSPECTIVE = "3d"
    PLANAR = "2d"


class AltitudeRange(str, Enum):
    LEO = "leo"
    FULL = "full"


class TimelineMode(str, Enum):
    YEARLY = "yearly"
    CUMULATIVE = "cumulative"


def classify_regime(altitude_km: float, cfg: TrackerCfg = TRACKER_CFG) -> Regime:
    """Coarse altitude band for ``altitude_km``."""

    if altitude_km < cfg.leo_upper_km:
        return Regime.LEO
    if altitude_km < cfg.meo_upper_km:
        return Regime.MEO
    return Regime.GEO


@dataclass(frozen=True, eq=False)
class TrackedObject:
    """One catalog entry. The regime is fixed at ingestion time."""

    name: str
    elements: Any
    altitude_km: float
    inclination_deg: float
    launch_year: int | None
    country: str
    object_type: str
    rcs_size: str
    regime: Regime


@dataclass(frozen=True)
class GeodeticPoint:
    latitude_deg: float
    longitude_deg: float
    height_km: float = 0.0


@dataclass
class RotationState:
    """Globe rotation ``[longitude, latitude]`` in degrees."""

    longitude: float = TRACKER_CFG.initial_rotation[0]
    latitude: float = TRACKER_CFG.initial_rotation[1]

    def apply_drag(self, dx: float, dy: float, scale: float, sensitivity: float = TRACKER_CFG.drag_sensitivity) -> None:
        k = sensitivity / max(scale, 1e-9)
        self.longitude += dx * k
        self.latitude -= dy * k
        self.latitude = max(-90.0, min(90.0, self.latitude))

    def as_tuple(self) -> tuple[float, float]:
        return (self.longitude, self.latitude)


def _default_regime_visibility() -> dict[Regime, bool]:
    return {regime: True for regime in Regime}


@dataclass
class ViewState:
    """Session-lifetime UI state, mutated only through commands."""

    active_view: ActiveView = ActiveView.TRACKER
    projection: ProjectionMode = ProjectionMode.PERSPECTIVE
    display_budget: int = TRACKER_CFG.default_display_budget
    regime_visibility: dict[Regime, bool] = field(default_factory=_default_regime_visibility)
    pinned_target: str | None = None
    altitude_range: AltitudeRange = AltitudeRange.LEO
    timeline_mode: TimelineMode = TimelineMode.YEARLY

    @property
    def tracker_perspective(self) -> bool:
        return self.active_view is ActiveView.TRACKER and self.projection is ProjectionMode.PERSPECTIVE

    @property
    def tracker_planar(self) -> bool:
        return self.active_view is ActiveView.TRACKER and self.projection is ProjectionMode.PLANAR


class ResourceLoadError(RuntimeError):
    """A startup resource could not be loaded; the dashboard cannot proceed."""


class CatalogLoadError(ResourceLoadError):
    pass


class LandLoadError(ResourceLoadError):
    pass


__all__ = [
    "ActiveView",
    "AltitudeRange",
    "CatalogLoadError",
    "GeodeticPoint",
    "LandLoadError",
    "ProjectionMode",
    "Regime",
    "ResourceLoadError",
    "RotationState",
    "TimelineMode",
    "TrackedObject",
    "ViewState",
    "classify_regime",
]
