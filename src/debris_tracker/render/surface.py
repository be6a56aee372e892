"""State shared by the two projection surfaces."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Sequence

from debris_tracker.core.config import RENDER_CFG, TRACKER_CFG, RenderCfg, TrackerCfg
from debris_tracker.core.model import RotationState, TrackedObject, ViewState
from debris_tracker.core.timekeeping import SimulationClock
from debris_tracker.data.land import LandAtlas

from .assets import FontBook
from .ui import Tooltip


class SurfaceState(Enum):
    UNINITIALIZED = "uninitialized"
    ANIMATING = "animating"
    STOPPED = "stopped"


@dataclass
class TrackerContext:
    """Everything a surface reads each tick. Catalog entries are never mutated."""

    catalog: Sequence[TrackedObject]
    clock: SimulationClock
    view_state: ViewState
    land: LandAtlas
    tooltip: Tooltip
    fonts: FontBook | None = None
    index: Mapping[str, TrackedObject] | None = None
    tracker_cfg: TrackerCfg = TRACKER_CFG
    render_cfg: RenderCfg = RENDER_CFG


@dataclass
class SurfaceSession:
    """Per-surface interaction state and the handle of its pending frame or timer."""

    rotation: RotationState = field(default_factory=RotationState)
    pointer: tuple[float, float] | None = None
    loop_handle: int | None = None
    dragging: bool = False


__all__ = ["SurfaceSession", "SurfaceState", "TrackerContext"]
