"""User intents expressed as command objects and the single function applying them."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from .config import TRACKER_CFG, TrackerCfg
from .model import ActiveView, AltitudeRange, ProjectionMode, Regime, TimelineMode, ViewState
from .timekeeping import SimulationClock


class Reaction(Enum):
    """Follow-up work the view lifecycle controller performs after a command."""

    NONE = "none"
    SWITCH_VIEW = "switch_view"
    SWITCH_PROJECTION = "switch_projection"
    RERENDER_CHART = "rerender_chart"


@dataclass(frozen=True)
class SetActiveView:
    view: ActiveView


@dataclass(frozen=True)
class SetProjection:
    projection: ProjectionMode


@dataclass(frozen=True)
class SetDisplayBudget:
    budget: int


@dataclass(frozen=True)
class AdjustDisplayBudget:
    steps: int


@dataclass(frozen=True)
class SetTimeWarp:
    factor: float


@dataclass(frozen=True)
class CycleTimeWarp:
    direction: int = 1


@dataclass(frozen=True)
class ToggleRegime:
    regime: Regime


@dataclass(frozen=True)
class SetAltitudeRange:
    altitude_range: AltitudeRange


@dataclass(frozen=True)
class SetTimelineMode:
    mode: TimelineMode


@dataclass(frozen=True)
class PinTarget:
    name: str | None


Command = Union[
    SetActiveView,
    SetProjection,
    SetDisplayBudget,
    AdjustDisplayBudget,
    SetTimeWarp,
    CycleTimeWarp,
    ToggleRegime,
    SetAltitudeRange,
    SetTimelineMode,
    PinTarget,
]


def clamp_budget(budget: int, cfg: TrackerCfg = TRACKER_CFG) -> int:
    return max(cfg.display_budget_min, min(cfg.display_budget_max, int(budget)))


def next_time_warp(current: float, direction: int, options: tuple[float, ...]) -> float:
    """Neighbouring preset in ``options``; values between presets snap to the nearest."""

    if not options:
        return current
    nearest = min(range(len(options)), key=lambda i: abs(options[i] - current))
    if options[nearest] != current:
        return options[nearest]
    step = 1 if direction >= 0 else -1
    return options[(nearest + step) % len(options)]


def apply_command(
    view_state: ViewState,
    clock: SimulationClock,
    command: Command,
    cfg: TrackerCfg = TRACKER_CFG,
) -> Reaction:
    if isinstance(command, SetActiveView):
        if command.view is view_state.active_view:
            return Reaction.NONE
        view_state.active_view = command.view
        return Reaction.SWITCH_VIEW
    if isinstance(command, SetProjection):
        if command.projection is view_state.projection:
            return Reaction.NONE
        view_state.projection = command.projection
        return Reaction.SWITCH_PROJECTION
    if isinstance(command, SetDisplayBudget):
        view_state.display_budget = clamp_budget(command.budget, cfg)
        return Reaction.NONE
    if isinstance(command, AdjustDisplayBudget):
        view_state.display_budget = clamp_budget(
            view_state.display_budget + command.steps * cfg.display_budget_step, cfg
        )
        return Reaction.NONE
    if isinstance(command, SetTimeWarp):
        clock.time_warp = float(command.factor)
        return Reaction.NONE
    if isinstance(command, CycleTimeWarp):
        clock.time_warp = next_time_warp(clock.time_warp, command.direction, cfg.time_warp_options)
        return Reaction.NONE
    if isinstance(command, ToggleRegime):
        visibility = view_state.regime_visibility
        visibility[command.regime] = not visibility.get(command.regime, True)
        return Reaction.NONE
    if isinstance(command, SetAltitudeRange):
        view_state.altitude_range = command.altitude_range
        if view_state.active_view is ActiveView.ALTITUDE:
            return Reaction.RERENDER_CHART
        return Reaction.NONE
    if isinstance(command, SetTimelineMode):
        view_state.timeline_mode = command.mode
        if view_state.active_view is ActiveView.TIMELINE:
            return Reaction.RERENDER_CHART
        return Reaction.NONE
    if isinstance(command, PinTarget):
        view_state.pinned_target = command.name
        return Reaction.NONE
    raise TypeError(f"Unsupported command: {command!r}")


__all__ = [
    "AdjustDisplayBudget",
    "Command",
    "CycleTimeWarp",
    "PinTarget",
    "Reaction",
    "SetActiveView",
    "SetAltitudeRange",
    "SetDisplayBudget",
    "SetProjection",
    "SetTimeWarp",
    "SetTimelineMode",
    "ToggleRegime",
    "apply_command",
    "clamp_budget",
    "next_time_warp",
]
