"""Owns the active view and starts, stops and re-initialises its surface."""
from __future__ import annotations

import pygame

from debris_tracker.core.commands import Command, Reaction, SetActiveView, SetProjection, apply_command
from debris_tracker.core.logging_utils import get_logger
from debris_tracker.core.model import ActiveView, ProjectionMode, RotationState
from debris_tracker.core.propagation import resolve_many
from debris_tracker.core.timekeeping import Scheduler

from .charts import AltitudeChart, ChartView, HeatmapChart, TimelineChart
from .globe import GlobeSurface, Resolver
from .planar import PlanarMapSurface
from .surface import SurfaceSession, SurfaceState, TrackerContext

logger = get_logger(__name__)


class ViewController:
    """Single entry point for commands, resizes and pointer events.

    The globe rotation outlives individual globe surfaces; pointer state and the
    loop handle belong to one surface instance.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        context: TrackerContext,
        rect: pygame.Rect,
        *,
        charts: dict[ActiveView, ChartView] | None = None,
        resolver: Resolver = resolve_many,
    ) -> None:
        self._scheduler = scheduler
        self._context = context
        self._resolver = resolver
        self.rect = pygame.Rect(rect)
        self.rotation = RotationState(*context.tracker_cfg.initial_rotation)
        self.globe: GlobeSurface | None = None
        self.map: PlanarMapSurface | None = None
        if charts is None:
            charts = {
                ActiveView.ALTITUDE: AltitudeChart(context.catalog, context.tooltip),
                ActiveView.HEATMAP: HeatmapChart(context.catalog, context.tooltip),
                ActiveView.TIMELINE: TimelineChart(context.catalog, context.tooltip),
            }
        self.charts = charts
        self._pending_rect: pygame.Rect | None = None
        self._resize_handle: int | None = None
        self.reinitializations = 0

    @property
    def context(self) -> TrackerContext:
        return self._context

    def start(self) -> None:
        self._activate_view()

    def dispatch(self, command: Command) -> Reaction:
        reaction = apply_command(self._context.view_state, self._context.clock, command, self._context.tracker_cfg)
        if reaction is Reaction.SWITCH_VIEW:
            self._activate_view()
        elif reaction is Reaction.SWITCH_PROJECTION:
            self._apply_projection()
        elif reaction is Reaction.RERENDER_CHART:
            self._render_chart()
        return reaction

    def switch_view(self, view: ActiveView) -> Reaction:
        return self.dispatch(SetActiveView(view))

    def switch_projection(self, to_perspective: bool) -> Reaction:
        mode = ProjectionMode.PERSPECTIVE if to_perspective else ProjectionMode.PLANAR
        return self.dispatch(SetProjection(mode))

    def toggle_projection(self) -> Reaction:
        return self.switch_projection(self._context.view_state.projection is ProjectionMode.PLANAR)

    def on_resize(self, rect: pygame.Rect) -> None:
        """Coalesce a burst of resizes into one re-initialisation."""

        self._pending_rect = pygame.Rect(rect)
        self._scheduler.clear_timer(self._resize_handle)
        self._resize_handle = self._scheduler.set_timeout(
            self._reinitialize, self._context.tracker_cfg.resize_debounce_ms
        )

    def _reinitialize(self) -> None:
        self._resize_handle = None
        if self._pending_rect is not None:
            self.rect = self._pending_rect
            self._pending_rect = None
        self.reinitializations += 1
        logger.debug("Re-initialising %s at %sx%s", self._context.view_state.active_view.value, *self.rect.size)
        self._context.tooltip.hide()
        if self._context.view_state.active_view is ActiveView.TRACKER:
            self._stop_surfaces()
            self._start_tracker()
        else:
            self._render_chart()

    def _activate_view(self) -> None:
        view = self._context.view_state.active_view
        logger.debug("Switching to %s view", view.value)
        self._context.tooltip.hide()
        if view is ActiveView.TRACKER:
            self._resume_tracker()
        else:
            self._render_chart()

    def _apply_projection(self) -> None:
        logger.debug("Switching projection to %s", self._context.view_state.projection.value)
        self._context.tooltip.hide()
        self._stop_surfaces()
        if self._context.view_state.active_view is ActiveView.TRACKER:
            self._start_tracker()

    def _resume_tracker(self) -> None:
        view_state = self._context.view_state
        if view_state.projection is ProjectionMode.PERSPECTIVE:
            globe = self.globe
            if globe is None or globe.state is not SurfaceState.ANIMATING or globe.rect.size != self.rect.size:
                self._start_tracker()
        else:
            # the map timer cancels itself while the tracker is hidden
            self._start_tracker()

    def _start_tracker(self) -> None:
        if self._context.view_state.projection is ProjectionMode.PERSPECTIVE:
            if self.globe is not None:
                self.globe.stop()
            session = SurfaceSession(rotation=self.rotation)
            self.globe = GlobeSurface(self._scheduler, self._context, session, self.rect, resolver=self._resolver)
            self.globe.initialize()
        else:
            if self.map is not None:
                self.map.stop()
            self.map = PlanarMapSurface(self._scheduler, self._context, SurfaceSession(), self.rect, resolver=self._resolver)
            self.map.initialize()

    def _stop_surfaces(self) -> None:
        if self.globe is not None:
            self.globe.stop()
            self.globe = None
        if self.map is not None:
            self.map.stop()
            self.map = None

    def _render_chart(self) -> None:
        chart = self.active_chart
        if chart is not None:
            chart.render(self.rect, self._context.view_state)

    @property
    def active_chart(self) -> ChartView | None:
        return self.charts.get(self._context.view_state.active_view)

    def _active_surface(self) -> GlobeSurface | PlanarMapSurface | None:
        view_state = self._context.view_state
        if view_state.tracker_perspective:
            return self.globe
        if view_state.tracker_planar:
            return self.map
        return None

    def handle_event(self, event: pygame.event.Event) -> bool:
        surface = self._active_surface()
        if surface is not None:
            return surface.handle_event(event)
        chart = self.active_chart
        if chart is not None:
            return chart.handle_event(event)
        return False

    def draw(self, target: pygame.Surface) -> None:
        surface = self._active_surface()
        if surface is not None:
            surface.draw(target)
            return
        chart = self.active_chart
        if chart is not None:
            chart.draw(target)


__all__ = ["ViewController"]
