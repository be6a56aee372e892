"""Perspective globe surface: continuous animation on the scheduler's frame queue."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Callable, Iterable, Mapping, Sequence

import numpy as np
import pygame

from debris_tracker.core.logging_utils import get_logger
from debris_tracker.core.model import GeodeticPoint, TrackedObject, ViewState
from debris_tracker.core.propagation import great_circle_distance, resolve_many
from debris_tracker.core.selection import select_visible
from debris_tracker.core.timekeeping import Scheduler

from .draw import (
    draw_globe_land,
    draw_globe_lines,
    draw_marker,
    draw_ring,
    draw_sphere,
    draw_status_line,
    draw_target_label,
    regime_color,
)
from .hover import Marker, nearest_marker, tooltip_lines
from .projection import OrthographicProjection, graticule_lines
from .surface import SurfaceSession, SurfaceState, TrackerContext

logger = get_logger(__name__)

Resolver = Callable[[Iterable[TrackedObject], float], list[tuple[TrackedObject, GeodeticPoint]]]

_GRATICULE = graticule_lines()
HEMISPHERE = math.pi / 2.0


@dataclass
class GlobeFrame:
    """What one globe tick decided to show."""

    selected: int
    total: int
    markers: list[Marker] = field(default_factory=list)
    target: Marker | None = None
    hovered: Marker | None = None

    @property
    def status_text(self) -> str:
        return f"Displaying: {self.selected} / {self.total} objects"


def compose_globe_frame(
    catalog: Sequence[TrackedObject],
    view_state: ViewState,
    epoch_ms: float,
    projection: OrthographicProjection,
    pointer: tuple[float, float] | None,
    *,
    hover_radius: float,
    index: Mapping[str, TrackedObject] | None = None,
    resolver: Resolver = resolve_many,
) -> GlobeFrame:
    """Select, resolve, cull to the front hemisphere and hit-test one frame."""

    subset = select_visible(
        catalog,
        view_state.regime_visibility,
        view_state.display_budget,
        view_state.pinned_target,
        index=index,
    )
    frame = GlobeFrame(selected=len(subset), total=len(catalog))
    resolved = resolver(subset, epoch_ms)
    if not resolved:
        return frame

    lons = np.array([point.longitude_deg for _, point in resolved])
    lats = np.array([point.latitude_deg for _, point in resolved])
    center_lon, center_lat = projection.center()
    front = great_circle_distance(center_lon, center_lat, lons, lats) <= HEMISPHERE
    xs, ys, _ = projection.project(lons, lats)

    pinned = view_state.pinned_target
    for i, (obj, point) in enumerate(resolved):
        if not front[i]:
            continue
        marker = Marker(obj, point, float(xs[i]), float(ys[i]), is_target=pinned is not None and obj.name == pinned)
        frame.markers.append(marker)
        if marker.is_target:
            frame.target = marker
    frame.hovered = nearest_marker(frame.markers, pointer, hover_radius)
    return frame


class GlobeSurface:
    """Rotatable orthographic globe.

    ``UNINITIALIZED -> ANIMATING -> STOPPED``; stopping is terminal for the instance.
    At most one frame request is pending at any time.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        context: TrackerContext,
        session: SurfaceSession,
        rect: pygame.Rect,
        *,
        resolver: Resolver = resolve_many,
    ) -> None:
        self._scheduler = scheduler
        self._context = context
        self._session = session
        self._resolver = resolver
        self.rect = pygame.Rect(rect)
        self.state = SurfaceState.UNINITIALIZED
        self.projection: OrthographicProjection | None = None
        self.canvas: pygame.Surface | None = None
        self.last_frame: GlobeFrame | None = None

    @property
    def session(self) -> SurfaceSession:
        return self._session

    def initialize(self, rect: pygame.Rect | None = None) -> None:
        if self.state is SurfaceState.STOPPED:
            raise RuntimeError("globe surface has been stopped")
        if rect is not None:
            self.rect = pygame.Rect(rect)
        self.projection = OrthographicProjection(
            self.rect.size,
            self._session.rotation,
            divisor=self._context.tracker_cfg.globe_scale_divisor,
        )
        self.canvas = pygame.Surface(self.rect.size)
        self._scheduler.cancel_frame(self._session.loop_handle)
        self._session.loop_handle = self._scheduler.request_frame(self._frame)
        self.state = SurfaceState.ANIMATING
        logger.debug("Globe surface initialised at %sx%s", *self.rect.size)

    def stop(self) -> None:
        self._scheduler.cancel_frame(self._session.loop_handle)
        self._session.loop_handle = None
        self._session.dragging = False
        self.state = SurfaceState.STOPPED

    def _frame(self, now_ms: float) -> None:
        self._session.loop_handle = self._scheduler.request_frame(self._frame)
        if not self._context.view_state.tracker_perspective:
            return
        epoch_ms = self._context.clock.tick(now_ms)
        self.render(epoch_ms)

    def render(self, epoch_ms: float) -> GlobeFrame:
        assert self.projection is not None and self.canvas is not None
        ctx = self._context
        cfg = ctx.render_cfg
        canvas = self.canvas
        projection = self.projection

        canvas.fill(cfg.page_color)
        draw_sphere(canvas, projection, cfg.sphere_color)
        draw_globe_lines(canvas, projection, _GRATICULE, cfg.graticule_color)
        land = ctx.land.polygons
        if land:
            draw_globe_land(
                canvas,
                projection,
                land,
                fill_color=cfg.land_fill_color,
                stroke_color=cfg.land_stroke_color,
            )

        frame = compose_globe_frame(
            ctx.catalog,
            ctx.view_state,
            epoch_ms,
            projection,
            self._session.pointer,
            hover_radius=ctx.tracker_cfg.hover_radius_px,
            index=ctx.index,
            resolver=self._resolver,
        )
        for marker in frame.markers:
            radius = cfg.globe_target_radius if marker.is_target else cfg.globe_marker_radius
            draw_marker(canvas, (marker.x, marker.y), radius, regime_color(marker.obj.regime, cfg))
        if frame.target is not None:
            position = (frame.target.x, frame.target.y)
            draw_ring(canvas, position, cfg.globe_target_ring_radius, cfg.target_color)
            if ctx.fonts is not None:
                draw_target_label(canvas, position, frame.target.obj.name, font=ctx.fonts.small, color=cfg.target_color)

        if frame.hovered is not None:
            draw_ring(canvas, (frame.hovered.x, frame.hovered.y), cfg.globe_hover_ring_radius, cfg.hover_ring_color)
            pointer = self._session.pointer
            assert pointer is not None
            anchor = (pointer[0] + self.rect.left, pointer[1] + self.rect.top)
            ctx.tooltip.show(tooltip_lines(frame.hovered.obj, frame.hovered.point), anchor)
        elif self._session.pointer is not None:
            ctx.tooltip.hide()

        if ctx.fonts is not None:
            draw_status_line(canvas, frame.status_text, font=ctx.fonts.small, color=cfg.status_text_color)
        self.last_frame = frame
        return frame

    def handle_event(self, event: pygame.event.Event) -> bool:
        session = self._session
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.collidepoint(event.pos):
                session.dragging = True
                return True
        elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            was_dragging = session.dragging
            session.dragging = False
            return was_dragging
        elif event.type == pygame.MOUSEMOTION:
            if session.dragging and self.projection is not None:
                dx, dy = event.rel
                session.rotation.apply_drag(
                    dx, dy, self.projection.scale, self._context.tracker_cfg.drag_sensitivity
                )
            if self.rect.collidepoint(event.pos):
                session.pointer = (event.pos[0] - self.rect.left, event.pos[1] - self.rect.top)
            else:
                self.pointer_left()
            return True
        elif event.type == pygame.WINDOWLEAVE:
            self.pointer_left()
            return True
        return False

    def pointer_left(self) -> None:
        if self._session.pointer is not None:
            self._session.pointer = None
            self._context.tooltip.hide()

    def draw(self, target: pygame.Surface) -> None:
        if self.canvas is not None:
            target.blit(self.canvas, self.rect.topleft)


__all__ = ["GlobeFrame", "GlobeSurface", "compose_globe_frame"]
