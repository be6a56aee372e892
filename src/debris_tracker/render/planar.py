"""Planar map surface: fixed equirectangular map refreshed on an interval timer."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Sequence

import numpy as np
import pygame

from debris_tracker.core.logging_utils import get_logger
from debris_tracker.core.model import GeodeticPoint, TrackedObject
from debris_tracker.core.propagation import resolve_many
from debris_tracker.core.selection import select_visible
from debris_tracker.core.timekeeping import Scheduler

from .draw import draw_map_land, draw_map_lines, draw_marker, draw_ring, draw_status_line, draw_target_label, regime_color
from .hover import tooltip_lines
from .projection import EquirectangularProjection, graticule_lines
from .surface import SurfaceSession, SurfaceState, TrackerContext

logger = get_logger(__name__)

Resolver = Callable[[Iterable[TrackedObject], float], list[tuple[TrackedObject, GeodeticPoint]]]

_GRATICULE = graticule_lines()
_MIN_HIT_SIZE = 4


@dataclass
class MapMarker:
    """Drawable dot on the map; reused by position in the marker list between ticks."""

    obj: TrackedObject
    point: GeodeticPoint
    x: float
    y: float
    radius: float
    color: tuple[int, int, int]
    is_target: bool = False

    @property
    def hit_rect(self) -> pygame.Rect:
        size = max(_MIN_HIT_SIZE, int(round(self.radius * 2)))
        rect = pygame.Rect(0, 0, size, size)
        rect.center = (round(self.x), round(self.y))
        return rect


def reconcile_markers(existing: list[MapMarker], data: Sequence[MapMarker]) -> tuple[list[MapMarker], int, int]:
    """Join ``data`` onto ``existing`` by index.

    Returns the updated list plus the number of entered and exited markers.
    Markers in the overlap are updated in place.
    """

    overlap = min(len(existing), len(data))
    for i in range(overlap):
        current, fresh = existing[i], data[i]
        current.obj = fresh.obj
        current.point = fresh.point
        current.x = fresh.x
        current.y = fresh.y
        current.radius = fresh.radius
        current.color = fresh.color
        current.is_target = fresh.is_target
    entered = list(data[overlap:])
    exited = len(existing) - overlap
    markers = existing[:overlap] + entered
    return markers, len(entered), exited


class PlanarMapSurface:
    """Equirectangular map; land and grid are drawn once per initialisation."""

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
        self.projection: EquirectangularProjection | None = None
        self.background: pygame.Surface | None = None
        self.markers: list[MapMarker] = []
        self.hovered: MapMarker | None = None
        self.selected = 0
        self._land_drawn = False

    @property
    def session(self) -> SurfaceSession:
        return self._session

    def initialize(self, rect: pygame.Rect | None = None) -> None:
        if self.state is SurfaceState.STOPPED:
            raise RuntimeError("map surface has been stopped")
        if rect is not None:
            self.rect = pygame.Rect(rect)
        self.projection = EquirectangularProjection(self.rect.size)
        self.markers = []
        self.hovered = None
        self._draw_background()
        self._scheduler.clear_timer(self._session.loop_handle)
        self._session.loop_handle = self._scheduler.set_interval(
            self._tick, self._context.tracker_cfg.map_refresh_ms
        )
        self.state = SurfaceState.ANIMATING
        logger.debug("Map surface initialised at %sx%s", *self.rect.size)
        self._tick()

    def _draw_background(self) -> None:
        assert self.projection is not None
        cfg = self._context.render_cfg
        background = pygame.Surface(self.rect.size)
        background.fill(cfg.sphere_color)
        draw_map_lines(background, self.projection, _GRATICULE, cfg.graticule_color)
        land = self._context.land.polygons
        if land:
            draw_map_land(
                background,
                self.projection,
                land,
                fill_color=cfg.land_fill_color,
                stroke_color=cfg.land_stroke_color,
            )
        self._land_drawn = land is not None
        self.background = background

    def stop(self) -> None:
        self._scheduler.clear_timer(self._session.loop_handle)
        self._session.loop_handle = None
        self.state = SurfaceState.STOPPED

    def _tick(self) -> None:
        ctx = self._context
        if not ctx.view_state.tracker_planar:
            self.stop()
            return
        if not self._land_drawn and ctx.land.polygons is not None:
            self._draw_background()
        epoch_ms = ctx.clock.tick(self._scheduler.now_ms())
        self.update(epoch_ms)

    def update(self, epoch_ms: float) -> None:
        assert self.projection is not None
        ctx = self._context
        cfg = ctx.render_cfg
        view = ctx.view_state
        subset = select_visible(
            ctx.catalog,
            view.regime_visibility,
            view.display_budget,
            view.pinned_target,
            index=ctx.index,
        )
        self.selected = len(subset)
        resolved = self._resolver(subset, epoch_ms)
        data: list[MapMarker] = []
        if resolved:
            lons = np.array([point.longitude_deg for _, point in resolved])
            lats = np.array([point.latitude_deg for _, point in resolved])
            xs, ys, _ = self.projection.project(lons, lats)
            pinned = view.pinned_target
            for i, (obj, point) in enumerate(resolved):
                is_target = pinned is not None and obj.name == pinned
                data.append(
                    MapMarker(
                        obj,
                        point,
                        float(xs[i]),
                        float(ys[i]),
                        cfg.map_target_radius if is_target else cfg.map_marker_radius,
                        regime_color(obj.regime, cfg),
                        is_target,
                    )
                )
        self.markers, entered, exited = reconcile_markers(self.markers, data)
        if entered or exited:
            logger.debug("Map markers: %d entered, %d exited", entered, exited)
        self._update_hover()

    def marker_at(self, local_pos: tuple[float, float]) -> MapMarker | None:
        """Topmost marker whose hit box contains ``local_pos``."""

        point = (int(local_pos[0]), int(local_pos[1]))
        for marker in reversed(self.markers):
            if marker.hit_rect.collidepoint(point):
                return marker
        return None

    def _update_hover(self) -> None:
        pointer = self._session.pointer
        tooltip = self._context.tooltip
        marker = self.marker_at(pointer) if pointer is not None else None
        if marker is None:
            if self.hovered is not None:
                tooltip.hide()
            self.hovered = None
            return
        self.hovered = marker
        assert pointer is not None
        anchor = (pointer[0] + self.rect.left, pointer[1] + self.rect.top)
        tooltip.show(tooltip_lines(marker.obj, marker.point), anchor)

    def handle_event(self, event: pygame.event.Event) -> bool:
        if event.type == pygame.MOUSEMOTION:
            if self.rect.collidepoint(event.pos):
                self._session.pointer = (event.pos[0] - self.rect.left, event.pos[1] - self.rect.top)
            else:
                self._session.pointer = None
            self._update_hover()
            return True
        if event.type == pygame.WINDOWLEAVE:
            self._session.pointer = None
            self._update_hover()
            return True
        return False

    def draw(self, target: pygame.Surface) -> None:
        if self.background is None:
            return
        cfg = self._context.render_cfg
        fonts = self._context.fonts
        canvas = self.background.copy()
        dots = pygame.Surface(self.rect.size, pygame.SRCALPHA)
        target_marker: MapMarker | None = None
        for marker in self.markers:
            draw_marker(dots, (marker.x, marker.y), marker.radius, (*marker.color, cfg.marker_alpha))
            if marker.is_target:
                target_marker = marker
        canvas.blit(dots, (0, 0))
        if self.hovered is not None:
            draw_ring(canvas, (self.hovered.x, self.hovered.y), int(cfg.map_hover_radius) + 2, cfg.hover_ring_color, 1)
        if fonts is not None:
            if target_marker is not None:
                draw_target_label(
                    canvas, (target_marker.x, target_marker.y), target_marker.obj.name, font=fonts.small, color=cfg.target_color
                )
            status = f"Displaying: {self.selected} / {len(self._context.catalog)} objects"
            draw_status_line(canvas, status, font=fonts.small, color=cfg.status_text_color)
        target.blit(canvas, self.rect.topleft)


__all__ = ["MapMarker", "PlanarMapSurface", "reconcile_markers"]
