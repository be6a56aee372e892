from __future__ import annotations

from typing import Sequence, TYPE_CHECKING

import numpy as np
import pygame

from debris_tracker.core.model import Regime

from .assets import get_text_surface
from .projection import EquirectangularProjection, OrthographicProjection, visible_runs

if TYPE_CHECKING:  # pragma: no cover
    from debris_tracker.core.config import RenderCfg


def regime_color(regime: Regime, render_cfg: RenderCfg) -> tuple[int, int, int]:
    if regime is Regime.LEO:
        return render_cfg.leo_color
    if regime is Regime.MEO:
        return render_cfg.meo_color
    return render_cfg.geo_color


def draw_polyline(
    surface: pygame.Surface,
    color: tuple[int, int, int] | tuple[int, int, int, int],
    points: Sequence[tuple[float, float]],
    width: int = 1,
) -> None:
    if len(points) < 2:
        return
    if width <= 1:
        pygame.draw.aalines(surface, color, False, points)
    else:
        pygame.draw.lines(surface, color, False, points, width)


def draw_sphere(surface: pygame.Surface, projection: OrthographicProjection, color: tuple[int, int, int]) -> None:
    cx, cy = projection.translate
    pygame.draw.circle(surface, color, (int(cx), int(cy)), int(projection.scale))


def draw_globe_lines(
    surface: pygame.Surface,
    projection: OrthographicProjection,
    lines: Sequence[np.ndarray],
    color: tuple[int, int, int],
) -> None:
    for line in lines:
        xs, ys, visible = projection.project(line[:, 0], line[:, 1])
        for run in visible_runs(xs, ys, visible):
            draw_polyline(surface, color, run)


def draw_globe_land(
    surface: pygame.Surface,
    projection: OrthographicProjection,
    rings: Sequence[np.ndarray],
    *,
    fill_color: tuple[int, int, int],
    stroke_color: tuple[int, int, int],
) -> None:
    for ring in rings:
        xs, ys, visible = projection.project_to_limb(ring[:, 0], ring[:, 1])
        if not np.any(visible):
            continue
        points = list(zip(xs.tolist(), ys.tolist()))
        if len(points) >= 3:
            pygame.draw.polygon(surface, fill_color, points)
        raw_xs, raw_ys, raw_visible = projection.project(ring[:, 0], ring[:, 1])
        for run in visible_runs(raw_xs, raw_ys, raw_visible):
            draw_polyline(surface, stroke_color, run)


def draw_map_lines(
    surface: pygame.Surface,
    projection: EquirectangularProjection,
    lines: Sequence[np.ndarray],
    color: tuple[int, int, int],
) -> None:
    for line in lines:
        xs, ys, _ = projection.project(line[:, 0], line[:, 1])
        draw_polyline(surface, color, list(zip(xs.tolist(), ys.tolist())))


def draw_map_land(
    surface: pygame.Surface,
    projection: EquirectangularProjection,
    rings: Sequence[np.ndarray],
    *,
    fill_color: tuple[int, int, int],
    stroke_color: tuple[int, int, int],
) -> None:
    for ring in rings:
        xs, ys, _ = projection.project(ring[:, 0], ring[:, 1])
        points = list(zip(xs.tolist(), ys.tolist()))
        if len(points) < 3:
            continue
        pygame.draw.polygon(surface, fill_color, points)
        pygame.draw.aalines(surface, stroke_color, True, points)


def draw_marker(
    surface: pygame.Surface,
    position: tuple[float, float],
    radius: float,
    color: tuple[int, int, int] | tuple[int, int, int, int],
) -> None:
    if radius <= 0:
        return
    pygame.draw.circle(surface, color, (round(position[0]), round(position[1])), radius)


def draw_ring(
    surface: pygame.Surface,
    position: tuple[float, float],
    radius: int,
    color: tuple[int, int, int],
    width: int = 2,
) -> None:
    pygame.draw.circle(surface, color, (round(position[0]), round(position[1])), radius, width)


def draw_target_label(
    surface: pygame.Surface,
    position: tuple[float, float],
    name: str,
    *,
    font: pygame.font.Font,
    color: tuple[int, int, int],
) -> None:
    label = get_text_surface(font, name, color)
    rect = label.get_rect()
    rect.midleft = (round(position[0]) + 12, round(position[1]))
    surface.blit(label, rect)


def draw_status_line(
    surface: pygame.Surface,
    text: str,
    *,
    font: pygame.font.Font,
    color: tuple[int, int, int],
    margin: int = 10,
) -> None:
    label = get_text_surface(font, text, color)
    rect = label.get_rect()
    rect.bottomleft = (margin, surface.get_height() - margin)
    surface.blit(label, rect)


__all__ = [
    "draw_globe_land",
    "draw_globe_lines",
    "draw_map_land",
    "draw_map_lines",
    "draw_marker",
    "draw_polyline",
    "draw_ring",
    "draw_sphere",
    "draw_status_line",
    "draw_target_label",
    "regime_color",
]
