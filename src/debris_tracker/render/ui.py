from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence

import pygame

from debris_tracker.core.config import RENDER_CFG, RenderCfg

from .assets import Color, get_text_surface


@dataclass(frozen=True)
class ButtonVisualStyle:
    base_color: Color
    hover_color: Color
    text_color: tuple[int, int, int]
    radius: int
    active_color: Color | None = None
    border_color: Color | None = None
    border_width: int = 0

    @classmethod
    def from_cfg(cls, cfg: RenderCfg = RENDER_CFG) -> "ButtonVisualStyle":
        return cls(
            base_color=cfg.button_color,
            hover_color=cfg.button_hover_color,
            text_color=cfg.button_text_color,
            radius=cfg.button_radius,
            active_color=cfg.button_active_color,
            border_color=cfg.button_border_color,
            border_width=1,
        )


class Button:
    """Rectangular button with hover feedback, an optional active state and a callback."""

    def __init__(
        self,
        rect: tuple[int, int, int, int],
        text: str,
        callback: Callable[[], None],
        text_getter: Callable[[], str] | None = None,
        *,
        style: ButtonVisualStyle,
        is_active: Callable[[], bool] | None = None,
    ) -> None:
        self.rect = pygame.Rect(rect)
        self._text = text
        self._callback = callback
        self._text_getter = text_getter
        self._style = style
        self._is_active = is_active

    def get_text(self) -> str:
        if self._text_getter is not None:
            return self._text_getter()
        return self._text

    def draw(self, surface: pygame.Surface, font: pygame.font.Font, mouse_pos: tuple[int, int] | None) -> None:
        style = self._style
        hovered = mouse_pos is not None and self.rect.collidepoint(mouse_pos)
        active = self._is_active is not None and self._is_active()
        if active and style.active_color is not None:
            color = style.active_color
        else:
            color = style.hover_color if hovered else style.base_color
        button_surface = pygame.Surface(self.rect.size, pygame.SRCALPHA)
        pygame.draw.rect(button_surface, color, button_surface.get_rect(), border_radius=style.radius)
        if style.border_color is not None and style.border_width > 0:
            pygame.draw.rect(
                button_surface,
                style.border_color,
                button_surface.get_rect(),
                style.border_width,
                border_radius=style.radius,
            )
        surface.blit(button_surface, self.rect.topleft)
        text_surf = get_text_surface(font, self.get_text(), style.text_color)
        surface.blit(text_surf, text_surf.get_rect(center=self.rect.center))

    def handle_event(self, event: pygame.event.Event) -> bool:
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.collidepoint(event.pos):
                self._callback()
                return True
        return False


def build_text_panel(
    font: pygame.font.Font,
    lines: Sequence[tuple[str, tuple[int, int, int]]],
    *,
    background_color: Color,
    padding: tuple[int, int] = (10, 8),
    title_font: pygame.font.Font | None = None,
) -> pygame.Surface:
    """Rounded panel with one text line per entry; the first line may use ``title_font``."""

    if not lines:
        raise ValueError("lines must not be empty")
    padding_x, padding_y = padding
    fonts = [title_font or font] + [font] * (len(lines) - 1)
    heights = [f.get_linesize() for f in fonts]
    width = max(f.size(text)[0] for f, (text, _) in zip(fonts, lines)) + padding_x * 2
    height = sum(heights) + padding_y * 2
    panel_surface = pygame.Surface((width, height), pygame.SRCALPHA)
    pygame.draw.rect(panel_surface, background_color, panel_surface.get_rect(), border_radius=8)
    y = padding_y
    for f, line_height, (text, color) in zip(fonts, heights, lines):
        if text:
            panel_surface.blit(get_text_surface(f, text, color), (padding_x, y))
        y += line_height
    return panel_surface


def place_tooltip(
    anchor: tuple[int, int],
    size: tuple[int, int],
    bounds: tuple[int, int],
    *,
    offset: int = RENDER_CFG.tooltip_offset,
    margin: int = RENDER_CFG.tooltip_margin,
) -> tuple[int, int]:
    """Top-left corner for a tooltip near ``anchor``, flipped when it would overflow."""

    x, y = anchor
    width, height = size
    bound_w, bound_h = bounds
    left = x + offset
    top = y + offset
    if left + width > bound_w - margin:
        left = x - width - offset
    if top + height > bound_h - margin:
        top = y - height - offset
    return left, top


class Tooltip:
    """Single floating tooltip shared by all views."""

    def __init__(self, cfg: RenderCfg = RENDER_CFG) -> None:
        self._cfg = cfg
        self.lines: list[str] | None = None
        self.anchor: tuple[int, int] = (0, 0)

    @property
    def visible(self) -> bool:
        return self.lines is not None

    def show(self, lines: Sequence[str], anchor: tuple[int, int]) -> None:
        self.lines = list(lines)
        self.anchor = (int(anchor[0]), int(anchor[1]))

    def hide(self) -> None:
        self.lines = None

    def draw(self, surface: pygame.Surface, font: pygame.font.Font, title_font: pygame.font.Font) -> None:
        if not self.lines:
            return
        cfg = self._cfg
        styled = [(self.lines[0], cfg.tooltip_title_color)]
        styled.extend((line, cfg.tooltip_text_color) for line in self.lines[1:])
        panel = build_text_panel(
            font,
            styled,
            background_color=cfg.tooltip_background_color,
            title_font=title_font,
        )
        position = place_tooltip(self.anchor, panel.get_size(), surface.get_size())
        surface.blit(panel, position)


__all__ = [
    "Button",
    "ButtonVisualStyle",
    "Tooltip",
    "build_text_panel",
    "place_tooltip",
]
