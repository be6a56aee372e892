"""Name search overlay used to pin a target."""
from __future__ import annotations

from typing import Callable

import pygame

from debris_tracker.core.config import RENDER_CFG, RenderCfg
from debris_tracker.core.model import TrackedObject
from debris_tracker.data.catalog import Catalog

from .ui import build_text_panel


class SearchBox:
    """Captures typed text while open and reports the chosen name through ``on_pin``.

    ``on_pin(None)`` clears the pin.
    """

    def __init__(self, catalog: Catalog, on_pin: Callable[[str | None], None], cfg: RenderCfg = RENDER_CFG) -> None:
        self._catalog = catalog
        self._on_pin = on_pin
        self._cfg = cfg
        self.active = False
        self.query = ""
        self.matches: list[TrackedObject] = []
        self.cursor = 0

    def open(self) -> None:
        self.active = True
        self.query = ""
        self.matches = []
        self.cursor = 0

    def close(self) -> None:
        self.active = False

    def set_query(self, query: str) -> None:
        self.query = query
        self.matches = self._catalog.search(query)
        self.cursor = 0

    def handle_event(self, event: pygame.event.Event) -> bool:
        if not self.active:
            return False
        if event.type == pygame.TEXTINPUT:
            self.set_query(self.query + event.text)
            return True
        if event.type != pygame.KEYDOWN:
            return False
        if event.key == pygame.K_ESCAPE:
            self.close()
        elif event.key in (pygame.K_RETURN, pygame.K_KP_ENTER):
            if self.matches:
                self._on_pin(self.matches[self.cursor].name)
                self.close()
        elif event.key == pygame.K_TAB:
            if self.matches:
                self.cursor = (self.cursor + 1) % len(self.matches)
        elif event.key == pygame.K_BACKSPACE:
            if self.query:
                self.set_query(self.query[:-1])
            else:
                self._on_pin(None)
                self.close()
        return True

    def draw(self, surface: pygame.Surface, font: pygame.font.Font, position: tuple[int, int]) -> None:
        if not self.active:
            return
        cfg = self._cfg
        lines = [(f"Search: {self.query}_", cfg.tooltip_title_color)]
        for i, obj in enumerate(self.matches):
            marker = "›" if i == self.cursor else " "
            lines.append((f"{marker} {obj.name}", cfg.hover_ring_color if i == self.cursor else cfg.tooltip_text_color))
        if self.query.strip() and not self.matches:
            lines.append(("no matches", cfg.hud_muted_color))
        panel = build_text_panel(font, lines, background_color=cfg.tooltip_background_color)
        surface.blit(panel, position)


__all__ = ["SearchBox"]
