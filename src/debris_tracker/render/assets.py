from __future__ import annotations

from collections import OrderedDict
from typing import Iterable

import pygame


Color = tuple[int, int, int] | tuple[int, int, int, int]


_TEXT_SURFACE_CACHE_MAX_SIZE = 512
_TEXT_SURFACE_CACHE: OrderedDict[tuple[int, str, Color], pygame.Surface] = OrderedDict()


def get_text_surface(font: pygame.font.Font, text: str, color: Color) -> pygame.Surface:
    """Return a cached rendered surface for the given font, text and color.

    Surfaces retrieved from the cache must be treated as immutable by callers.
    """

    key = (id(font), text, color)
    cached = _TEXT_SURFACE_CACHE.get(key)
    if cached is not None:
        _TEXT_SURFACE_CACHE.move_to_end(key)
        return cached
    rendered = font.render(text, True, color)
    _TEXT_SURFACE_CACHE[key] = rendered
    if len(_TEXT_SURFACE_CACHE) > _TEXT_SURFACE_CACHE_MAX_SIZE:
        _TEXT_SURFACE_CACHE.popitem(last=False)
    return rendered


def load_font(preferred_names: Iterable[str], size: int, *, bold: bool = False) -> pygame.font.Font:
    names = list(preferred_names)
    for name in names:
        try:
            match = pygame.font.match_font(name, bold=bold)
        except (OSError, ValueError):
            match = None
        if match:
            return pygame.font.Font(match, size)
    return pygame.font.SysFont(names[0] if names else None, size, bold=bold)


class FontBook:
    """Fonts shared by every surface and panel."""

    def __init__(self, names: Iterable[str], mono_names: Iterable[str]) -> None:
        names = tuple(names)
        mono_names = tuple(mono_names)
        self.small = load_font(names, 12)
        self.body = load_font(names, 14)
        self.bold = load_font(names, 14, bold=True)
        self.title = load_font(names, 20, bold=True)
        self.mono = load_font(mono_names, 14)


__all__ = ["Color", "FontBook", "get_text_surface", "load_font"]
