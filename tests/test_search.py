import pygame
import pytest
from conftest import make_object

from debris_tracker.data.catalog import Catalog
from debris_tracker.render.search import SearchBox


@pytest.fixture
def pins():
    return []


@pytest.fixture
def box(pins):
    catalog = Catalog([make_object("STARLINK-1"), make_object("STARLINK-2"), make_object("ISS")])
    search = SearchBox(catalog, pins.append)
    search.active = True
    return search


def _key(key):
    return pygame.event.Event(pygame.KEYDOWN, key=key, mod=0, unicode="")


class TestSearchBox:
    def test_typing_filters(self, box):
        box.handle_event(pygame.event.Event(pygame.TEXTINPUT, text="s"))
        assert box.matches == []
        box.handle_event(pygame.event.Event(pygame.TEXTINPUT, text="tar"))
        assert [obj.name for obj in box.matches] == ["STARLINK-1", "STARLINK-2"]

    def test_tab_cycles_and_enter_pins(self, box, pins):
        box.set_query("star")
        box.handle_event(_key(pygame.K_TAB))
        box.handle_event(_key(pygame.K_RETURN))
        assert pins == ["STARLINK-2"]
        assert not box.active

    def test_enter_without_matches_keeps_box_open(self, box, pins):
        box.set_query("zz")
        box.handle_event(_key(pygame.K_RETURN))
        assert pins == []
        assert box.active

    def test_backspace_on_empty_query_clears_pin(self, box, pins):
        box.set_query("i")
        box.handle_event(_key(pygame.K_BACKSPACE))
        assert box.query == ""
        box.handle_event(_key(pygame.K_BACKSPACE))
        assert pins == [None]
        assert not box.active

    def test_escape_cancels(self, box, pins):
        box.handle_event(_key(pygame.K_ESCAPE))
        assert not box.active
        assert pins == []

    def test_inactive_box_ignores_events(self, box):
        box.active = False
        assert box.handle_event(pygame.event.Event(pygame.TEXTINPUT, text="x")) is False
