import pygame
import pytest
from conftest import make_object

from debris_tracker.core.model import ActiveView, GeodeticPoint, ProjectionMode
from debris_tracker.data.land import LandAtlas
from debris_tracker.render.planar import MapMarker, PlanarMapSurface, reconcile_markers
from debris_tracker.render.surface import SurfaceSession, SurfaceState

RECT = pygame.Rect(0, 44, 720, 360)
POINT = GeodeticPoint(0.0, 0.0)


def _markers(*names):
    return [MapMarker(make_object(name), POINT, float(i), 0.0, 1.8, (0, 255, 136)) for i, name in enumerate(names)]


@pytest.fixture
def planar(scheduler, tracker_context, point_resolver):
    tracker_context.view_state.projection = ProjectionMode.PLANAR
    return PlanarMapSurface(scheduler, tracker_context, SurfaceSession(), RECT, resolver=point_resolver)


class TestReconcileMarkers:
    def test_update_and_exit(self):
        existing = _markers("A", "B", "C")
        first = existing[0]
        markers, entered, exited = reconcile_markers(existing, _markers("X", "Y"))
        assert (entered, exited) == (0, 1)
        assert markers[0] is first
        assert [m.obj.name for m in markers] == ["X", "Y"]

    def test_enter(self):
        markers, entered, exited = reconcile_markers(_markers("A"), _markers("A", "B", "C"))
        assert (entered, exited) == (2, 0)
        assert len(markers) == 3


class TestPlanarLifecycle:
    def test_initialize_starts_timer_and_ticks_once(self, planar, scheduler, tracker_context):
        planar.initialize()
        assert scheduler.active_timers == 1
        assert scheduler.pending_frames == 0
        assert [m.obj.name for m in planar.markers] == ["LEO-1", "MEO-1", "GEO-1"]
        assert planar.state is SurfaceState.ANIMATING

    def test_refresh_every_interval(self, planar, scheduler, manual_time, tracker_context, point_resolver):
        planar.initialize()
        manual_time.now = 499.0
        scheduler.run_pending()
        assert point_resolver.calls == 1
        manual_time.now = 500.0
        scheduler.run_pending()
        assert point_resolver.calls == 2
        assert tracker_context.clock.simulated_ms == pytest.approx(500.0 * 100.0)

    def test_timer_cancels_itself_when_not_planar_tracker(self, planar, scheduler, manual_time, tracker_context):
        planar.initialize()
        tracker_context.view_state.active_view = ActiveView.ALTITUDE
        manual_time.now = 500.0
        scheduler.run_pending()
        assert scheduler.active_timers == 0
        assert planar.state is SurfaceState.STOPPED

    def test_reinitialize_replaces_timer(self, planar, scheduler):
        planar.initialize()
        planar.initialize()
        assert scheduler.active_timers == 1

    def test_marker_positions(self, planar):
        planar.initialize()
        leo = planar.markers[0]
        assert (leo.x, leo.y) == pytest.approx((360.0, 180.0))

    def test_regime_filter_removes_markers(self, planar, scheduler, manual_time, tracker_context):
        planar.initialize()
        tracker_context.view_state.regime_visibility = {
            regime: regime.value == "leo" for regime in tracker_context.view_state.regime_visibility
        }
        manual_time.now = 500.0
        scheduler.run_pending()
        assert [m.obj.name for m in planar.markers] == ["LEO-1"]

    def test_land_drawn_when_it_arrives(self, planar, scheduler, manual_time, tracker_context):
        class LateAtlas:
            polygons = None

        tracker_context.land = LateAtlas()
        planar.initialize()
        background = planar.background
        LateAtlas.polygons = LandAtlas.from_rings([]).polygons
        manual_time.now = 500.0
        scheduler.run_pending()
        assert planar.background is not background


class TestPlanarHover:
    def test_hover_over_marker(self, planar, tracker_context):
        planar.initialize()
        planar.handle_event(pygame.event.Event(pygame.MOUSEMOTION, pos=(360, 180 + RECT.top), rel=(0, 0), buttons=(0, 0, 0)))
        assert planar.hovered is not None and planar.hovered.obj.name == "LEO-1"
        assert tracker_context.tooltip.lines[0] == "LEO-1"

    def test_moving_off_marker_hides_tooltip(self, planar, tracker_context):
        planar.initialize()
        planar.handle_event(pygame.event.Event(pygame.MOUSEMOTION, pos=(360, 180 + RECT.top), rel=(0, 0), buttons=(0, 0, 0)))
        planar.handle_event(pygame.event.Event(pygame.MOUSEMOTION, pos=(10, 10 + RECT.top), rel=(0, 0), buttons=(0, 0, 0)))
        assert planar.hovered is None
        assert not tracker_context.tooltip.visible

    def test_marker_at_prefers_topmost(self, planar):
        planar.initialize()
        planar.markers = _markers("BOTTOM", "TOP")
        assert planar.marker_at((0.5, 0.0)).obj.name == "TOP"

    def test_draw(self, planar):
        planar.initialize()
        target = pygame.Surface((720, 420))
        planar.draw(target)
        assert target.get_at((360, 180 + RECT.top))[:3] != (0, 0, 0)
