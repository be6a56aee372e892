import pygame
import pytest

from debris_tracker.core.commands import Reaction, SetAltitudeRange, ToggleRegime
from debris_tracker.core.model import ActiveView, AltitudeRange, Regime
from debris_tracker.render.controller import ViewController
from debris_tracker.render.surface import SurfaceState

RECT = pygame.Rect(0, 44, 400, 300)


class RecordingChart:
    def __init__(self):
        self.renders = []

    def render(self, rect, view_state):
        self.renders.append((rect.size, view_state.altitude_range))

    def handle_event(self, event):
        return False

    def draw(self, target):
        pass


@pytest.fixture
def chart():
    return RecordingChart()


@pytest.fixture
def controller(scheduler, tracker_context, point_resolver, chart):
    ctrl = ViewController(
        scheduler,
        tracker_context,
        RECT,
        charts={ActiveView.ALTITUDE: chart},
        resolver=point_resolver,
    )
    ctrl.start()
    return ctrl


class TestProjectionSwitch:
    def test_starts_with_globe(self, controller, scheduler):
        assert controller.globe is not None
        assert scheduler.pending_frames == 1
        assert scheduler.active_timers == 0

    def test_switch_to_map_and_back(self, controller, scheduler):
        globe = controller.globe
        assert controller.switch_projection(False) is Reaction.SWITCH_PROJECTION
        assert globe.state is SurfaceState.STOPPED
        assert controller.globe is None
        assert scheduler.pending_frames == 0
        assert scheduler.active_timers == 1
        controller.switch_projection(True)
        assert controller.map is None
        assert scheduler.active_timers == 0
        assert scheduler.pending_frames == 1

    def test_same_projection_is_a_no_op(self, controller):
        globe = controller.globe
        assert controller.switch_projection(True) is Reaction.NONE
        assert controller.globe is globe

    def test_rotation_survives_projection_round_trip(self, controller):
        controller.rotation.longitude = 42.0
        controller.switch_projection(False)
        controller.switch_projection(True)
        assert controller.globe.session.rotation.longitude == 42.0


class TestViewSwitch:
    def test_chart_view_renders_and_globe_keeps_ticking(self, controller, scheduler, chart, manual_time, tracker_context):
        globe = controller.globe
        controller.switch_view(ActiveView.ALTITUDE)
        assert chart.renders == [((400, 300), AltitudeRange.LEO)]
        manual_time.now = 50.0
        scheduler.run_pending()
        assert scheduler.pending_frames == 1
        assert tracker_context.clock.simulated_ms == 0.0
        controller.switch_view(ActiveView.TRACKER)
        assert controller.globe is globe

    def test_chart_option_rerenders_active_chart(self, controller, chart):
        controller.switch_view(ActiveView.ALTITUDE)
        assert controller.dispatch(SetAltitudeRange(AltitudeRange.FULL)) is Reaction.RERENDER_CHART
        assert chart.renders[-1] == ((400, 300), AltitudeRange.FULL)

    def test_view_without_chart_is_tolerated(self, controller):
        controller.switch_view(ActiveView.HEATMAP)
        target = pygame.Surface((400, 400))
        controller.draw(target)
        assert controller.active_chart is None

    def test_map_restarts_after_returning(self, controller, scheduler, manual_time):
        controller.switch_projection(False)
        first_map = controller.map
        controller.switch_view(ActiveView.TIMELINE)
        manual_time.now = 500.0
        scheduler.run_pending()
        assert first_map.state is SurfaceState.STOPPED
        controller.switch_view(ActiveView.TRACKER)
        assert controller.map is not first_map
        assert scheduler.active_timers == 1

    def test_projection_change_while_hidden_applies_on_return(self, controller, scheduler):
        controller.switch_view(ActiveView.ALTITUDE)
        controller.switch_projection(False)
        assert scheduler.pending_frames == 0
        assert scheduler.active_timers == 0
        controller.switch_view(ActiveView.TRACKER)
        assert controller.map is not None
        assert scheduler.active_timers == 1

    def test_commands_without_reaction(self, controller, tracker_context):
        assert controller.dispatch(ToggleRegime(Regime.LEO)) is Reaction.NONE
        assert tracker_context.view_state.regime_visibility[Regime.LEO] is False


class TestResize:
    def test_burst_is_debounced(self, controller, scheduler, manual_time):
        for now, width in ((0.0, 500), (100.0, 600), (200.0, 700)):
            manual_time.now = now
            controller.on_resize(pygame.Rect(0, 44, width, 300))
            scheduler.run_pending()
        manual_time.now = 349.0
        scheduler.run_pending()
        assert controller.reinitializations == 0
        manual_time.now = 350.0
        scheduler.run_pending()
        assert controller.reinitializations == 1
        assert controller.rect.size == (700, 300)
        assert controller.globe.rect.size == (700, 300)
        assert scheduler.pending_frames == 1

    def test_resize_on_chart_rerenders_chart(self, controller, scheduler, manual_time, chart):
        controller.switch_view(ActiveView.ALTITUDE)
        controller.on_resize(pygame.Rect(0, 44, 640, 480))
        manual_time.now = 150.0
        scheduler.run_pending()
        assert chart.renders[-1][0] == (640, 480)

    def test_globe_resized_while_hidden_restarts_on_return(self, controller, scheduler, manual_time):
        old = controller.globe
        controller.switch_view(ActiveView.ALTITUDE)
        controller.on_resize(pygame.Rect(0, 44, 640, 480))
        manual_time.now = 150.0
        scheduler.run_pending()
        controller.switch_view(ActiveView.TRACKER)
        assert controller.globe is not old
        assert old.state is SurfaceState.STOPPED
        assert scheduler.pending_frames == 1


class TestEventRouting:
    def test_events_reach_active_surface(self, controller):
        controller.handle_event(pygame.event.Event(pygame.MOUSEMOTION, pos=(10, 60), rel=(0, 0), buttons=(0, 0, 0)))
        assert controller.globe.session.pointer == (10, 16)
