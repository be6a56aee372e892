import pytest

from debris_tracker.core.model import (
    ActiveView,
    ProjectionMode,
    Regime,
    RotationState,
    ViewState,
    classify_regime,
)


class TestRegimeClassification:
    @pytest.mark.parametrize(
        "altitude, expected",
        [
            (1999.999, Regime.LEO),
            (2000.0, Regime.MEO),
            (35785.999, Regime.MEO),
            (35786.0, Regime.GEO),
            (0.0, Regime.LEO),
        ],
    )
    def test_boundaries(self, altitude, expected):
        assert classify_regime(altitude) is expected

    def test_label(self):
        assert Regime.MEO.label == "MEO"


class TestRotationState:
    def test_defaults(self):
        assert RotationState().as_tuple() == (0.0, -20.0)

    def test_drag_scales_inversely_with_projection_scale(self):
        rotation = RotationState(0.0, 0.0)
        rotation.apply_drag(10.0, 0.0, scale=150.0, sensitivity=75.0)
        assert rotation.longitude == pytest.approx(5.0)
        rotation.apply_drag(0.0, 4.0, scale=300.0, sensitivity=75.0)
        assert rotation.latitude == pytest.approx(-1.0)

    def test_latitude_is_clamped_longitude_is_not(self):
        rotation = RotationState(0.0, 0.0)
        rotation.apply_drag(10_000.0, -10_000.0, scale=100.0)
        assert rotation.latitude == 90.0
        assert rotation.longitude > 360.0
        rotation.apply_drag(0.0, 10_000.0, scale=100.0)
        assert rotation.latitude == -90.0


class TestViewState:
    def test_tracker_flags(self):
        state = ViewState()
        assert state.tracker_perspective and not state.tracker_planar
        state.projection = ProjectionMode.PLANAR
        assert state.tracker_planar
        state.active_view = ActiveView.HEATMAP
        assert not state.tracker_planar and not state.tracker_perspective

    def test_defaults(self):
        state = ViewState()
        assert state.display_budget == 5000
        assert all(state.regime_visibility.values())
        assert state.pinned_target is None
