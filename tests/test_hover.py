from conftest import make_object

from debris_tracker.core.model import GeodeticPoint, Regime
from debris_tracker.render.hover import Marker, nearest_marker, tooltip_lines
from debris_tracker.render.ui import place_tooltip

POINT = GeodeticPoint(12.3456, -45.6789, 550.0)


def _marker(name, x, y):
    return Marker(make_object(name), POINT, x, y)


class TestNearestMarker:
    def test_picks_closest_within_radius(self):
        markers = [_marker("FAR", 10.0, 0.0), _marker("NEAR", 3.0, 4.0)]
        assert nearest_marker(markers, (0.0, 0.0)).obj.name == "NEAR"

    def test_radius_is_exclusive(self):
        markers = [_marker("EDGE", 12.0, 0.0)]
        assert nearest_marker(markers, (0.0, 0.0), radius=12.0) is None
        assert nearest_marker(markers, (0.5, 0.0), radius=12.0) is not None

    def test_no_pointer(self):
        assert nearest_marker([_marker("A", 0.0, 0.0)], None) is None

    def test_empty(self):
        assert nearest_marker([], (0.0, 0.0)) is None


class TestTooltipLines:
    def test_content(self):
        obj = make_object("COSMOS 2251 DEB", Regime.LEO, altitude=789.6)
        assert tooltip_lines(obj, POINT) == [
            "COSMOS 2251 DEB",
            "Alt: 790 km",
            "Lat: 12.35°",
            "Lon: -45.68°",
            "Regime: LEO",
            "Type: DEBRIS",
            "Country: US",
        ]


class TestPlaceTooltip:
    def test_offset_from_pointer(self):
        assert place_tooltip((100, 100), (50, 40), (800, 600)) == (115, 115)

    def test_flips_near_right_and_bottom_edges(self):
        assert place_tooltip((780, 590), (50, 40), (800, 600)) == (780 - 50 - 15, 590 - 40 - 15)
