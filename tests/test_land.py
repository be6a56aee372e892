import json
from concurrent.futures import ThreadPoolExecutor

import pytest

from debris_tracker.core.model import LandLoadError
from debris_tracker.data.land import LandAtlas, load_land, rings_from_geojson

SQUARE = [[0.0, 0.0], [10.0, 0.0], [10.0, 10.0], [0.0, 10.0], [0.0, 0.0]]
HOLE = [[2.0, 2.0], [3.0, 2.0], [3.0, 3.0], [2.0, 2.0]]

DOCUMENT = {
    "type": "FeatureCollection",
    "features": [
        {"type": "Feature", "properties": {}, "geometry": {"type": "Polygon", "coordinates": [SQUARE, HOLE]}},
        {
            "type": "Feature",
            "properties": {},
            "geometry": {"type": "MultiPolygon", "coordinates": [[SQUARE], [SQUARE]]},
        },
        {"type": "Feature", "properties": {}, "geometry": {"type": "LineString", "coordinates": SQUARE}},
        {"type": "Feature", "properties": {}, "geometry": None},
    ],
}


class TestRingsFromGeojson:
    def test_outer_rings_only(self):
        rings = rings_from_geojson(DOCUMENT)
        assert len(rings) == 3
        assert all(ring.shape == (5, 2) for ring in rings)

    def test_geometry_collection(self):
        document = {"type": "GeometryCollection", "geometries": [{"type": "Polygon", "coordinates": [SQUARE]}]}
        assert len(rings_from_geojson(document)) == 1

    def test_rejects_non_geojson(self):
        with pytest.raises(LandLoadError):
            rings_from_geojson([1, 2, 3])


class TestLandAtlas:
    def test_background_fetch_from_file(self, tmp_path):
        path = tmp_path / "land.geojson"
        path.write_text(json.dumps(DOCUMENT), encoding="utf-8")
        atlas = LandAtlas(str(path))
        assert atlas.polygons is None
        with ThreadPoolExecutor(max_workers=1) as executor:
            atlas.request(executor)
            atlas.request(executor)
        assert len(atlas.polygons) == 3
        assert atlas.error is None

    def test_failure_is_kept_as_error(self, tmp_path):
        atlas = LandAtlas(str(tmp_path / "missing.geojson"))
        with ThreadPoolExecutor(max_workers=1) as executor:
            atlas.request(executor)
        assert isinstance(atlas.error, LandLoadError)
        assert atlas.polygons is None

    def test_disabled_is_empty(self):
        atlas = LandAtlas.disabled()
        assert atlas.polygons == []
        assert atlas.error is None

    def test_load_land_rejects_invalid_json(self, tmp_path):
        path = tmp_path / "broken.geojson"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(LandLoadError):
            load_land(str(path))
