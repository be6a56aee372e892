import os
from datetime import datetime, timezone

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
os.environ.setdefault("MPLBACKEND", "Agg")

import pygame
import pytest

from debris_tracker.core.model import GeodeticPoint, Regime, TrackedObject, ViewState
from debris_tracker.core.timekeeping import Scheduler, SimulationClock
from debris_tracker.data.land import LandAtlas
from debris_tracker.render.surface import TrackerContext
from debris_tracker.render.ui import Tooltip

ISS_LINE1 = "1 25544U 98067A   23259.50000000  .00012000  00000-0  21844-3 0  9999"
ISS_LINE2 = "2 25544  51.6416 220.9944 0004263 122.0101 312.2755 15.49541986415598"
ISS_EPOCH_MS = datetime(2023, 9, 16, 12, 0, tzinfo=timezone.utc).timestamp() * 1000.0


class FixedElements:
    """Stands in for a Satrec: always reports the same TEME position."""

    def __init__(self, position=(7000.0, 0.0, 0.0), error=0):
        self.position = position
        self.error = error
        self.calls = 0

    def sgp4(self, jd, fr):
        self.calls += 1
        return self.error, self.position, (0.0, 0.0, 0.0)


class ManualTime:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now


def make_object(name, regime=Regime.LEO, *, altitude=500.0, inclination=0.0, launch_year=None, elements=None):
    return TrackedObject(
        name=name,
        elements=elements if elements is not None else FixedElements(),
        altitude_km=altitude,
        inclination_deg=inclination,
        launch_year=launch_year,
        country="US",
        object_type="DEBRIS",
        rcs_size="SMALL",
        regime=regime,
    )


class PointResolver:
    """Resolver returning preset geodetic points keyed by object name."""

    def __init__(self, points):
        self.points = points
        self.calls = 0

    def __call__(self, objects, epoch_ms):
        self.calls += 1
        out = []
        for obj in objects:
            point = self.points.get(obj.name)
            if point is not None:
                out.append((obj, point))
        return out


@pytest.fixture(scope="session", autouse=True)
def pygame_session():
    pygame.init()
    yield
    pygame.quit()


@pytest.fixture
def manual_time():
    return ManualTime()


@pytest.fixture
def scheduler(manual_time):
    return Scheduler(time_source=manual_time)


@pytest.fixture
def three_regimes():
    return [
        make_object("LEO-1", Regime.LEO, altitude=500.0),
        make_object("MEO-1", Regime.MEO, altitude=20000.0),
        make_object("GEO-1", Regime.GEO, altitude=35786.0),
    ]


@pytest.fixture
def tracker_context(three_regimes):
    clock = SimulationClock(simulated_ms=0.0, wall_clock_last_tick=0.0, time_warp=100.0)
    return TrackerContext(
        catalog=three_regimes,
        clock=clock,
        view_state=ViewState(),
        land=LandAtlas.disabled(),
        tooltip=Tooltip(),
    )


@pytest.fixture
def point_resolver():
    return PointResolver(
        {
            "LEO-1": GeodeticPoint(0.0, 0.0, 500.0),
            "MEO-1": GeodeticPoint(10.0, 20.0, 20000.0),
            "GEO-1": GeodeticPoint(0.0, 170.0, 35786.0),
        }
    )
