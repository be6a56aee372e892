"""Propagation helpers: element sets to inertial positions to geodetic points."""
from __future__ import annotations

import math
from typing import Iterable, Sequence

import numpy as np
from sgp4.api import Satrec
from sgp4.propagation import gstime

from .config import TRACKER_CFG
from .model import GeodeticPoint, TrackedObject

JD_UNIX_EPOCH = 2_440_587.5
MS_PER_DAY = 86_400_000.0
WGS84_A_KM = 6378.137
WGS84_F = 1.0 / 298.257223563
WGS84_E2 = WGS84_F * (2.0 - WGS84_F)
_LATITUDE_ITERATIONS = 20


def parse_elements(line1: str, line2: str) -> Satrec:
    """Parse a two-line element set, rejecting lines the parser cannot use."""

    line1 = line1.strip()
    line2 = line2.strip()
    if not line1.startswith("1 ") or not line2.startswith("2 "):
        raise ValueError("element set lines must start with '1 ' and '2 '")
    satrec = Satrec.twoline2rv(line1, line2)
    if getattr(satrec, "error", 0):
        raise ValueError(f"element set rejected with error code {satrec.error}")
    return satrec


def julian_date(epoch_ms: float) -> tuple[float, float]:
    """Split a Unix-epoch timestamp into the (jd, fraction) pair SGP4 expects."""

    days = epoch_ms / MS_PER_DAY
    whole = math.floor(days)
    return JD_UNIX_EPOCH + whole, days - whole


def sidereal_time(epoch_ms: float) -> float:
    """Greenwich mean sidereal time in radians."""

    jd, fr = julian_date(epoch_ms)
    return float(gstime(jd + fr))


def inertial_position(elements, epoch_ms: float) -> np.ndarray | None:
    """TEME position in km, or ``None`` when the propagator reports a failure."""

    jd, fr = julian_date(epoch_ms)
    error, position, _ = elements.sgp4(jd, fr)
    if error != 0:
        return None
    r = np.asarray(position, dtype=float)
    if r.shape != (3,) or not np.all(np.isfinite(r)):
        return None
    return r


def eci_to_geodetic(positions_km: np.ndarray, gmst: float) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Convert inertial positions ``(n, 3)`` to latitude/longitude in degrees and height in km.

    The Earth-fixed longitude is the inertial right ascension minus the sidereal
    angle; latitude is iterated on the WGS84 ellipsoid.
    """

    r = np.atleast_2d(np.asarray(positions_km, dtype=float))
    x, y, z = r[:, 0], r[:, 1], r[:, 2]

    lon = np.arctan2(y, x) - gmst
    lon = (lon + math.pi) % (2.0 * math.pi) - math.pi

    p = np.hypot(x, y)
    lat = np.arctan2(z, p)
    c = np.ones_like(lat)
    for _ in range(_LATITUDE_ITERATIONS):
        sin_lat = np.sin(lat)
        c = 1.0 / np.sqrt(1.0 - WGS84_E2 * sin_lat * sin_lat)
        lat = np.arctan2(z + WGS84_A_KM * c * WGS84_E2 * sin_lat, p)

    cos_lat = np.cos(lat)
    with np.errstate(divide="ignore", invalid="ignore"):
        height = np.where(
            np.abs(cos_lat) > 1e-10,
            p / cos_lat - WGS84_A_KM * c,
            np.abs(z) - WGS84_A_KM * (1.0 - WGS84_F),
        )
    return np.degrees(lat), np.degrees(lon), height


def resolve(obj: TrackedObject, epoch_ms: float) -> GeodeticPoint | None:
    """Geodetic position of ``obj`` at ``epoch_ms``; ``None`` if unresolvable this tick."""

    r = inertial_position(obj.elements, epoch_ms)
    if r is None:
        return None
    lat, lon, height = eci_to_geodetic(r, sidereal_time(epoch_ms))
    return GeodeticPoint(float(lat[0]), float(lon[0]), float(height[0]))


def resolve_many(
    objects: Iterable[TrackedObject], epoch_ms: float
) -> list[tuple[TrackedObject, GeodeticPoint]]:
    """Resolve every object, silently skipping the unresolvable ones.

    Order of the input is preserved. The sidereal angle is computed once per call.
    """

    resolved: list[TrackedObject] = []
    positions: list[np.ndarray] = []
    for obj in objects:
        r = inertial_position(obj.elements, epoch_ms)
        if r is not None:
            resolved.append(obj)
            positions.append(r)
    if not resolved:
        return []
    lat, lon, height = eci_to_geodetic(np.vstack(positions), sidereal_time(epoch_ms))
    return [
        (obj, GeodeticPoint(float(lat[i]), float(lon[i]), float(height[i])))
        for i, obj in enumerate(resolved)
    ]


def altitude_at(elements, epoch_ms: float, earth_radius_km: float = TRACKER_CFG.earth_radius_km) -> float | None:
    """Distance above a spherical Earth at ``epoch_ms``."""

    r = inertial_position(elements, epoch_ms)
    if r is None:
        return None
    return float(np.linalg.norm(r)) - earth_radius_km


def great_circle_distance(lon1: float, lat1: float, lon2: Sequence[float] | float, lat2: Sequence[float] | float):
    """Central angle in radians between points given in degrees (haversine)."""

    lam1, phi1 = math.radians(lon1), math.radians(lat1)
    lam2 = np.radians(np.asarray(lon2, dtype=float))
    phi2 = np.radians(np.asarray(lat2, dtype=float))
    s_phi = np.sin((phi2 - phi1) / 2.0)
    s_lam = np.sin((lam2 - lam1) / 2.0)
    h = s_phi * s_phi + math.cos(phi1) * np.cos(phi2) * s_lam * s_lam
    return 2.0 * np.arcsin(np.sqrt(np.clip(h, 0.0, 1.0)))


__all__ = [
    "JD_UNIX_EPOCH",
    "altitude_at",
    "eci_to_geodetic",
    "great_circle_distance",
    "inertial_position",
    "julian_date",
    "parse_elements",
    "resolve",
    "resolve_many",
    "sidereal_time",
]
