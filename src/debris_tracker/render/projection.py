from __future__ import annotations

import math

import numpy as np

from debris_tracker.core.config import TRACKER_CFG
from debris_tracker.core.model import RotationState


class OrthographicProjection:
    """Rotatable globe projection clipped to the hemisphere facing the viewer.

    The rotation state is held by reference, so drag updates apply on the next
    projection call without rebuilding the projection.
    """

    def __init__(
        self,
        size: tuple[int, int],
        rotation: RotationState,
        *,
        divisor: float = TRACKER_CFG.globe_scale_divisor,
    ) -> None:
        width, height = size
        self._size = size
        self.scale = max(1.0, min(width, height) / divisor)
        self.translate = (width / 2.0, height / 2.0)
        self.rotation = rotation

    @property
    def size(self) -> tuple[int, int]:
        return self._size

    def _rotate(self, lon_deg, lat_deg):
        lam = np.radians(np.asarray(lon_deg, dtype=float) + self.rotation.longitude)
        phi = np.radians(np.asarray(lat_deg, dtype=float))
        d_phi = math.radians(self.rotation.latitude)
        cos_d, sin_d = math.cos(d_phi), math.sin(d_phi)
        cos_phi = np.cos(phi)
        x0 = np.cos(lam) * cos_phi
        y0 = np.sin(lam) * cos_phi
        z0 = np.sin(phi)
        depth = x0 * cos_d - z0 * sin_d
        k = z0 * cos_d + x0 * sin_d
        return depth, y0, k

    def project(self, lon_deg, lat_deg) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Screen ``x``, ``y`` and a front-facing mask for points in degrees."""

        depth, px, py = self._rotate(lon_deg, lat_deg)
        tx, ty = self.translate
        return tx + self.scale * px, ty - self.scale * py, depth >= 0.0

    def project_to_limb(self, lon_deg, lat_deg) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Like :meth:`project`, with hidden points pushed radially onto the limb."""

        depth, px, py = self._rotate(lon_deg, lat_deg)
        hidden = depth < 0.0
        if np.any(hidden):
            norm = np.hypot(px, py)
            safe = np.where(norm > 1e-12, norm, 1.0)
            px = np.where(hidden, px / safe, px)
            py = np.where(hidden, py / safe, py)
        tx, ty = self.translate
        return tx + self.scale * px, ty - self.scale * py, ~hidden

    def invert(self, sx: float, sy: float) -> tuple[float, float] | None:
        tx, ty = self.translate
        px = (sx - tx) / self.scale
        py = (ty - sy) / self.scale
        rho2 = px * px + py * py
        if rho2 > 1.0:
            return None
        depth = math.sqrt(1.0 - rho2)
        d_phi = math.radians(self.rotation.latitude)
        cos_d, sin_d = math.cos(d_phi), math.sin(d_phi)
        x0 = depth * cos_d + py * sin_d
        z0 = py * cos_d - depth * sin_d
        lon = math.degrees(math.atan2(px, x0)) - self.rotation.longitude
        lat = math.degrees(math.asin(max(-1.0, min(1.0, z0))))
        lon = (lon + 180.0) % 360.0 - 180.0
        return lon, lat

    def center(self) -> tuple[float, float]:
        tx, ty = self.translate
        inverted = self.invert(tx, ty)
        assert inverted is not None
        return inverted


class EquirectangularProjection:
    """Fixed plate carrée map filling the container width."""

    def __init__(self, size: tuple[int, int]) -> None:
        width, height = size
        self._size = size
        self.scale = width / (2.0 * math.pi)
        self.translate = (width / 2.0, height / 2.0)

    @property
    def size(self) -> tuple[int, int]:
        return self._size

    def project(self, lon_deg, lat_deg) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        lon = np.radians(np.asarray(lon_deg, dtype=float))
        lat = np.radians(np.asarray(lat_deg, dtype=float))
        tx, ty = self.translate
        x = tx + self.scale * lon
        y = ty - self.scale * lat
        return x, y, np.ones_like(x, dtype=bool)

    def invert(self, sx: float, sy: float) -> tuple[float, float]:
        tx, ty = self.translate
        return math.degrees((sx - tx) / self.scale), math.degrees((ty - sy) / self.scale)


def graticule_lines(step_deg: float = 10.0, precision_deg: float = 2.5) -> list[np.ndarray]:
    """Meridians and parallels as ``(n, 2)`` lon/lat polylines.

    Parallels span 80°S to 80°N; meridians stop at ±80° except the ones on
    multiples of 90°, which reach the poles.
    """

    lines: list[np.ndarray] = []
    lon_values = np.arange(-180.0, 180.0, step_deg)
    for lon in lon_values:
        extent = 90.0 if lon % 90.0 == 0.0 else 80.0
        lats = np.arange(-extent, extent + precision_deg * 0.5, precision_deg)
        lines.append(np.column_stack((np.full_like(lats, lon), lats)))
    lons = np.arange(-180.0, 180.0 + precision_deg * 0.5, precision_deg)
    for lat in np.arange(-80.0, 80.0 + step_deg * 0.5, step_deg):
        lines.append(np.column_stack((lons, np.full_like(lons, lat))))
    return lines


def visible_runs(xs: np.ndarray, ys: np.ndarray, visible: np.ndarray) -> list[list[tuple[float, float]]]:
    """Split a projected polyline into consecutive front-facing segments."""

    runs: list[list[tuple[float, float]]] = []
    current: list[tuple[float, float]] = []
    for x, y, v in zip(xs.tolist(), ys.tolist(), visible.tolist()):
        if v:
            current.append((x, y))
        elif current:
            if len(current) >= 2:
                runs.append(current)
            current = []
    if len(current) >= 2:
        runs.append(current)
    return runs


__all__ = [
    "EquirectangularProjection",
    "OrthographicProjection",
    "graticule_lines",
    "visible_runs",
]
