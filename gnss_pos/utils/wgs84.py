"""WGS-84 coordinate utilities."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from gnss_pos.models import Llh


@dataclass(frozen=True)
class WGS84:
    """WGS-84 ellipsoid constants."""

    a: float = 6_378_137.0
    f: float = 1.0 / 298.257223563

    @property
    def b(self) -> float:
        return self.a * (1.0 - self.f)

    @property
    def e2(self) -> float:
        return self.f * (2.0 - self.f)

    @property
    def ep2(self) -> float:
        return self.e2 / (1.0 - self.e2)


ELLIPSOID = WGS84()


def _prime_vertical_radius(sin_lat: float) -> float:
    return ELLIPSOID.a / np.sqrt(1.0 - ELLIPSOID.e2 * sin_lat**2)


def llh_to_ecef(lat_deg: float, lon_deg: float, alt_m: float) -> np.ndarray:
    """Convert geodetic coordinates to an ECEF position in meters."""

    lat = np.deg2rad(lat_deg)
    lon = np.deg2rad(lon_deg)
    sin_lat = np.sin(lat)
    cos_lat = np.cos(lat)
    n = _prime_vertical_radius(sin_lat)
    return np.array(
        [
            (n + alt_m) * cos_lat * np.cos(lon),
            (n + alt_m) * cos_lat * np.sin(lon),
            (n * (1.0 - ELLIPSOID.e2) + alt_m) * sin_lat,
        ],
        dtype=float,
    )


def ecef_to_llh(pos_ecef_m: np.ndarray) -> Llh:
    """Convert an ECEF position to geodetic coordinates.

    Bowring's formula seeds the latitude, which is then refined until it
    stops changing. The Earth's center maps to the pole with an altitude of
    minus the semi-minor axis.
    """

    x_m, y_m, z_m = (float(v) for v in np.asarray(pos_ecef_m, dtype=float)[:3])
    lon = np.arctan2(y_m, x_m)
    p = np.hypot(x_m, y_m)

    if p == 0.0:
        lat = np.pi / 2.0 if z_m >= 0.0 else -np.pi / 2.0
        return Llh(float(np.rad2deg(lat)), float(np.rad2deg(lon)), abs(z_m) - ELLIPSOID.b)

    theta = np.arctan2(z_m * ELLIPSOID.a, p * ELLIPSOID.b)
    lat = np.arctan2(
        z_m + ELLIPSOID.ep2 * ELLIPSOID.b * np.sin(theta) ** 3,
        p - ELLIPSOID.e2 * ELLIPSOID.a * np.cos(theta) ** 3,
    )
    for _ in range(5):
        n = _prime_vertical_radius(np.sin(lat))
        alt = p / np.cos(lat) - n
        lat_next = np.arctan2(z_m, p * (1.0 - ELLIPSOID.e2 * n / (n + alt)))
        converged = abs(lat_next - lat) < 1e-12
        lat = lat_next
        if converged:
            break

    n = _prime_vertical_radius(np.sin(lat))
    alt = p / np.cos(lat) - n
    return Llh(float(np.rad2deg(lat)), float(np.rad2deg(lon)), float(alt))


def ecef_to_enu_matrix(lat_deg: float, lon_deg: float) -> np.ndarray:
    """Return rotation matrix from ECEF to ENU at given geodetic coordinates."""

    lat = np.deg2rad(lat_deg)
    lon = np.deg2rad(lon_deg)
    sin_lat = np.sin(lat)
    cos_lat = np.cos(lat)
    sin_lon = np.sin(lon)
    cos_lon = np.cos(lon)

    return np.array(
        [
            [-sin_lon, cos_lon, 0.0],
            [-sin_lat * cos_lon, -sin_lat * sin_lon, cos_lat],
            [cos_lat * cos_lon, cos_lat * sin_lon, sin_lat],
        ],
        dtype=float,
    )
