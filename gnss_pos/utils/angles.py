"""Angle utilities for GNSS geometry."""

from __future__ import annotations

import numpy as np

from gnss_pos.utils.wgs84 import ecef_to_enu_matrix, ecef_to_llh


def elev_azim_rad(pos_rx: np.ndarray, pos_sv: np.ndarray) -> tuple[float, float]:
    """Elevation and azimuth (radians, azimuth in [0, 2*pi)) from receiver to satellite."""

    llh = ecef_to_llh(pos_rx)
    rot = ecef_to_enu_matrix(llh.lat_deg, llh.lon_deg)
    east, north, up = rot @ (np.asarray(pos_sv, dtype=float)[:3] - np.asarray(pos_rx, dtype=float)[:3])
    elev = float(np.arctan2(up, np.hypot(east, north)))
    azim = float(np.arctan2(east, north))
    if azim < 0.0:
        azim += 2.0 * np.pi
    return elev, azim


def elev_azim_deg(pos_rx: np.ndarray, pos_sv: np.ndarray) -> tuple[float, float]:
    elev, azim = elev_azim_rad(pos_rx, pos_sv)
    return float(np.rad2deg(elev)), float(np.rad2deg(azim))
