"""Pseudorange measurement model shared by the single-point solver and the EKF."""

from __future__ import annotations

import numpy as np

from gnss_pos.constants import LIGHT_SPEED_MPS, OMEGA_EARTH
from gnss_pos.timing.gps_time import mod_gpsweek


def sagnac_rotate(sv_xyz: np.ndarray, travel_m: np.ndarray) -> np.ndarray:
    """Rotate transmit-time satellite positions into the receive-time ECEF frame."""

    angle = OMEGA_EARTH * np.asarray(travel_m, dtype=float) / LIGHT_SPEED_MPS
    cos_a = np.cos(angle)
    sin_a = np.sin(angle)
    rotated = np.array(sv_xyz, dtype=float, copy=True)
    rotated[0] = cos_a * sv_xyz[0] + sin_a * sv_xyz[1]
    rotated[1] = -sin_a * sv_xyz[0] + cos_a * sv_xyz[1]
    return rotated


def geometric_ranges(sv_xyz: np.ndarray, pos: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Return Earth-rotation corrected satellite positions and ranges.

    ``sv_xyz`` has shape (3, N). The rotation uses the uncorrected range as the
    light travel distance; the second-order term is below a millimeter.
    """

    pos_col = np.asarray(pos, dtype=float).reshape(3, 1)
    raw = np.linalg.norm(sv_xyz - pos_col, axis=0)
    rotated = sagnac_rotate(sv_xyz, raw)
    return rotated, np.linalg.norm(rotated - pos_col, axis=0)


def range_model(sv: np.ndarray, pos: np.ndarray, ct_rx: float) -> tuple[np.ndarray, np.ndarray]:
    """Residuals (observed - predicted) and the position/clock design matrix.

    The negated transmit clock terms are the observations, modelled as
    ``range - ct_rx``, so residuals are pseudorange minus range and the rows
    of the returned (N, 4) matrix are ``[-los_unit, -1]``.
    """

    rotated, ranges = geometric_ranges(sv[:3], pos)
    residuals = mod_gpsweek(ct_rx - sv[3] - ranges)
    los = rotated - np.asarray(pos, dtype=float).reshape(3, 1)
    h_matrix = -np.ones((sv.shape[1], 4), dtype=float)
    h_matrix[:, :3] = -(los / ranges).T
    return residuals, h_matrix
