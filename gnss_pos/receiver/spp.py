"""Iterative weighted least squares single-point position solver."""

from __future__ import annotations

from typing import Callable

import numpy as np

from gnss_pos.constants import LIGHT_SPEED_MPS
from gnss_pos.models import Llh
from gnss_pos.receiver.geometry import geometric_ranges, range_model
from gnss_pos.runtime.scheduling import YieldHandle
from gnss_pos.timing.gps_time import GPS_WEEK_M, mod_gpsweek
from gnss_pos.utils.angles import elev_azim_rad
from gnss_pos.utils.wgs84 import ecef_to_llh

ElevAzimCallback = Callable[[int, float, float], None]


def iter_elev_azim(pos: np.ndarray, sv: np.ndarray, callback: ElevAzimCallback) -> None:
    """Call ``callback(i_sv, elev_rad, azim_rad)`` for every satellite column."""

    for i_sv in range(sv.shape[1]):
        elev, azim = elev_azim_rad(pos, sv[:3, i_sv])
        callback(i_sv, elev, azim)


class SinglePointSolver:
    """Gauss-Newton WLS over ``[x, y, z, ct_rx]`` from one epoch of observations.

    The position of the last converged solve seeds the next one; the clock
    term is re-initialised every epoch from the transmit times.
    """

    def __init__(self, max_iter: int = 20, yield_handle: YieldHandle | None = None, tol_m: float = 1e-4) -> None:
        self.max_iter = int(max_iter)
        self.tol_m = float(tol_m)
        self._yield = yield_handle or YieldHandle()
        self._state = np.zeros(4, dtype=float)
        self._cov = np.full((4, 4), np.nan)
        self._seed_pos = np.zeros(3, dtype=float)
        self.last_iterations = 0

    @property
    def pos(self) -> np.ndarray:
        return self._state[:3]

    @property
    def ct_rx(self) -> float:
        return float(self._state[3])

    def state(self) -> np.ndarray:
        return self._state

    def cov(self) -> np.ndarray:
        return self._cov

    def llh(self) -> Llh:
        return ecef_to_llh(self.pos)

    @staticmethod
    def c() -> float:
        return LIGHT_SPEED_MPS

    @staticmethod
    def mod_gpsweek(value_m: float) -> float:
        return float(mod_gpsweek(value_m))

    def iter_elev_azim(self, sv: np.ndarray, callback: ElevAzimCallback) -> None:
        iter_elev_azim(self.pos, sv, callback)

    def _initial_state(self, sv: np.ndarray) -> np.ndarray:
        pos = self._seed_pos.copy()
        _, ranges = geometric_ranges(sv[:3], pos)
        ct_tx = sv[3, 0] + mod_gpsweek(sv[3] - sv[3, 0])
        ct_rx = float(np.mean(ct_tx + ranges))
        return np.hstack([pos, ct_rx])

    def solve(self, sv: np.ndarray, weight_matrix: np.ndarray) -> bool:
        """Solve for position and clock term; False if no trustworthy fix was found.

        On failure the previous state is left untouched.
        """

        self.last_iterations = 0
        if sv.shape[1] < 4:
            return False

        x = self._initial_state(sv)
        normal = np.zeros((4, 4))
        converged = False
        for _ in range(self.max_iter):
            if not self._yield.yield_now():
                return False
            self.last_iterations += 1
            residuals, h_matrix = range_model(sv, x[:3], x[3])
            normal = h_matrix.T @ weight_matrix @ h_matrix
            try:
                delta = np.linalg.solve(normal, h_matrix.T @ weight_matrix @ residuals)
            except np.linalg.LinAlgError:
                return False
            if not np.all(np.isfinite(delta)):
                return False
            x = x + delta
            if np.linalg.norm(delta[:3]) < self.tol_m:
                converged = True
                break
        if not converged:
            return False

        try:
            cov = np.linalg.inv(normal)
        except np.linalg.LinAlgError:
            return False

        x[3] = np.mod(x[3], GPS_WEEK_M)
        self._state = x
        self._cov = cov
        self._seed_pos = x[:3].copy()
        return True
