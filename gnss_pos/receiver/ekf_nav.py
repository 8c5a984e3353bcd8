"""Extended Kalman filter tracking position, receiver clock and oscillator drift."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from scipy.stats import chi2

from gnss_pos.constants import LIGHT_SPEED_MPS
from gnss_pos.models import Llh
from gnss_pos.receiver.geometry import range_model
from gnss_pos.receiver.spp import ElevAzimCallback, iter_elev_azim
from gnss_pos.runtime.scheduling import YieldHandle
from gnss_pos.timing.gps_time import GPS_WEEK_M
from gnss_pos.utils.wgs84 import ecef_to_llh

STATE_DIM = 5


@dataclass(frozen=True)
class EkfConfig:
    """Tunable parameters for the drift-tracking filter."""

    pos_sigma_mps: float = 1.0
    clock_sigma_mps: float = 1.0
    rate_sigma_mps2: float = 0.1
    max_iter: int = 5
    tol_m: float = 1e-3
    nis_fail_prob: float = 1e-9

    def __post_init__(self) -> None:
        if min(self.pos_sigma_mps, self.clock_sigma_mps, self.rate_sigma_mps2) < 0.0:
            raise ValueError("process noise sigmas must be non-negative.")
        if self.max_iter < 1:
            raise ValueError("max_iter must be at least 1.")
        if self.tol_m <= 0.0:
            raise ValueError("tol_m must be positive.")
        if not 0.0 < self.nis_fail_prob < 1.0:
            raise ValueError("nis_fail_prob must lie in (0, 1).")


def nis_threshold(dof: int, fail_prob: float) -> float:
    """Chi-square quantile above which an innovation is treated as divergence."""

    if dof <= 0:
        return float("inf")
    return float(chi2.ppf(1.0 - fail_prob, dof))


class EkfPositionSolver:
    """Iterated EKF over ``[x, y, z, ct_rx, ct_rate]``.

    ``ct_rate`` is the growth of the clock term per nominal oscillator second,
    i.e. the speed of light times the oscillator correction factor. A failed
    update leaves the filter state untouched.
    """

    def __init__(self, config: EkfConfig | None = None, yield_handle: YieldHandle | None = None) -> None:
        self.config = config or EkfConfig()
        self._yield = yield_handle or YieldHandle()
        self.x = np.zeros(STATE_DIM, dtype=float)
        self.P = np.eye(STATE_DIM)
        self.last_nis: float | None = None
        self.last_innov_dim: int | None = None

    @property
    def pos(self) -> np.ndarray:
        return self.x[:3]

    @property
    def ct_rx(self) -> float:
        return float(self.x[3])

    def state(self, idx: int | None = None) -> np.ndarray | float:
        if idx is None:
            return self.x
        return float(self.x[idx])

    def llh(self) -> Llh:
        return ecef_to_llh(self.pos)

    @staticmethod
    def c() -> float:
        return LIGHT_SPEED_MPS

    def iter_elev_azim(self, sv: np.ndarray, callback: ElevAzimCallback) -> None:
        iter_elev_azim(self.pos, sv, callback)

    def reset(self, state: np.ndarray, cov: np.ndarray) -> None:
        self.x = np.array(state, dtype=float).reshape(STATE_DIM)
        self.P = np.array(cov, dtype=float).reshape(STATE_DIM, STATE_DIM)
        self.last_nis = None
        self.last_innov_dim = None

    def _predict(self, dt: float) -> tuple[np.ndarray, np.ndarray]:
        f = np.eye(STATE_DIM)
        f[3, 4] = dt
        q = np.diag(
            [
                self.config.pos_sigma_mps**2,
                self.config.pos_sigma_mps**2,
                self.config.pos_sigma_mps**2,
                self.config.clock_sigma_mps**2,
                self.config.rate_sigma_mps2**2,
            ]
        ) * abs(dt)
        return f @ self.x, f @ self.P @ f.T + q

    def update(self, sv: np.ndarray, weight: np.ndarray, dt: float) -> bool:
        """Predict over ``dt`` nominal seconds and fold in one epoch of observations."""

        nsv = sv.shape[1]
        if nsv == 0:
            return False
        x_pred, p_pred = self._predict(float(dt))
        r = np.diag(1.0 / np.asarray(weight, dtype=float))

        residuals, h4 = range_model(sv, x_pred[:3], x_pred[3])
        h_matrix = np.hstack([h4, np.zeros((nsv, 1))])
        s = h_matrix @ p_pred @ h_matrix.T + r
        try:
            s_inv = np.linalg.inv(s)
        except np.linalg.LinAlgError:
            return False
        nis = float(residuals.T @ s_inv @ residuals)
        if not np.isfinite(nis) or nis > nis_threshold(nsv, self.config.nis_fail_prob):
            return False

        x_iter = x_pred
        k = p_pred @ h_matrix.T @ s_inv
        for _ in range(self.config.max_iter):
            if not self._yield.yield_now():
                return False
            residuals, h4 = range_model(sv, x_iter[:3], x_iter[3])
            h_matrix = np.hstack([h4, np.zeros((nsv, 1))])
            s = h_matrix @ p_pred @ h_matrix.T + r
            try:
                k = p_pred @ h_matrix.T @ np.linalg.inv(s)
            except np.linalg.LinAlgError:
                return False
            x_next = x_pred + k @ (residuals - h_matrix @ (x_pred - x_iter))
            step = np.linalg.norm(x_next[:3] - x_iter[:3])
            x_iter = x_next
            if step < self.config.tol_m:
                break

        i = np.eye(STATE_DIM)
        p_new = (i - k @ h_matrix) @ p_pred @ (i - k @ h_matrix).T + k @ r @ k.T
        if not (np.all(np.isfinite(x_iter)) and np.all(np.isfinite(p_new))):
            return False

        x_iter[3] = np.mod(x_iter[3], GPS_WEEK_M)
        self.x = x_iter
        self.P = p_new
        self.last_nis = nis
        self.last_innov_dim = nsv
        return True
