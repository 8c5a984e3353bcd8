"""Hybrid single-point / EKF position solver.

Every epoch runs a single-point fix. Two consecutive plausible fixes yield an
oscillator correction and bootstrap the drift-tracking EKF, which is then
updated every epoch until an update fails, at which point it is dropped and
waits for the next bootstrap opportunity.
"""

from __future__ import annotations

from dataclasses import replace

import numpy as np

from gnss_pos.config import PosSolverConfig
from gnss_pos.models import ElevAzim, Llh, PosSolver
from gnss_pos.receiver.ekf_nav import STATE_DIM, EkfConfig, EkfPositionSolver
from gnss_pos.receiver.spp import SinglePointSolver
from gnss_pos.runtime.scheduling import YieldContext, YieldHandle
from gnss_pos.timing.ticks import TickHistory, elapsed_seconds
from gnss_pos.utils.logging import get_logger

logger = get_logger(__name__)

EKF_NOT_RUNNING = -1
EKF_BOOTSTRAPPED = 0


class PosSolverImpl(PosSolver):
    """The only :class:`PosSolver` implementation; build it with :func:`make_pos_solver`."""

    def __init__(
        self,
        config: PosSolverConfig,
        spp: SinglePointSolver,
        ekf: EkfPositionSolver,
    ) -> None:
        self.config = config
        self._uere = float(config.uere_m)
        self._f_osc = float(config.osc_freq_hz)
        self._spp = spp
        self._ekf = ekf

        self._pos = np.zeros(3, dtype=float)
        self._llh = Llh()
        self._t_rx = 0.0
        self._osc_corr = -1.0
        self._pos_valid = False

        self._state_spp = [False, False]
        self._ct_rx = [0.0, 0.0]
        self._ticks_spp = TickHistory()
        self._ticks_ekf = TickHistory()
        self._ekf_running = EKF_NOT_RUNNING

    @property
    def ekf_confidence(self) -> int:
        return self._ekf_running

    def pos_valid(self) -> bool:
        return self._pos_valid

    def spp_valid(self) -> bool:
        return self._state_spp[0]

    def ekf_valid(self) -> bool:
        return self._ekf_running >= 1

    def pos(self) -> np.ndarray:
        return self._pos

    def llh(self) -> Llh:
        return self._llh

    def t_rx(self) -> float:
        return self._t_rx

    def osc_corr(self) -> float:
        return self._osc_corr

    def elev_azim(self, sv: np.ndarray) -> list[ElevAzim]:
        if not self.spp_valid() and not self.ekf_valid():
            return []

        sv = np.asarray(sv, dtype=float)
        elev_azim: list[ElevAzim | None] = [None] * sv.shape[1]

        def store(i_sv: int, elev_rad: float, azim_rad: float) -> None:
            elev_azim[i_sv] = ElevAzim(
                elev_deg=float(np.rad2deg(elev_rad)),
                azim_deg=float(np.rad2deg(azim_rad)),
            )

        if self.ekf_valid():
            self._ekf.iter_elev_azim(sv, store)
        else:
            self._spp.iter_elev_azim(sv, store)
        return elev_azim

    def _elapsed_s(self, history: TickHistory) -> float:
        return elapsed_seconds(history, self._f_osc)

    def solve(self, sv: np.ndarray, weight: np.ndarray, adc_ticks: int) -> bool:
        sv = np.asarray(sv, dtype=float)
        weight = np.asarray(weight, dtype=float)
        _check_batch(sv, weight)

        nsv = sv.shape[1]
        if not nsv:
            return False

        # normalize weights to a mean of 1/uere^2
        weight = weight / (np.mean(weight) * self._uere * self._uere)

        self._ticks_spp.push(adc_ticks)
        self._ticks_ekf.record(adc_ticks)

        status = self._spp.solve(sv, np.diag(weight))

        self._state_spp[1] = self._state_spp[0]
        llh = self._spp.llh()
        self._state_spp[0] = bool(
            status and self.config.alt_min_m < llh.alt_m < self.config.alt_max_m
        )
        if status and not self._state_spp[0]:
            logger.debug("single-point fix rejected: altitude %.1f m", llh.alt_m)

        self._ct_rx[1] = self._ct_rx[0]
        self._ct_rx[0] = self._spp.ct_rx

        if self._state_spp[0]:
            self._llh = llh
            self._t_rx = self._spp.ct_rx / self._spp.c()
            self._pos = np.array(self._spp.pos, dtype=float)
            self._pos_valid = True

        just_bootstrapped = False
        if self._state_spp[0] and self._state_spp[1]:
            dt_adc_s = self._elapsed_s(self._ticks_spp)
            d_ct = self._spp.mod_gpsweek(self._ct_rx[0] - self._ct_rx[1])
            self._osc_corr = d_ct / self._spp.c() / dt_adc_s

            if self._ekf_running == EKF_NOT_RUNNING:
                self._bootstrap_ekf()
                just_bootstrapped = True

        # the filter was seeded from this epoch, so its first update waits for the next one
        if self._ekf_running >= EKF_BOOTSTRAPPED and not just_bootstrapped:
            dt_adc_s = self._elapsed_s(self._ticks_ekf)
            if self._ekf.update(sv, weight, dt_adc_s):
                self._ticks_ekf.shift()
                self._ekf_running = min(self._ekf_running + 1, self.config.ekf_confidence_max)
                self._llh = self._ekf.llh()
                self._t_rx = self._ekf.ct_rx / self._ekf.c()
                self._osc_corr = self._ekf.state(4) / self._ekf.c()
                # position deliberately follows the single-point fix
                self._pos = np.array(self._spp.pos, dtype=float)
            else:
                logger.warning("EKF update failed; waiting for a new bootstrap")
                self._ekf_running = EKF_NOT_RUNNING
        return True

    def _bootstrap_ekf(self) -> None:
        ekf_cov = np.zeros((STATE_DIM, STATE_DIM))
        ekf_cov[:4, :4] = self._spp.cov()
        ekf_cov[4, 4] = 1.0

        ekf_state = np.zeros(STATE_DIM)
        ekf_state[:4] = self._spp.state()
        ekf_state[4] = self._osc_corr * self._ekf.c()

        self._ekf.reset(ekf_state, ekf_cov)
        self._ticks_ekf.shift()
        self._ekf_running = EKF_BOOTSTRAPPED
        logger.info("EKF bootstrapped (osc_corr=%.9f)", self._osc_corr)


def _check_batch(sv: np.ndarray, weight: np.ndarray) -> None:
    if sv.ndim != 2 or weight.ndim != 1:
        raise ValueError("sv must be a (4, N) matrix and weight a length-N vector.")
    if sv.shape[1] != weight.shape[0]:
        raise ValueError(
            f"sv has {sv.shape[1]} satellite columns but {weight.shape[0]} weights were given."
        )
    if sv.shape[1] and sv.shape[0] != 4:
        raise ValueError(f"sv must have 4 rows, got {sv.shape[0]}.")
    if np.any(weight <= 0.0):
        raise ValueError("weights must be positive.")


def make_pos_solver(
    uere_m: float | None = None,
    osc_freq_hz: float | None = None,
    yield_ctx: YieldContext | None = None,
    *,
    config: PosSolverConfig | None = None,
    ekf_config: EkfConfig | None = None,
) -> PosSolver:
    """Create a position solver for one receiver session.

    Args:
        uere_m: Assumed user equivalent range error in meters.
        osc_freq_hz: Nominal ADC oscillator frequency in Hz.
        yield_ctx: Scheduling context; the solvers only keep a weak reference.
        config: Base configuration, overridden by ``uere_m``/``osc_freq_hz``.
        ekf_config: EKF tuning.
    """

    base = config or PosSolverConfig()
    overrides: dict[str, float] = {}
    if uere_m is not None:
        overrides["uere_m"] = float(uere_m)
    if osc_freq_hz is not None:
        overrides["osc_freq_hz"] = float(osc_freq_hz)
    cfg = replace(base, **overrides)

    handle = YieldHandle(yield_ctx)
    spp = SinglePointSolver(cfg.spp_max_iter, handle)
    ekf = EkfPositionSolver(ekf_config, handle)
    return PosSolverImpl(cfg, spp, ekf)
