"""Synthetic observation batches for a static receiver."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from gnss_pos.constants import GPS_WEEK_S, LIGHT_SPEED_MPS, TICK_COUNTER_MODULUS
from gnss_pos.models import Epoch
from gnss_pos.receiver.geometry import sagnac_rotate
from gnss_pos.sat.simple_gps import SimpleGpsConstellation
from gnss_pos.utils.angles import elev_azim_rad


@dataclass
class SyntheticEpochSource:
    """Generate per-epoch ``(4, N)`` observation batches and ADC tick values.

    Epochs are taken at true GPS time ``t0_tow_s + t_s``. The ADC counter runs
    at ``osc_freq_hz * (1 + freq_error_ppm * 1e-6)`` starting at ``tick_start``
    and wraps at 48 bits. Pseudorange noise is scaled by ``1 / sin(elev)`` and
    the reported weights are the matching inverse variances (up to a scale).
    """

    receiver_ecef_m: np.ndarray
    constellation: SimpleGpsConstellation = field(default_factory=SimpleGpsConstellation)
    t0_tow_s: float = 345_600.0
    osc_freq_hz: float = 66_666_600.0
    freq_error_ppm: float = 0.0
    tick_start: int = 0
    noise_sigma_m: float = 0.0
    elevation_mask_deg: float = 10.0
    rng: np.random.Generator = field(default_factory=np.random.default_rng)

    def __post_init__(self) -> None:
        self.receiver_ecef_m = np.asarray(self.receiver_ecef_m, dtype=float)
        if self.receiver_ecef_m.shape != (3,):
            raise ValueError("receiver_ecef_m must be a 3-vector.")
        if self.osc_freq_hz <= 0.0:
            raise ValueError("osc_freq_hz must be positive.")
        if not 0 <= int(self.tick_start) < TICK_COUNTER_MODULUS:
            raise ValueError("tick_start must fit in the 48-bit counter.")
        if self.noise_sigma_m < 0.0:
            raise ValueError("noise_sigma_m must be non-negative.")

    def adc_ticks(self, t_s: float) -> int:
        ticks = int(round(t_s * self.osc_freq_hz * (1.0 + self.freq_error_ppm * 1e-6)))
        return (int(self.tick_start) + ticks) % TICK_COUNTER_MODULUS

    def visible(self, t_s: float) -> tuple[np.ndarray, np.ndarray]:
        """Indices and elevations (radians) of satellites above the mask."""

        sv_pos = self.constellation.positions_ecef(t_s)
        elev = np.array(
            [elev_azim_rad(self.receiver_ecef_m, sv_pos[:, idx])[0] for idx in range(sv_pos.shape[1])]
        )
        keep = np.flatnonzero(elev >= np.deg2rad(self.elevation_mask_deg))
        return keep, elev[keep]

    def epoch(self, t_s: float) -> Epoch:
        """Observation batch for true time ``t_s`` seconds after the start."""

        keep, elev = self.visible(t_s)
        rx_col = self.receiver_ecef_m.reshape(3, 1)

        tau = np.full(len(self.constellation.sv_ids), 0.075)
        for _ in range(4):
            sv_tx = self.constellation.positions_ecef(t_s - tau)
            travel = np.linalg.norm(sv_tx - rx_col, axis=0)
            rotated = sagnac_rotate(sv_tx, travel)
            tau = np.linalg.norm(rotated - rx_col, axis=0) / LIGHT_SPEED_MPS

        sin_elev = np.sin(elev)
        noise = self.rng.normal(0.0, 1.0, size=len(keep)) * self.noise_sigma_m / sin_elev
        t_tx_tow = np.mod(self.t0_tow_s + t_s - tau[keep], GPS_WEEK_S)

        sv = np.vstack([sv_tx[:, keep], LIGHT_SPEED_MPS * t_tx_tow + noise])
        weights = sin_elev**2
        return Epoch(
            sv=sv,
            weights=weights,
            adc_ticks=self.adc_ticks(t_s),
            t_gps_s=float(np.mod(self.t0_tow_s + t_s, GPS_WEEK_S)),
        )
