"""Core data models and the position solver interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class Llh:
    """Geodetic coordinates on the WGS-84 ellipsoid."""

    lat_deg: float = 0.0
    lon_deg: float = 0.0
    alt_m: float = 0.0


@dataclass(frozen=True)
class ElevAzim:
    """Look angles from the receiver to one satellite."""

    elev_deg: float
    azim_deg: float


@dataclass(frozen=True)
class Epoch:
    """One batch of satellite observations.

    ``sv`` has shape (4, N); column i is ``[x_m, y_m, z_m, c * t_tx]`` with the
    satellite ECEF position at transmit time and the transmit time (GPS time of
    week) scaled to meters. ``weights`` holds N inverse-variance estimates and
    ``adc_ticks`` is the 48-bit sample counter value at the epoch.
    """

    sv: np.ndarray
    weights: np.ndarray
    adc_ticks: int
    t_gps_s: float | None = None


class PosSolver(ABC):
    """Interface of the per-epoch position/time/oscillator estimator."""

    @abstractmethod
    def solve(self, sv: np.ndarray, weight: np.ndarray, adc_ticks: int) -> bool:
        """Process one epoch; False only when the batch holds no satellites."""

    @abstractmethod
    def pos_valid(self) -> bool:
        """True once any fix has been accepted."""

    @abstractmethod
    def spp_valid(self) -> bool:
        """True if the current epoch's single-point fix passed the plausibility gate."""

    @abstractmethod
    def ekf_valid(self) -> bool:
        """True once the drift filter has completed at least one update."""

    @abstractmethod
    def pos(self) -> np.ndarray:
        """Exported ECEF position in meters."""

    @abstractmethod
    def llh(self) -> Llh:
        """Exported geodetic coordinates."""

    @abstractmethod
    def t_rx(self) -> float:
        """Exported receiver time (GPS time of week, seconds)."""

    @abstractmethod
    def osc_corr(self) -> float:
        """Exported oscillator correction factor."""

    @abstractmethod
    def elev_azim(self, sv: np.ndarray) -> list[ElevAzim]:
        """Look angles for each satellite column of ``sv``."""

    @property
    @abstractmethod
    def ekf_confidence(self) -> int:
        """Filter maturity: -1 not running, 0 bootstrapped, then one per update up to the cap."""

    def geodetic(self) -> Llh:
        return self.llh()

    def receiver_time(self) -> float:
        return self.t_rx()

    def oscillator_correction(self) -> float:
        return self.osc_corr()

    def elevation_azimuth(self, sv: np.ndarray) -> list[ElevAzim]:
        return self.elev_azim(sv)
