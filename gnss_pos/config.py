"""Configuration objects for the position solver."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PosSolverConfig:
    """Session-wide position solver settings."""

    uere_m: float = 10.0
    osc_freq_hz: float = 66_666_600.0
    spp_max_iter: int = 20
    alt_min_m: float = -100.0
    alt_max_m: float = 9000.0
    ekf_confidence_max: int = 4

    def __post_init__(self) -> None:
        if self.uere_m <= 0.0:
            raise ValueError("uere_m must be positive.")
        if self.osc_freq_hz <= 0.0:
            raise ValueError("osc_freq_hz must be positive.")
        if self.spp_max_iter < 1:
            raise ValueError("spp_max_iter must be at least 1.")
        if self.ekf_confidence_max < 1:
            raise ValueError("ekf_confidence_max must be at least 1.")
        if self.alt_min_m >= self.alt_max_m:
            raise ValueError("alt_min_m must be below alt_max_m.")
