"""Simplified GPS-like constellation model."""

from __future__ import annotations

from dataclasses import dataclass
from math import ceil

import numpy as np

from gnss_pos.constants import MU_EARTH, OMEGA_EARTH


@dataclass(frozen=True)
class SimpleGpsConfig:
    """Configuration for the simplified GPS constellation."""

    num_sats: int = 24
    num_planes: int = 6
    radius_m: float = 26_560_000.0
    inclination_deg: float = 55.0
    seed: int | None = 0


def _rotation(axis: int, angle_rad: float) -> np.ndarray:
    """Right-handed rotation matrix about coordinate axis 0 (x) or 2 (z)."""

    cos_a = np.cos(angle_rad)
    sin_a = np.sin(angle_rad)
    i, j = (1, 2) if axis == 0 else (0, 1)
    rot = np.eye(3)
    rot[i, i] = rot[j, j] = cos_a
    rot[i, j] = -sin_a
    rot[j, i] = sin_a
    return rot


class SimpleGpsConstellation:
    """Deterministic GPS-like constellation with circular orbits."""

    def __init__(self, config: SimpleGpsConfig | None = None) -> None:
        self.config = config or SimpleGpsConfig()
        rng = np.random.default_rng(self.config.seed)
        num_sats = self.config.num_sats
        num_planes = max(1, min(self.config.num_planes, num_sats))
        self.sv_ids = [f"G{idx + 1:02d}" for idx in range(num_sats)]
        self._mean_motion = float(np.sqrt(MU_EARTH / self.config.radius_m**3))

        plane_raan = np.linspace(0.0, 2.0 * np.pi, num_planes, endpoint=False)
        plane_offsets = rng.uniform(0.0, 2.0 * np.pi, size=num_planes)
        sats_per_plane = ceil(num_sats / num_planes)
        inclination = _rotation(0, np.deg2rad(self.config.inclination_deg))
        self._plane_rot = [_rotation(2, plane_raan[i % num_planes]) @ inclination for i in range(num_sats)]
        self._mean_anom = np.array(
            [
                (2.0 * np.pi * (i // num_planes) / sats_per_plane) + plane_offsets[i % num_planes]
                for i in range(num_sats)
            ],
            dtype=float,
        )

    def positions_ecef(self, t: float | np.ndarray) -> np.ndarray:
        """Return satellite ECEF positions as a (3, N) array.

        ``t`` is either one epoch for all satellites or one epoch per satellite.
        """

        t_sv = np.broadcast_to(np.asarray(t, dtype=float), self._mean_anom.shape)
        theta = self._mean_motion * t_sv + self._mean_anom
        r_orb = self.config.radius_m * np.vstack([np.cos(theta), np.sin(theta), np.zeros_like(theta)])
        columns = [
            _rotation(2, -OMEGA_EARTH * t_sv[idx]) @ (rot @ r_orb[:, idx])
            for idx, rot in enumerate(self._plane_rot)
        ]
        return np.column_stack(columns)
