"""Shared fixtures: a static receiver and a synthetic observation source."""

from __future__ import annotations

import numpy as np
import pytest

from gnss_pos.meas.synthetic import SyntheticEpochSource
from gnss_pos.sat.simple_gps import SimpleGpsConfig, SimpleGpsConstellation
from gnss_pos.utils.wgs84 import llh_to_ecef

OSC_FREQ_HZ = 66_666_600.0


@pytest.fixture
def receiver_ecef() -> np.ndarray:
    return llh_to_ecef(37.4275, -122.1697, 30.0)


@pytest.fixture
def make_source(receiver_ecef: np.ndarray):
    def _make(**overrides) -> SyntheticEpochSource:
        params = dict(
            receiver_ecef_m=receiver_ecef,
            constellation=SimpleGpsConstellation(SimpleGpsConfig(seed=0)),
            osc_freq_hz=OSC_FREQ_HZ,
            noise_sigma_m=0.0,
            rng=np.random.default_rng(4),
        )
        params.update(overrides)
        return SyntheticEpochSource(**params)

    return _make
