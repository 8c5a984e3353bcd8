import numpy as np
import pytest

from gnss_pos.constants import GPS_WEEK_S, LIGHT_SPEED_MPS, TICK_COUNTER_MODULUS
from gnss_pos.meas.synthetic import SyntheticEpochSource


def test_epoch_batch_layout(make_source, receiver_ecef) -> None:
    source = make_source()
    epoch = source.epoch(0.0)

    nsv = epoch.sv.shape[1]
    assert epoch.sv.shape == (4, nsv)
    assert 6 <= nsv <= 16
    assert epoch.weights.shape == (nsv,)
    assert np.all(epoch.weights > 0.0)
    assert epoch.t_gps_s == pytest.approx(source.t0_tow_s)

    ct_tx = epoch.sv[3]
    travel = LIGHT_SPEED_MPS * epoch.t_gps_s - ct_tx
    assert np.all((travel > 19_000_000.0) & (travel < 27_000_000.0))


def test_visible_satellites_respect_mask(make_source) -> None:
    source = make_source(elevation_mask_deg=25.0)
    keep, elev = source.visible(0.0)
    assert len(keep) == len(elev)
    assert np.all(elev >= np.deg2rad(25.0))
    assert len(keep) < len(make_source().visible(0.0)[0])


def test_adc_ticks_wrap_at_48_bits(make_source) -> None:
    source = make_source(tick_start=TICK_COUNTER_MODULUS - 10)
    assert source.adc_ticks(0.0) == TICK_COUNTER_MODULUS - 10
    assert source.adc_ticks(1.0) == int(round(source.osc_freq_hz)) - 10


def test_adc_ticks_follow_frequency_error(make_source) -> None:
    source = make_source(freq_error_ppm=10.0)
    assert source.adc_ticks(1.0) == int(round(source.osc_freq_hz * (1.0 + 10e-6)))


def test_transmit_times_wrap_at_week_end(make_source) -> None:
    source = make_source(t0_tow_s=GPS_WEEK_S - 0.02)
    epoch = source.epoch(0.05)
    assert epoch.t_gps_s == pytest.approx(0.03)
    assert np.all(epoch.sv[3] > LIGHT_SPEED_MPS * (GPS_WEEK_S - 0.1))


def test_noise_is_seeded(make_source) -> None:
    epoch_a = make_source(noise_sigma_m=3.0, rng=np.random.default_rng(5)).epoch(1.0)
    epoch_b = make_source(noise_sigma_m=3.0, rng=np.random.default_rng(5)).epoch(1.0)
    clean = make_source().epoch(1.0)
    assert np.array_equal(epoch_a.sv, epoch_b.sv)
    assert not np.array_equal(epoch_a.sv[3], clean.sv[3])


@pytest.mark.parametrize(
    "overrides",
    [
        {"receiver_ecef_m": np.zeros(2)},
        {"osc_freq_hz": 0.0},
        {"tick_start": TICK_COUNTER_MODULUS},
        {"noise_sigma_m": -1.0},
    ],
)
def test_invalid_source_parameters(receiver_ecef, overrides) -> None:
    params = {"receiver_ecef_m": receiver_ecef, **overrides}
    with pytest.raises(ValueError):
        SyntheticEpochSource(**params)
