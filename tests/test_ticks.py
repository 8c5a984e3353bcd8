import pytest

from gnss_pos.constants import TICK_COUNTER_MODULUS
from gnss_pos.timing.ticks import TickHistory, elapsed_seconds, tick_delta


def test_tick_delta_without_wrap() -> None:
    assert tick_delta(1_500, 500) == 1_000


def test_tick_delta_single_wrap() -> None:
    newest = 250
    previous = TICK_COUNTER_MODULUS - 750
    assert tick_delta(newest, previous) == 1_000
    assert tick_delta(newest, previous) == newest + 2**48 - previous


def test_elapsed_seconds_across_wrap_is_positive() -> None:
    osc_freq_hz = 66_666_600.0
    previous = TICK_COUNTER_MODULUS - 10_000_000
    newest = 56_666_600
    dt = elapsed_seconds((newest, previous), osc_freq_hz)
    assert dt > 0.0
    assert dt == pytest.approx((newest + 2**48 - previous) / osc_freq_hz)
    assert dt == pytest.approx(1.0)


def test_tick_history_push_shift_record() -> None:
    history = TickHistory()
    assert (history[0], history[1]) == (0, 0)

    history.push(100)
    history.push(250)
    assert history.newest == 250
    assert history.previous == 100

    history.record(400)
    assert (history.newest, history.previous) == (400, 100)

    history.shift()
    assert (history.newest, history.previous) == (400, 400)
    assert elapsed_seconds(history, 10.0) == 0.0
