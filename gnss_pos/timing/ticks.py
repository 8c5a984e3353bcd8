"""Sample-counter bookkeeping for the 48-bit ADC tick counter."""

from __future__ import annotations

from gnss_pos.constants import TICK_COUNTER_MODULUS


class TickHistory:
    """Two-slot history of tick values; index 0 is the newest sample."""

    __slots__ = ("_slots",)

    def __init__(self) -> None:
        self._slots = [0, 0]

    def __getitem__(self, idx: int) -> int:
        return self._slots[idx]

    def __len__(self) -> int:
        return 2

    def __repr__(self) -> str:
        return f"TickHistory(newest={self._slots[0]}, previous={self._slots[1]})"

    @property
    def newest(self) -> int:
        return self._slots[0]

    @property
    def previous(self) -> int:
        return self._slots[1]

    def shift(self) -> None:
        """Copy the newest slot into the previous one."""

        self._slots[1] = self._slots[0]

    def record(self, adc_ticks: int) -> None:
        """Overwrite the newest slot without shifting."""

        self._slots[0] = int(adc_ticks)

    def push(self, adc_ticks: int) -> None:
        self.shift()
        self.record(adc_ticks)


def tick_delta(newest: int, previous: int) -> int:
    """Return the tick count elapsed from ``previous`` to ``newest``.

    The counter is monotone in hardware, so a newest value below the previous
    one means the counter wrapped exactly once. Multiple wraps between the two
    samples cannot be detected.
    """

    newest = int(newest)
    previous = int(previous)
    if newest < previous:
        newest += TICK_COUNTER_MODULUS
    return newest - previous


def elapsed_seconds(history: TickHistory | tuple[int, int] | list[int], osc_freq_hz: float) -> float:
    """Elapsed nominal oscillator seconds between the two samples of ``history``."""

    return tick_delta(history[0], history[1]) / float(osc_freq_hz)
