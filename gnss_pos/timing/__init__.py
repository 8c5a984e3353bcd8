"""Tick counter and GPS time helpers."""

from gnss_pos.timing.gps_time import GPS_WEEK_M, mod_gpsweek
from gnss_pos.timing.ticks import TickHistory, elapsed_seconds, tick_delta

__all__ = [
    "GPS_WEEK_M",
    "TickHistory",
    "elapsed_seconds",
    "mod_gpsweek",
    "tick_delta",
]
