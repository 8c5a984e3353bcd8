"""GPS time helpers."""

from __future__ import annotations

import numpy as np

from gnss_pos.constants import GPS_WEEK_S, LIGHT_SPEED_MPS

GPS_WEEK_M = GPS_WEEK_S * LIGHT_SPEED_MPS


def mod_gpsweek(value_m: float | np.ndarray, week_m: float = GPS_WEEK_M) -> float | np.ndarray:
    """Map a clock term in meters into ``[-week_m / 2, week_m / 2]``.

    Removes week-rollover artifacts from differences of times of week scaled
    by the speed of light.
    """

    value = np.asarray(value_m, dtype=float)
    wrapped = value - week_m * np.round(value / week_m)
    if np.ndim(wrapped) == 0:
        return float(wrapped)
    return wrapped

