"""Physical and GPS system constants shared across the receiver."""

from __future__ import annotations

LIGHT_SPEED_MPS = 299_792_458.0
OMEGA_EARTH = 7.2921151467e-5
MU_EARTH = 3.986004418e14

GPS_WEEK_S = 604_800.0

TICK_COUNTER_BITS = 48
TICK_COUNTER_MODULUS = 1 << TICK_COUNTER_BITS
