"""Measurement sources."""

from gnss_pos.meas.synthetic import SyntheticEpochSource

__all__ = ["SyntheticEpochSource"]
