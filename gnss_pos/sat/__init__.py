"""Satellite models."""

from gnss_pos.sat.simple_gps import SimpleGpsConfig, SimpleGpsConstellation

__all__ = ["SimpleGpsConfig", "SimpleGpsConstellation"]
