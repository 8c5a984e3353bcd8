"""Utilities for the position solver.

NOTE: Keep this package lightweight; it is imported by every solver module.
"""

from gnss_pos.utils.angles import elev_azim_deg, elev_azim_rad
from gnss_pos.utils.logging import get_logger
from gnss_pos.utils.wgs84 import ecef_to_enu_matrix, ecef_to_llh, llh_to_ecef

__all__ = [
    "ecef_to_enu_matrix",
    "ecef_to_llh",
    "elev_azim_deg",
    "elev_azim_rad",
    "get_logger",
    "llh_to_ecef",
]
