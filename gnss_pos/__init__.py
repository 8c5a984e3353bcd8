"""Hybrid single-point / EKF GPS position solver."""

from gnss_pos.config import PosSolverConfig
from gnss_pos.models import ElevAzim, Epoch, Llh, PosSolver
from gnss_pos.receiver.pos_solver import make_pos_solver
from gnss_pos.runtime.scheduling import YieldContext

__all__ = [
    "ElevAzim",
    "Epoch",
    "Llh",
    "PosSolver",
    "PosSolverConfig",
    "YieldContext",
    "make_pos_solver",
]
