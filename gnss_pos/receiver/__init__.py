"""Receiver position solvers."""

from gnss_pos.receiver.ekf_nav import EkfConfig, EkfPositionSolver
from gnss_pos.receiver.pos_solver import PosSolverImpl, make_pos_solver
from gnss_pos.receiver.spp import SinglePointSolver

__all__ = [
    "EkfConfig",
    "EkfPositionSolver",
    "PosSolverImpl",
    "SinglePointSolver",
    "make_pos_solver",
]
