"""Runtime helpers shared by the iterative solvers."""

from gnss_pos.runtime.scheduling import YieldContext, YieldHandle

__all__ = ["YieldContext", "YieldHandle"]
