"""Cooperative yield points for long iterative solves.

The pipeline owns a :class:`YieldContext`. Solvers only ever hold a
:class:`YieldHandle`, which keeps a weak reference to the context. Once the
owner drops the context the handle expires and every further yield request
reports failure, so an in-flight solve aborts instead of blocking.
"""

from __future__ import annotations

import weakref
from typing import Callable


class YieldContext:
    """Scheduling context owned by the surrounding pipeline."""

    def __init__(self, on_yield: Callable[[], None] | None = None) -> None:
        self._on_yield = on_yield
        self.yield_count = 0

    def yield_now(self) -> None:
        self.yield_count += 1
        if self._on_yield is not None:
            self._on_yield()


class YieldHandle:
    """Non-owning, liveness-checked reference to a :class:`YieldContext`."""

    def __init__(self, ctx: YieldContext | None = None) -> None:
        self._detached = ctx is None
        self._ref: weakref.ReferenceType[YieldContext] | None = (
            None if ctx is None else weakref.ref(ctx)
        )

    @property
    def expired(self) -> bool:
        if self._detached:
            return False
        return self._ref is None or self._ref() is None

    def yield_now(self) -> bool:
        """Yield to the scheduler; False if the context is gone."""

        if self._detached:
            return True
        ctx = self._ref() if self._ref is not None else None
        if ctx is None:
            return False
        ctx.yield_now()
        return True
