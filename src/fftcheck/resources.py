"""
Scoped ownership of case resources.

Every buffer and plan a case acquires is registered for release at the
moment it is acquired, so release happens on every exit path:

    with CaseResources(descriptor) as res:
        x = res.allocate(backend, np.complex64, 8)
        plan = res.create_plan(backend, backend.create_plan_1d, 8, Direction.FORWARD, 0)
        ...
    # plan destroyed, buffer freed (in reverse order of acquisition)
"""

from contextlib import ExitStack
from typing import Callable

import numpy as np

from .backends.base import FFTBackend, PlanHandle
from .errors import AllocationFailure, PlanCreationFailure
from .memory import Buffer


class CaseResources:
    """Owns the buffers and plans of one validation case"""

    def __init__(self, descriptor=None):
        self.descriptor = descriptor
        self._stack = ExitStack()
        self.acquired = 0
        self.released = 0

    def __enter__(self) -> "CaseResources":
        return self

    def __exit__(self, *exc_info):
        self.close()
        return False

    def close(self):
        self._stack.close()

    def allocate(self, backend: FFTBackend, dtype, length: int) -> Buffer:
        """Allocate room for `length` samples of `dtype` from `backend`"""
        nbytes = length * np.dtype(dtype).itemsize
        buffer = backend.allocate(nbytes)
        if buffer is None:
            raise AllocationFailure(
                f"{backend.name} could not allocate {nbytes} bytes",
                descriptor=self.descriptor,
            )
        self._register(backend.free, buffer)
        return buffer

    def create_plan(self, backend: FFTBackend, factory: Callable, *args) -> PlanHandle:
        """Build a plan with `factory(*args)`; fail if it returns no handle"""
        plan = factory(*args)
        if plan is None:
            raise PlanCreationFailure(
                f"{backend.name} returned no plan for {getattr(factory, '__name__', factory)}{args}",
                descriptor=self.descriptor,
            )
        self._register(backend.destroy_plan, plan)
        return plan

    def _register(self, release: Callable, resource):
        self.acquired += 1

        def _release():
            release(resource)
            self.released += 1

        self._stack.callback(_release)
