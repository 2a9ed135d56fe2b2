"""
FFT Backend Contract

Every FFT library the harness talks to exposes the same plan / execute /
destroy contract, plus aligned allocation:

    plan = backend.create_plan_1d(N, Direction.FORWARD, flags)
    backend.execute(plan, output_buffer, input_buffer)
    backend.destroy_plan(plan)

Plan constructors return None for parameters the library does not support.
Backends count live plans and buffers so leaks are observable.
"""

import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

import numpy as np

from ..descriptor import TransformKind, Direction
from ..memory import Buffer, aligned_empty, DEFAULT_ALIGNMENT


class DimensionOrder(Enum):
    """Argument order a backend expects for 2D plans"""
    WIDTH_HEIGHT = "width_height"    # (nx, ny): fastest-varying dimension first
    HEIGHT_WIDTH = "height_width"    # (rows, columns), as FFTW does


@dataclass(eq=False)
class PlanHandle:
    """Opaque plan bound to one backend and one transform"""
    owner: str
    kind: TransformKind
    width: int
    height: int
    direction: Direction
    flags: int
    destroyed: bool = False

    @property
    def sample_count(self) -> int:
        return self.width * self.height

    @property
    def input_dtype(self) -> np.dtype:
        if self.kind is TransformKind.R2C_1D:
            return np.dtype(np.float32)
        return np.dtype(np.complex64)

    @property
    def output_length(self) -> int:
        return self.sample_count


class FFTBackend(ABC):
    """
    Base class for FFT libraries.

    Subclasses decide which parameters they support (`_supports`) and how
    to compute a transform (`_transform`); the base class owns handle
    bookkeeping and buffer I/O.
    """

    name = "backend"
    dimension_order = DimensionOrder.WIDTH_HEIGHT
    # Flag that makes r2c plans emit all N bins instead of N/2 + 1
    full_r2c_flag = 0

    def __init__(self, alignment: int = DEFAULT_ALIGNMENT,
                 memory_limit: Optional[int] = None):
        """
        Args:
            alignment: Byte alignment of allocated buffers
            memory_limit: Optional cap on live allocated bytes; allocations
                beyond it return None
        """
        self.alignment = alignment
        self.memory_limit = memory_limit

        self._lock = threading.Lock()
        self._live_plans = 0
        self._live_buffers = 0
        self._live_bytes = 0

    # =========================================================================
    # Accounting
    # =========================================================================

    @property
    def live_plans(self) -> int:
        return self._live_plans

    @property
    def live_buffers(self) -> int:
        return self._live_buffers

    @property
    def live_bytes(self) -> int:
        return self._live_bytes

    # =========================================================================
    # Memory
    # =========================================================================

    def allocate(self, nbytes: int) -> Optional[Buffer]:
        """Allocate an aligned buffer, or None if the memory limit is hit"""
        with self._lock:
            if self.memory_limit is not None and self._live_bytes + nbytes > self.memory_limit:
                return None
            self._live_buffers += 1
            self._live_bytes += nbytes

        return Buffer(aligned_empty(nbytes, self.alignment), owner=self.name)

    def free(self, buffer: Buffer):
        if buffer.owner != self.name:
            raise RuntimeError(f"{self.name} cannot free a buffer owned by {buffer.owner}")
        if buffer.released:
            raise RuntimeError(f"Buffer from {self.name} freed twice")
        buffer.released = True
        with self._lock:
            self._live_buffers -= 1
            self._live_bytes -= buffer.nbytes

    # =========================================================================
    # Plans
    # =========================================================================

    def create_plan_1d(self, size: int, direction: Direction,
                       flags: int = 0) -> Optional[PlanHandle]:
        return self._create(TransformKind.C2C_1D, size, 1, Direction(direction), flags)

    def create_plan_1d_real(self, size: int, flags: int = 0) -> Optional[PlanHandle]:
        return self._create(TransformKind.R2C_1D, size, 1, Direction.FORWARD, flags)

    def create_plan_2d(self, dim0: int, dim1: int, direction: Direction,
                       flags: int = 0) -> Optional[PlanHandle]:
        """
        Create a 2D complex plan.

        `dim0, dim1` follow this backend's `dimension_order`.
        """
        width, height = self._width_height(dim0, dim1)
        return self._create(TransformKind.C2C_2D, width, height, Direction(direction), flags)

    def destroy_plan(self, plan: PlanHandle):
        self._check_plan(plan)
        plan.destroyed = True
        with self._lock:
            self._live_plans -= 1

    def execute(self, plan: PlanHandle, output: Buffer, input: Buffer):
        """Run `plan` on `input`, writing the result to `output`"""
        self._check_plan(plan)

        x = input.view(plan.input_dtype, plan.sample_count)
        out = output.view(np.complex64, self.output_length(plan))

        result = np.asarray(self._transform(plan, x)).reshape(-1)
        if result.size != out.size:
            raise RuntimeError(
                f"{self.name} produced {result.size} samples, plan expects {out.size}"
            )
        out[:] = result

    def output_length(self, plan: PlanHandle) -> int:
        """Number of complex samples `execute` writes for this plan"""
        if plan.kind is TransformKind.R2C_1D and not (plan.flags & self.full_r2c_flag):
            return plan.width // 2 + 1
        return plan.output_length

    def _create(self, kind: TransformKind, width: int, height: int,
                direction: Direction, flags: int) -> Optional[PlanHandle]:
        if not self._supports(kind, width, height, flags):
            return None
        plan = PlanHandle(self.name, kind, width, height, direction, flags)
        with self._lock:
            self._live_plans += 1
        return plan

    def _check_plan(self, plan: PlanHandle):
        if plan.owner != self.name:
            raise RuntimeError(f"{self.name} cannot use a plan created by {plan.owner}")
        if plan.destroyed:
            raise RuntimeError(f"Plan {plan.kind.value} {plan.width}x{plan.height} already destroyed")

    def _width_height(self, dim0: int, dim1: int) -> Tuple[int, int]:
        if self.dimension_order is DimensionOrder.HEIGHT_WIDTH:
            return dim1, dim0
        return dim0, dim1

    # =========================================================================
    # Library specifics
    # =========================================================================

    @abstractmethod
    def _supports(self, kind: TransformKind, width: int, height: int, flags: int) -> bool:
        """Whether a plan with these parameters can be built"""

    @abstractmethod
    def _transform(self, plan: PlanHandle, x: np.ndarray) -> np.ndarray:
        """
        Compute the transform.

        Args:
            plan: Plan being executed
            x: Flat input, row-major with the width dimension fastest

        Returns:
            Flat complex output of `output_length(plan)` samples
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}(live_plans={self._live_plans}, live_buffers={self._live_buffers})"
