"""
Dual Execution Driver

Runs one case through both the library under test and the reference:

    1. Build an equivalent plan in each library
    2. Generate the input once and copy it verbatim to both sides
    3. Execute reference, then tested, once each
    4. Hand back both outputs

All buffers and plans are released before `run` returns, whether or not
the case succeeded.
"""

from dataclasses import dataclass
from typing import Tuple

import numpy as np

from .backends.base import FFTBackend, PlanHandle, DimensionOrder
from .descriptor import TransformDescriptor, TransformKind
from .inputs import DEFAULT_SEED, make_generator, generate_input
from .resources import CaseResources


@dataclass
class ExecutionResult:
    """Input and both outputs of one case"""
    descriptor: TransformDescriptor
    input: np.ndarray
    tested: np.ndarray       # Tested library output (full length)
    reference: np.ndarray    # Reference output (packed length for r2c)


class DimensionAdapter:
    """Normalizes (width, height) into each backend's 2D argument order"""

    @staticmethod
    def plan_args(backend: FFTBackend, width: int, height: int) -> Tuple[int, int]:
        if backend.dimension_order is DimensionOrder.HEIGHT_WIDTH:
            return height, width
        return width, height


class DualExecutionDriver:
    """
    Executes a descriptor against two backends.

    Args:
        tested: Library under test
        reference: Reference library
        seed: Seed for the per-case input generator
    """

    def __init__(self, tested: FFTBackend, reference: FFTBackend,
                 seed: int = DEFAULT_SEED):
        self.tested = tested
        self.reference = reference
        self.seed = seed

    def create_plan(self, res: CaseResources, backend: FFTBackend,
                    descriptor: TransformDescriptor, flags: int) -> PlanHandle:
        """Build the plan for `descriptor` in `backend`'s calling convention"""
        d = descriptor
        if d.kind is TransformKind.C2C_1D:
            return res.create_plan(backend, backend.create_plan_1d, d.nx, d.direction, flags)
        if d.kind is TransformKind.R2C_1D:
            return res.create_plan(backend, backend.create_plan_1d_real,
                                   d.nx, flags | backend.full_r2c_flag)
        dim0, dim1 = DimensionAdapter.plan_args(backend, d.nx, d.ny)
        return res.create_plan(backend, backend.create_plan_2d, dim0, dim1, d.direction, flags)

    def run(self, descriptor: TransformDescriptor,
            rng: np.random.Generator = None) -> ExecutionResult:
        """
        Execute one case on both libraries.

        Raises:
            AllocationFailure: a backend could not allocate a buffer
            PlanCreationFailure: a backend returned no plan
        """
        if rng is None:
            rng = make_generator(self.seed)

        in_dtype = np.float32 if descriptor.is_real_input else np.complex64
        n = descriptor.input_length

        with CaseResources(descriptor) as res:
            ref_plan = self.create_plan(res, self.reference, descriptor, 0)
            test_plan = self.create_plan(res, self.tested, descriptor, descriptor.flags)

            test_in = res.allocate(self.tested, in_dtype, n)
            ref_in = res.allocate(self.reference, in_dtype, n)

            ref_len = self.reference.output_length(ref_plan)
            test_len = self.tested.output_length(test_plan)
            ref_out = res.allocate(self.reference, np.complex64, ref_len)
            test_out = res.allocate(self.tested, np.complex64, test_len)

            test_in.view(in_dtype, n)[:] = generate_input(descriptor, rng)
            ref_in.data[:] = test_in.data
            if not np.array_equal(ref_in.data, test_in.data):
                raise RuntimeError("Input buffers diverged before execution")

            self.reference.execute(ref_plan, ref_out, ref_in)
            self.tested.execute(test_plan, test_out, test_in)

            return ExecutionResult(
                descriptor=descriptor,
                input=test_in.view(in_dtype, n).copy(),
                tested=test_out.view(np.complex64, test_len).copy(),
                reference=ref_out.view(np.complex64, ref_len).copy(),
            )
