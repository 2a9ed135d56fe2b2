"""
fftcheck - Correctness Harness for FFT Libraries

Sweeps an FFT library under test across sizes, directions, flags and
transform kinds, and checks every output against a trusted reference.

Quick Start:
    from fftcheck import SweepController, SweepConfig

    report = SweepController(config=SweepConfig.quick()).run()
    print(report.summary())
    assert report.all_passed

Single Case:
    from fftcheck import TransformDescriptor, Direction, DualExecutionDriver, compare
    from fftcheck.backends import TorchBackend, ScipyReferenceBackend

    driver = DualExecutionDriver(TorchBackend(), ScipyReferenceBackend())
    result = driver.run(TransformDescriptor.c2c_1d(8, Direction.FORWARD))
    comparison = compare(result)

Method:
    Same seed, same input.
    Same input, two libraries.
    Two outputs, one tolerance: 1e-6 * sqrt(N).
    Real input also gets a Hermitian symmetry check.
"""

__version__ = "0.1.0"

# =============================================================================
# CASES: What gets run
# =============================================================================

from .descriptor import (
    TransformKind,
    Direction,
    TransformDescriptor,
    tolerance,
    BASE_EPSILON,
)

# =============================================================================
# FAILURES
# =============================================================================

from .errors import (
    FailureKind,
    ValidationError,
    AllocationFailure,
    PlanCreationFailure,
    ToleranceExceeded,
    SymmetryViolation,
)

# =============================================================================
# PIPELINE: Generate -> Execute -> Compare
# =============================================================================

from .inputs import (
    DEFAULT_SEED,
    make_generator,
    generate_input,
)

from .resources import CaseResources

from .driver import (
    DualExecutionDriver,
    DimensionAdapter,
    ExecutionResult,
)

from .comparator import (
    Comparison,
    compare,
    compare_elementwise,
    check_hermitian_symmetry,
)

# =============================================================================
# SWEEP
# =============================================================================

from .sweep import (
    SweepConfig,
    SweepController,
    SweepReport,
    CaseOutcome,
    enumerate_cases,
    run_sweep,
)

__all__ = [
    "__version__",

    # Cases
    "TransformKind",
    "Direction",
    "TransformDescriptor",
    "tolerance",
    "BASE_EPSILON",

    # Failures
    "FailureKind",
    "ValidationError",
    "AllocationFailure",
    "PlanCreationFailure",
    "ToleranceExceeded",
    "SymmetryViolation",

    # Pipeline
    "DEFAULT_SEED",
    "make_generator",
    "generate_input",
    "CaseResources",
    "DualExecutionDriver",
    "DimensionAdapter",
    "ExecutionResult",
    "Comparison",
    "compare",
    "compare_elementwise",
    "check_hermitian_symmetry",

    # Sweep
    "SweepConfig",
    "SweepController",
    "SweepReport",
    "CaseOutcome",
    "enumerate_cases",
    "run_sweep",
]
