"""
Sweep Controller

Enumerates the full parameter cross-product and runs every case:

    kind -> size(s) -> direction -> flags

Each case yields a CaseOutcome. The SweepReport aggregates all of them,
so one run shows every failing tuple instead of only the first. Pass
`fail_fast=True` to stop at the first failure instead.

Usage:
    controller = SweepController(config=SweepConfig.quick())
    report = controller.run()
    print(report.summary())
"""

import json
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple, Any

from .backends import FFTBackend, TorchBackend, ScipyReferenceBackend
from .comparator import compare
from .descriptor import TransformDescriptor, TransformKind, Direction, BASE_EPSILON
from .driver import DualExecutionDriver
from .errors import FailureKind, ValidationError, error_for
from .inputs import DEFAULT_SEED, make_generator


# =============================================================================
# Configuration
# =============================================================================

@dataclass
class SweepConfig:
    """
    Parameter space of a sweep.

    Size ranges are powers of two from `min` up to but excluding `max`.
    """
    kinds: Tuple[TransformKind, ...] = (
        TransformKind.C2C_1D,
        TransformKind.R2C_1D,
        TransformKind.C2C_2D,
    )

    min_size_1d: int = 2
    max_size_1d: int = 128 * 1024
    min_size_r2c: int = 4        # Smallest non-degenerate symmetric spectrum
    max_size_r2c: int = 128 * 1024
    min_size_2d: int = 2
    max_size_2d: int = 1024

    directions: Tuple[Direction, ...] = (Direction.FORWARD, Direction.INVERSE)
    flags: Tuple[int, ...] = tuple(range(8))

    epsilon: float = BASE_EPSILON
    seed: int = DEFAULT_SEED

    fail_fast: bool = False
    workers: int = 1

    def __post_init__(self):
        self.kinds = tuple(TransformKind(k) for k in self.kinds)
        self.directions = tuple(Direction(d) for d in self.directions)
        self.flags = tuple(int(f) for f in self.flags)
        if self.workers < 1:
            raise ValueError(f"workers must be at least 1, got {self.workers}")
        if not self.epsilon > 0:
            raise ValueError(f"epsilon must be positive, got {self.epsilon}")
        for f in self.flags:
            if f < 0:
                raise ValueError(f"flags must be non-negative, got {f}")
        for name in ("1d", "r2c", "2d"):
            lo = getattr(self, f"min_size_{name}")
            hi = getattr(self, f"max_size_{name}")
            if lo < 1:
                raise ValueError(f"min_size_{name} must be at least 1, got {lo}")
            if lo > hi:
                raise ValueError(f"min_size_{name} ({lo}) exceeds max_size_{name} ({hi})")

    @classmethod
    def quick(cls, **overrides) -> "SweepConfig":
        """Small sweep for smoke testing"""
        params = dict(max_size_1d=1024, max_size_r2c=1024, max_size_2d=64)
        params.update(overrides)
        return cls(**params)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["kinds"] = [k.value for k in self.kinds]
        data["directions"] = [int(d) for d in self.directions]
        data["flags"] = list(self.flags)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SweepConfig":
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        unknown = set(data) - set(known)
        if unknown:
            raise ValueError(f"Unknown sweep config keys: {', '.join(sorted(unknown))}")
        return cls(**known)

    def save(self, path: Path):
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, path: Path) -> "SweepConfig":
        with open(path) as f:
            return cls.from_dict(json.load(f))


def powers_of_two(start: int, stop: int) -> Iterator[int]:
    """start, 2*start, ... while < stop"""
    n = start
    while n < stop:
        yield n
        n <<= 1


def enumerate_cases(config: SweepConfig) -> Iterator[TransformDescriptor]:
    """Every case of the sweep, in execution order"""
    for kind in config.kinds:
        if kind is TransformKind.C2C_1D:
            for n in powers_of_two(config.min_size_1d, config.max_size_1d):
                for direction in config.directions:
                    for flags in config.flags:
                        yield TransformDescriptor.c2c_1d(n, direction, flags)

        elif kind is TransformKind.R2C_1D:
            for n in powers_of_two(config.min_size_r2c, config.max_size_r2c):
                for flags in config.flags:
                    yield TransformDescriptor.r2c_1d(n, flags)

        elif kind is TransformKind.C2C_2D:
            for ny in powers_of_two(config.min_size_2d, config.max_size_2d):
                for nx in powers_of_two(config.min_size_2d, config.max_size_2d):
                    for direction in config.directions:
                        for flags in config.flags:
                            yield TransformDescriptor.c2c_2d(nx, ny, direction, flags)


# =============================================================================
# Outcomes
# =============================================================================

@dataclass
class CaseOutcome:
    """Pass, or fail with kind, parameters and observed delta"""
    descriptor: TransformDescriptor
    passed: bool
    failure: Optional[FailureKind] = None
    message: str = ""
    max_delta: Optional[float] = None
    tolerance: Optional[float] = None
    worst_index: Optional[int] = None
    elapsed: float = 0.0

    def raise_for_status(self):
        if self.passed:
            return
        raise error_for(self.failure)(
            self.message,
            descriptor=self.descriptor,
            delta=self.max_delta,
            index=self.worst_index,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "case": self.descriptor.to_dict(),
            "passed": self.passed,
            "failure": self.failure.value if self.failure else None,
            "message": self.message,
            "max_delta": self.max_delta,
            "tolerance": self.tolerance,
            "worst_index": self.worst_index,
            "elapsed": self.elapsed,
        }


@dataclass
class SweepReport:
    """All outcomes of one sweep"""
    outcomes: List[CaseOutcome] = field(default_factory=list)
    elapsed: float = 0.0

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def passed(self) -> int:
        return sum(1 for o in self.outcomes if o.passed)

    @property
    def failures(self) -> List[CaseOutcome]:
        return [o for o in self.outcomes if not o.passed]

    @property
    def all_passed(self) -> bool:
        return all(o.passed for o in self.outcomes)

    def failure_counts(self) -> Dict[FailureKind, int]:
        counts = {}
        for o in self.failures:
            counts[o.failure] = counts.get(o.failure, 0) + 1
        return counts

    def summary(self, max_failures: int = 20) -> str:
        """Summary of the sweep"""
        status = "PASSED" if self.all_passed else "FAILED"
        lines = [
            f"Sweep: {self.passed}/{self.total} cases passed [{status}] in {self.elapsed:.2f}s",
        ]

        for kind, count in self.failure_counts().items():
            lines.append(f"  {kind.value}: {count}")

        failures = self.failures
        for o in failures[:max_failures]:
            lines.append(f"  FAIL {o.descriptor.label}: {o.message}")
        if len(failures) > max_failures:
            lines.append(f"  ... {len(failures) - max_failures} more")

        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "passed": self.passed,
            "all_passed": self.all_passed,
            "elapsed": self.elapsed,
            "failure_counts": {k.value: v for k, v in self.failure_counts().items()},
            "outcomes": [o.to_dict() for o in self.outcomes],
        }

    def save(self, path: Path):
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)


# =============================================================================
# Controller
# =============================================================================

class SweepController:
    """
    Drives the sweep.

    Args:
        tested: Library under test (TorchBackend by default)
        reference: Reference library (ScipyReferenceBackend by default)
        config: Parameter space and run options
        verbose: Whether to print progress
    """

    def __init__(self,
                 tested: Optional[FFTBackend] = None,
                 reference: Optional[FFTBackend] = None,
                 config: Optional[SweepConfig] = None,
                 verbose: bool = True):
        self.tested = tested or TorchBackend()
        self.reference = reference or ScipyReferenceBackend()
        self.config = config or SweepConfig()
        self.verbose = verbose

        self.driver = DualExecutionDriver(self.tested, self.reference, seed=self.config.seed)

    def run_case(self, descriptor: TransformDescriptor) -> CaseOutcome:
        """
        Run one case and report how it went.

        Allocation and plan failures become failed outcomes, as do
        comparison failures.
        """
        start = time.perf_counter()
        rng = make_generator(self.config.seed)
        tol = descriptor.tolerance(self.config.epsilon)

        try:
            result = self.driver.run(descriptor, rng)
        except ValidationError as e:
            return CaseOutcome(
                descriptor=descriptor,
                passed=False,
                failure=e.kind,
                message=str(e.args[0]) if e.args else e.kind.value,
                tolerance=tol,
                elapsed=time.perf_counter() - start,
            )

        comparison = compare(result, self.config.epsilon)

        return CaseOutcome(
            descriptor=descriptor,
            passed=comparison.passed,
            failure=comparison.kind,
            message=comparison.message,
            max_delta=comparison.max_delta,
            tolerance=comparison.tolerance,
            worst_index=comparison.worst_index,
            elapsed=time.perf_counter() - start,
        )

    def cases(self) -> List[TransformDescriptor]:
        return list(enumerate_cases(self.config))

    def run(self, cases: Optional[List[TransformDescriptor]] = None) -> SweepReport:
        """
        Run every case and collect the outcomes.

        Raises:
            ValidationError: first failure, only when fail_fast is set
        """
        if cases is None:
            cases = self.cases()

        self._log(f"Sweeping {len(cases)} cases: {self.tested.name} vs {self.reference.name}")
        report = SweepReport()
        start = time.perf_counter()

        if self.config.workers > 1:
            with ThreadPoolExecutor(max_workers=self.config.workers) as executor:
                for outcome in executor.map(self.run_case, cases):
                    self._record(report, outcome)
        else:
            for descriptor in cases:
                self._record(report, self.run_case(descriptor))

        report.elapsed = time.perf_counter() - start
        self._log(report.summary())
        return report

    def _record(self, report: SweepReport, outcome: CaseOutcome):
        report.outcomes.append(outcome)
        if outcome.passed:
            return
        self._log(f"  FAIL {outcome.descriptor.label}: {outcome.failure.value} {outcome.message}")
        if self.config.fail_fast:
            outcome.raise_for_status()

    def _log(self, msg: str):
        """Print log message if verbose"""
        if self.verbose:
            print(msg)


def run_sweep(config: Optional[SweepConfig] = None, verbose: bool = True) -> SweepReport:
    """
    Convenience function to run a sweep with the default backends.

    Example:
        report = run_sweep(SweepConfig.quick())
        assert report.all_passed
    """
    return SweepController(config=config, verbose=verbose).run()
