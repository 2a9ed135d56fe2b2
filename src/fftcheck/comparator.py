"""
Output comparison.

Two checks:

1. Elementwise: |tested[i] - reference[i]| < tolerance for every bin both
   libraries produce.
2. Hermitian symmetry (real input only): the tested library's full
   spectrum satisfies X[N-i] = conj(X[i]) on each component, and its DC
   and Nyquist bins are real. This checks the tested output against
   itself, since the reference only produces bins 0..N/2.

NaN deltas always fail.
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np

from .descriptor import BASE_EPSILON
from .errors import FailureKind, error_for


@dataclass
class Comparison:
    """Result of checking one output"""
    passed: bool
    tolerance: float
    max_delta: float = 0.0
    worst_index: Optional[int] = None
    kind: Optional[FailureKind] = None
    checked: int = 0

    @property
    def message(self) -> str:
        if self.passed:
            return ""
        return (f"max delta {self.max_delta:.3e} at index {self.worst_index} "
                f"(tolerance {self.tolerance:.3e})")

    def raise_for_status(self, descriptor=None):
        """Raise the matching ValidationError if the check failed"""
        if self.passed:
            return
        raise error_for(self.kind)(
            self.message,
            descriptor=descriptor,
            delta=self.max_delta,
            index=self.worst_index,
        )


def _summarize(delta: np.ndarray, tol: float, kind: FailureKind) -> Comparison:
    """Build a Comparison from per-bin deltas"""
    if delta.size == 0:
        return Comparison(passed=True, tolerance=tol)

    passed = bool(np.all(delta < tol))
    # argmax lands on the first NaN if there is one
    worst = int(np.argmax(delta))

    return Comparison(
        passed=passed,
        tolerance=tol,
        max_delta=float(delta[worst]),
        worst_index=worst,
        kind=None if passed else kind,
        checked=int(delta.size),
    )


def compare_elementwise(tested: np.ndarray, reference: np.ndarray,
                        tol: float, count: Optional[int] = None) -> Comparison:
    """
    Compare the first `count` bins of two outputs.

    Args:
        tested: Tested library output
        reference: Reference output
        tol: Strict upper bound on |tested[i] - reference[i]|
        count: Number of bins to compare (default: all of reference)
    """
    if count is None:
        count = len(reference)
    if len(tested) < count or len(reference) < count:
        raise ValueError(
            f"Cannot compare {count} bins: tested has {len(tested)}, reference has {len(reference)}"
        )

    a = np.asarray(tested[:count], dtype=np.complex128)
    b = np.asarray(reference[:count], dtype=np.complex128)
    return _summarize(np.abs(a - b), tol, FailureKind.TOLERANCE_EXCEEDED)


def check_hermitian_symmetry(spectrum: np.ndarray, n: int, tol: float,
                             check_real_bins: bool = True) -> Comparison:
    """
    Check that a full N-bin spectrum of a real signal is Hermitian.

    For i in [1, N/2), the real and imaginary parts of X[i] and
    conj(X[N-i]) must each differ by less than `tol`. With
    `check_real_bins`, |imag(X[0])| and |imag(X[N/2])| must also be
    below `tol`.

    The reported index is the bin i whose pair failed, or 0 / N/2 for
    the real bins.
    """
    if len(spectrum) < n:
        raise ValueError(f"Spectrum has {len(spectrum)} bins, need {n}")

    x = np.asarray(spectrum[:n], dtype=np.complex128)
    half = n // 2

    # delta[i] for i in [0, N/2]; pairs fill 1..N/2-1
    delta = np.zeros(half + 1, dtype=np.float64)
    if half > 1:
        i = np.arange(1, half)
        a = x[i]
        b = np.conj(x[n - i])
        delta[1:half] = np.maximum(np.abs(a.real - b.real), np.abs(a.imag - b.imag))

    if check_real_bins:
        delta[0] = abs(x[0].imag)
        if n % 2 == 0:
            delta[half] = abs(x[half].imag)

    return _summarize(delta, tol, FailureKind.SYMMETRY_VIOLATION)


def compare(result, epsilon: float = BASE_EPSILON) -> Comparison:
    """
    Run every check that applies to an ExecutionResult.

    Returns the first failing Comparison, or the elementwise one if all
    checks pass.
    """
    descriptor = result.descriptor
    tol = descriptor.tolerance(epsilon)

    elementwise = compare_elementwise(result.tested, result.reference, tol,
                                      count=descriptor.packed_length)
    if not elementwise.passed or not descriptor.is_real_input:
        return elementwise
    if len(result.tested) < descriptor.nx:
        # Tested library only emitted the packed half spectrum
        return elementwise

    symmetry = check_hermitian_symmetry(result.tested, descriptor.nx, tol)
    if not symmetry.passed:
        return symmetry
    return elementwise
