"""
Comparator Tests

Elementwise tolerance and Hermitian symmetry, on synthetic data and on
real library output.
"""

import numpy as np
import pytest

from fftcheck.comparator import (
    compare,
    compare_elementwise,
    check_hermitian_symmetry,
)
from fftcheck.descriptor import Direction, TransformDescriptor
from fftcheck.driver import DualExecutionDriver, ExecutionResult
from fftcheck.errors import FailureKind, ToleranceExceeded, SymmetryViolation


class TestElementwise:
    """|tested[i] - reference[i]| < tolerance."""

    def test_identical(self):
        a = np.arange(8, dtype=np.complex64)
        c = compare_elementwise(a, a.copy(), 1e-6)
        assert c.passed
        assert c.max_delta == 0.0
        assert c.checked == 8

    def test_strict_bound(self):
        """A delta equal to the tolerance fails."""
        a = np.zeros(4, dtype=np.complex128)
        b = a.copy()
        b[2] = 0.25
        assert not compare_elementwise(a, b, 0.25).passed
        assert compare_elementwise(a, b, 0.2500001).passed

    def test_reports_worst_bin(self):
        a = np.zeros(8, dtype=np.complex64)
        b = a.copy()
        b[3] = 1e-3j
        b[5] = 2e-3
        c = compare_elementwise(a, b, 1e-4)
        assert not c.passed
        assert c.kind is FailureKind.TOLERANCE_EXCEEDED
        assert c.worst_index == 5
        assert c.max_delta == pytest.approx(2e-3, rel=1e-6)

    def test_nan_fails(self):
        a = np.zeros(4, dtype=np.complex64)
        b = a.copy()
        b[1] = np.nan
        c = compare_elementwise(a, b, 1.0)
        assert not c.passed
        assert c.worst_index == 1

    def test_count_limits_bins(self):
        """Only the shared packed bins are compared."""
        a = np.zeros(8, dtype=np.complex64)
        b = np.zeros(5, dtype=np.complex64)
        a[6] = 100.0
        assert compare_elementwise(a, b, 1e-6, count=5).passed

    def test_short_buffers_rejected(self):
        with pytest.raises(ValueError):
            compare_elementwise(np.zeros(3), np.zeros(5), 1e-6, count=5)

    def test_raise_for_status(self):
        a = np.zeros(2, dtype=np.complex64)
        b = np.ones(2, dtype=np.complex64)
        with pytest.raises(ToleranceExceeded):
            compare_elementwise(a, b, 1e-6).raise_for_status()


class TestHermitianSymmetry:
    """X[N-i] = conj(X[i]) for real input."""

    def test_real_signal_spectrum(self):
        x = np.random.default_rng(0).random(32) - 0.5
        assert check_hermitian_symmetry(np.fft.fft(x), 32, 1e-9).passed

    def test_broken_pair(self):
        x = np.random.default_rng(0).random(16) - 0.5
        spectrum = np.fft.fft(x)
        spectrum[13] += 1e-3    # pairs with bin 3
        c = check_hermitian_symmetry(spectrum, 16, 1e-6)
        assert not c.passed
        assert c.kind is FailureKind.SYMMETRY_VIOLATION
        assert c.worst_index == 3

    def test_components_checked_independently(self):
        """Each component must be within tolerance on its own."""
        spectrum = np.zeros(8, dtype=np.complex128)
        spectrum[1] = 1.0 + 1.0j
        spectrum[7] = 1.0 - 1.0j + 0.9e-6 * (1 + 1j)
        assert check_hermitian_symmetry(spectrum, 8, 1e-6).passed
        spectrum[7] += 0.2e-6j
        assert not check_hermitian_symmetry(spectrum, 8, 1e-6).passed

    def test_dc_and_nyquist_real(self):
        spectrum = np.zeros(4, dtype=np.complex128)
        spectrum[2] = 1.0 + 1e-3j
        c = check_hermitian_symmetry(spectrum, 4, 1e-6)
        assert not c.passed
        assert c.worst_index == 2
        assert check_hermitian_symmetry(spectrum, 4, 1e-6, check_real_bins=False).passed

    def test_too_short(self):
        with pytest.raises(ValueError):
            check_hermitian_symmetry(np.zeros(5), 8, 1e-6)

    def test_raise_for_status(self):
        spectrum = np.zeros(8, dtype=np.complex128)
        spectrum[1] = 1.0
        with pytest.raises(SymmetryViolation):
            check_hermitian_symmetry(spectrum, 8, 1e-6).raise_for_status()


class TestScenarios:
    """Concrete end-to-end cases."""

    def test_scenario_a_c2c_n8(self, tested, reference):
        """N=8 forward flags=0: max delta below ~2.83e-6."""
        d = TransformDescriptor.c2c_1d(8, Direction.FORWARD, 0)
        result = DualExecutionDriver(tested, reference).run(d)
        c = compare(result)
        assert c.tolerance == pytest.approx(2.828e-6, rel=1e-3)
        assert c.passed, c
        assert c.max_delta < 2.83e-6

    def test_scenario_b_r2c_n4(self, tested, reference):
        """N=4 real input: DC and Nyquist real, X[3] = conj(X[1])."""
        d = TransformDescriptor.r2c_1d(4, 0)
        result = DualExecutionDriver(tested, reference).run(d)
        tol = d.tolerance()
        y = result.tested

        assert abs(y[0].imag) < tol
        assert abs(y[2].imag) < tol
        assert abs(y[3].real - y[1].real) < tol
        assert abs(y[3].imag + y[1].imag) < tol
        assert compare(result).passed

    def test_scenario_c_2d_inverse(self, tested, reference):
        """4x4 inverse: delta below 4e-6."""
        d = TransformDescriptor.c2c_2d(4, 4, Direction.INVERSE, 0)
        result = DualExecutionDriver(tested, reference).run(d)
        c = compare(result)
        assert c.tolerance == pytest.approx(4e-6)
        assert c.passed, c


class TestCompare:
    """Which check reports first."""

    def _result(self, tested, reference, d):
        return ExecutionResult(d, np.zeros(d.input_length, dtype=np.float32), tested, reference)

    def test_symmetry_only_for_real_input(self):
        d = TransformDescriptor.c2c_1d(8)
        spectrum = np.zeros(8, dtype=np.complex64)
        spectrum[1] = 1.0
        assert compare(self._result(spectrum, spectrum.copy(), d)).passed

    def test_symmetry_failure_reported(self):
        d = TransformDescriptor.r2c_1d(8)
        spectrum = np.zeros(8, dtype=np.complex64)
        spectrum[5] = 1.0
        c = compare(self._result(spectrum, spectrum[:5].copy(), d))
        assert c.kind is FailureKind.SYMMETRY_VIOLATION

    def test_elementwise_reported_first(self):
        d = TransformDescriptor.r2c_1d(8)
        spectrum = np.zeros(8, dtype=np.complex64)
        spectrum[5] = 1.0
        c = compare(self._result(spectrum, np.ones(5, dtype=np.complex64), d))
        assert c.kind is FailureKind.TOLERANCE_EXCEEDED
