"""
Transform Descriptor Tests

Case parameters, derived lengths and the size-scaled tolerance.
"""

import math

import pytest

from fftcheck.descriptor import (
    TransformKind,
    Direction,
    TransformDescriptor,
    tolerance,
    BASE_EPSILON,
)


class TestTolerance:
    """Tolerance = epsilon * sqrt(sample count)."""

    def test_n8(self):
        """N=8 gives about 2.83e-6."""
        assert tolerance(8) == pytest.approx(2.828427e-6, rel=1e-6)

    def test_4x4(self):
        """4x4 gives exactly 4e-6."""
        d = TransformDescriptor.c2c_2d(4, 4, Direction.INVERSE)
        assert d.tolerance() == pytest.approx(4e-6)

    def test_monotonic_in_sample_count(self):
        """Never decreases as the transform grows."""
        values = [tolerance(n) for n in range(1, 4097)]
        assert all(b >= a for a, b in zip(values, values[1:]))

    def test_strictly_positive(self):
        assert tolerance(1) > 0

    def test_custom_epsilon(self):
        assert tolerance(16, epsilon=1e-3) == pytest.approx(4e-3)

    def test_rejects_bad_inputs(self):
        with pytest.raises(ValueError):
            tolerance(0)
        with pytest.raises(ValueError):
            tolerance(8, epsilon=0.0)


class TestDescriptor:
    """Construction and derived lengths."""

    def test_c2c_1d_lengths(self):
        d = TransformDescriptor.c2c_1d(16, Direction.INVERSE, flags=3)
        assert d.sample_count == 16
        assert d.input_length == 16
        assert d.output_length == 16
        assert d.packed_length == 16
        assert not d.is_real_input

    def test_r2c_lengths(self):
        """Real input: N samples in, N/2 + 1 bins shared with the reference."""
        d = TransformDescriptor.r2c_1d(16)
        assert d.input_length == 16
        assert d.output_length == 16
        assert d.packed_length == 9
        assert d.is_real_input
        assert d.direction is Direction.FORWARD

    def test_2d_lengths(self):
        d = TransformDescriptor.c2c_2d(8, 4)
        assert d.sample_count == 32
        assert d.tolerance() == pytest.approx(BASE_EPSILON * math.sqrt(32))

    def test_immutable(self):
        d = TransformDescriptor.c2c_1d(8)
        with pytest.raises(AttributeError):
            d.nx = 16

    def test_hashable_and_equal(self):
        a = TransformDescriptor.c2c_1d(8, Direction.FORWARD, 1)
        b = TransformDescriptor(TransformKind.C2C_1D, 8, 1, Direction.FORWARD, 1)
        assert a == b
        assert len({a, b}) == 1

    def test_r2c_inverse_rejected(self):
        """Complex-to-real is not part of the sweep."""
        with pytest.raises(ValueError):
            TransformDescriptor(TransformKind.R2C_1D, 8, direction=Direction.INVERSE)

    def test_1d_with_height_rejected(self):
        with pytest.raises(ValueError):
            TransformDescriptor(TransformKind.C2C_1D, 8, 2)

    def test_bad_sizes_rejected(self):
        with pytest.raises(ValueError):
            TransformDescriptor.c2c_1d(0)
        with pytest.raises(ValueError):
            TransformDescriptor.c2c_1d(8, flags=-1)

    def test_raw_values_normalized(self):
        """Kind and direction accept their raw values."""
        d = TransformDescriptor("c2c_2d", 4, 2, +1, 0)
        assert d.kind is TransformKind.C2C_2D
        assert d.direction is Direction.INVERSE

    def test_dict_roundtrip(self):
        d = TransformDescriptor.c2c_2d(16, 2, Direction.INVERSE, flags=5)
        assert TransformDescriptor.from_dict(d.to_dict()) == d

    def test_label(self):
        assert TransformDescriptor.c2c_2d(4, 8, Direction.INVERSE, 2).label == \
            "c2c_2d N=4x8 dir=inverse flags=2"
        assert TransformDescriptor.r2c_1d(8).label == "r2c_1d N=8 dir=forward flags=0"
