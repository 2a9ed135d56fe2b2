"""
Pytest configuration for fftcheck tests.

Ensures proper import paths are set before test collection, and provides
backends that misbehave in known ways.
"""

import sys
from pathlib import Path

import numpy as np
import pytest

# Ensure src directory is in path for imports
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from fftcheck.backends import TorchBackend, ScipyReferenceBackend
from fftcheck.descriptor import TransformKind


class BiasedBackend(TorchBackend):
    """Adds a constant offset to every output bin"""

    def __init__(self, bias=1e-3, **kwargs):
        super().__init__(**kwargs)
        self.bias = bias

    def _transform(self, plan, x):
        return super()._transform(plan, x) + np.complex64(self.bias)


class AsymmetricBackend(TorchBackend):
    """Corrupts the mirrored upper half of full r2c spectra"""

    def _transform(self, plan, x):
        y = super()._transform(plan, x)
        if plan.kind is TransformKind.R2C_1D and y.size == plan.width:
            y = y.copy()
            y[plan.width // 2 + 1:] += np.complex64(0.5 + 0.5j)
        return y


class NoPlanBackend(ScipyReferenceBackend):
    """Never builds a plan"""

    def _supports(self, kind, width, height, flags):
        return False


@pytest.fixture
def tested():
    return TorchBackend()


@pytest.fixture
def reference():
    return ScipyReferenceBackend()


@pytest.fixture
def biased():
    return BiasedBackend()


@pytest.fixture
def asymmetric():
    return AsymmetricBackend()


@pytest.fixture
def no_plan():
    return NoPlanBackend()
