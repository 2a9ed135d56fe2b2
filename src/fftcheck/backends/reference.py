"""
SciPy reference backend.

Computes every transform in double precision with scipy.fft and rounds
the result to single precision. Flags are accepted and ignored.

2D plans take (height, width), i.e. (rows, columns).
"""

import numpy as np
import scipy.fft

from .base import FFTBackend, PlanHandle, DimensionOrder
from ..descriptor import TransformKind, Direction


class ScipyReferenceBackend(FFTBackend):
    """Trusted reference implementation"""

    name = "scipy"
    dimension_order = DimensionOrder.HEIGHT_WIDTH

    def _supports(self, kind: TransformKind, width: int, height: int, flags: int) -> bool:
        if kind is TransformKind.C2C_2D:
            return width >= 1 and height >= 1
        return width >= 1 and height == 1

    def _transform(self, plan: PlanHandle, x: np.ndarray) -> np.ndarray:
        if plan.kind is TransformKind.R2C_1D:
            y = scipy.fft.rfft(x.astype(np.float64))
        else:
            x = x.astype(np.complex128)
            inverse = plan.direction is Direction.INVERSE
            if plan.kind is TransformKind.C2C_2D:
                x = x.reshape(plan.height, plan.width)
                y = scipy.fft.ifft2(x, norm="forward") if inverse else scipy.fft.fft2(x)
            else:
                y = scipy.fft.ifft(x, norm="forward") if inverse else scipy.fft.fft(x)

        return y.astype(np.complex64).reshape(-1)
