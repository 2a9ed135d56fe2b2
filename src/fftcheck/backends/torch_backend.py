"""
PyTorch FFT backend - the library under test.

Built on torch.fft, with a small flag space that selects how the
transform is actually computed. Every variant must agree with the
reference, which is what the sweep checks.

Flags:
    FLAG_PRECISE    (1): compute in complex128, round the result to complex64
    FLAG_MIRROR     (2): compute via the opposite-direction kernel,
                         X = conj(F'(conj(x)))
    FLAG_DECOMPOSE  (4): 1D - one explicit radix-2 decimation-in-time stage
                         2D - separate row and column passes
    FLAG_FULL_R2C   (8): real-to-complex plans emit all N bins

2D plans take (width, height).
"""

import math
from typing import Tuple

import numpy as np
import torch

from .base import FFTBackend, PlanHandle, DimensionOrder
from ..descriptor import TransformKind, Direction


FLAG_PRECISE = 1 << 0
FLAG_MIRROR = 1 << 1
FLAG_DECOMPOSE = 1 << 2
FLAG_FULL_R2C = 1 << 3

# Variant selectors swept by the harness
VARIANT_FLAGS = FLAG_PRECISE | FLAG_MIRROR | FLAG_DECOMPOSE
ALL_FLAGS = VARIANT_FLAGS | FLAG_FULL_R2C


def _is_power_of_two(n: int) -> bool:
    return n > 0 and (n & (n - 1)) == 0


class TorchBackend(FFTBackend):
    """
    FFT library under test.

    Args:
        device: Torch device to compute on
        alignment: Byte alignment of allocated buffers
        memory_limit: Optional cap on live allocated bytes
    """

    name = "torch"
    dimension_order = DimensionOrder.WIDTH_HEIGHT
    full_r2c_flag = FLAG_FULL_R2C

    min_size = 2
    min_real_size = 4

    def __init__(self, device: str = "cpu", **kwargs):
        super().__init__(**kwargs)
        self.device = torch.device(device)

    def _supports(self, kind: TransformKind, width: int, height: int, flags: int) -> bool:
        if flags & ~ALL_FLAGS:
            return False
        min_size = self.min_real_size if kind is TransformKind.R2C_1D else self.min_size
        if not _is_power_of_two(width) or width < min_size:
            return False
        if kind is TransformKind.C2C_2D:
            return _is_power_of_two(height) and height >= self.min_size
        return height == 1

    def _transform(self, plan: PlanHandle, x: np.ndarray) -> np.ndarray:
        precise = bool(plan.flags & FLAG_PRECISE)
        t = torch.from_numpy(x).to(self.device)

        if plan.kind is TransformKind.R2C_1D:
            t = t.to(torch.float64 if precise else torch.float32)
            y = self._r2c(t, plan.flags)
        else:
            t = t.to(torch.complex128 if precise else torch.complex64)
            inverse = plan.direction is Direction.INVERSE
            if plan.kind is TransformKind.C2C_2D:
                y = self._c2c(t.reshape(plan.height, plan.width), inverse, plan.flags, dims=(-2, -1))
            else:
                y = self._c2c(t, inverse, plan.flags, dims=(-1,))

        return y.to(torch.complex64).cpu().numpy().reshape(-1)

    # =========================================================================
    # Variants
    # =========================================================================

    def _c2c(self, t: torch.Tensor, inverse: bool, flags: int,
             dims: Tuple[int, ...]) -> torch.Tensor:
        if flags & FLAG_MIRROR:
            # F(x) = conj(F'(conj(x))) for unnormalized transforms
            y = self._kernel(torch.conj_physical(t), not inverse, flags, dims)
            return torch.conj_physical(y)
        return self._kernel(t, inverse, flags, dims)

    def _kernel(self, t: torch.Tensor, inverse: bool, flags: int,
                dims: Tuple[int, ...]) -> torch.Tensor:
        if flags & FLAG_DECOMPOSE:
            if len(dims) == 2:
                t = self._fft(t, inverse, dim=-1)
                return self._fft(t, inverse, dim=-2)
            return self._radix2(t, inverse)

        if inverse:
            return torch.fft.ifftn(t, dim=dims, norm="forward")
        return torch.fft.fftn(t, dim=dims)

    def _fft(self, t: torch.Tensor, inverse: bool, dim: int = -1) -> torch.Tensor:
        if inverse:
            return torch.fft.ifft(t, dim=dim, norm="forward")
        return torch.fft.fft(t, dim=dim)

    def _radix2(self, t: torch.Tensor, inverse: bool) -> torch.Tensor:
        """One decimation-in-time stage over the last dimension"""
        n = t.shape[-1]
        even = self._fft(t[..., 0::2], inverse)
        odd = self._fft(t[..., 1::2], inverse)

        sign = 1.0 if inverse else -1.0
        k = torch.arange(n // 2, dtype=torch.float64, device=t.device)
        twiddle = torch.polar(torch.ones_like(k), sign * 2.0 * math.pi * k / n).to(t.dtype)

        odd = twiddle * odd
        return torch.cat([even + odd, even - odd], dim=-1)

    def _r2c(self, t: torch.Tensor, flags: int) -> torch.Tensor:
        n = t.shape[-1]
        half = n // 2 + 1

        if flags & (FLAG_MIRROR | FLAG_DECOMPOSE):
            complex_dtype = torch.complex128 if t.dtype == torch.float64 else torch.complex64
            spectrum = self._c2c(t.to(complex_dtype), False, flags, dims=(-1,))[..., :half]
        else:
            spectrum = torch.fft.rfft(t)

        if not flags & FLAG_FULL_R2C:
            return spectrum

        # Bins N/2+1 .. N-1 mirror bins N/2-1 .. 1
        upper = torch.conj_physical(torch.flip(spectrum[..., 1:n // 2], dims=(-1,)))
        return torch.cat([spectrum, upper], dim=-1)
