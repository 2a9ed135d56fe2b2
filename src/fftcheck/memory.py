"""
Aligned sample buffers.

Both libraries receive storage aligned for vectorized access. Buffers are
raw byte blocks; typed views (float32 for real samples, complex64 for
complex samples) are taken on demand.
"""

from dataclasses import dataclass
from typing import Union

import numpy as np


DEFAULT_ALIGNMENT = 64


def aligned_empty(nbytes: int, alignment: int = DEFAULT_ALIGNMENT) -> np.ndarray:
    """
    Allocate an uninitialized uint8 array whose data pointer is aligned.

    Over-allocates by `alignment` bytes and slices at the first aligned
    offset.
    """
    if nbytes < 0:
        raise ValueError(f"nbytes must be non-negative, got {nbytes}")
    if alignment < 1 or alignment & (alignment - 1):
        raise ValueError(f"alignment must be a power of two, got {alignment}")

    raw = np.empty(nbytes + alignment, dtype=np.uint8)
    offset = (-raw.ctypes.data) % alignment
    return raw[offset:offset + nbytes]


def is_aligned(array: np.ndarray, alignment: int = DEFAULT_ALIGNMENT) -> bool:
    return array.ctypes.data % alignment == 0


@dataclass(eq=False)
class Buffer:
    """An aligned block of memory owned by one backend"""
    data: np.ndarray    # uint8, aligned
    owner: str          # Name of the allocating backend
    released: bool = False

    @property
    def nbytes(self) -> int:
        return self.data.nbytes

    def view(self, dtype: Union[str, np.dtype], length: int = None) -> np.ndarray:
        """Typed view of the first `length` elements (whole buffer by default)"""
        if self.released:
            raise RuntimeError(f"Buffer from {self.owner} used after release")
        dtype = np.dtype(dtype)
        if length is None:
            length = self.nbytes // dtype.itemsize
        nbytes = length * dtype.itemsize
        if nbytes > self.nbytes:
            raise ValueError(
                f"View of {length} x {dtype} needs {nbytes} bytes, buffer holds {self.nbytes}"
            )
        return self.data[:nbytes].view(dtype)
