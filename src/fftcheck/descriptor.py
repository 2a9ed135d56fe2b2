"""
Transform Descriptors

Immutable description of a single validation case: which transform,
how large, which direction, which configuration flags.

The tolerance used to compare two outputs is derived from the descriptor
because FFT summation error grows with the number of samples.
"""

import math
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Dict, Any


# Base comparison threshold for single precision, scaled by sqrt(samples)
BASE_EPSILON = 1e-6


class TransformKind(Enum):
    """Kind of transform being validated"""
    C2C_1D = "c2c_1d"    # Complex-to-complex, one dimension
    R2C_1D = "r2c_1d"    # Real-to-complex, one dimension
    C2C_2D = "c2c_2d"    # Complex-to-complex, two dimensions


class Direction(IntEnum):
    """Transform direction, using the exponent sign convention"""
    FORWARD = -1
    INVERSE = +1


def tolerance(sample_count: int, epsilon: float = BASE_EPSILON) -> float:
    """
    Size-scaled comparison threshold.

    Args:
        sample_count: Total number of samples (N, or Nx * Ny)
        epsilon: Base threshold for a single sample

    Returns:
        epsilon * sqrt(sample_count)
    """
    if sample_count < 1:
        raise ValueError(f"sample_count must be positive, got {sample_count}")
    if not epsilon > 0:
        raise ValueError(f"epsilon must be positive, got {epsilon}")
    return epsilon * math.sqrt(sample_count)


@dataclass(frozen=True)
class TransformDescriptor:
    """
    Parameters of one validation case.

    For 1D kinds `ny` is always 1. Real-to-complex transforms only
    run forward.
    """
    kind: TransformKind
    nx: int
    ny: int = 1
    direction: Direction = Direction.FORWARD
    flags: int = 0

    def __post_init__(self):
        # Accept raw values (e.g. from JSON) and normalize them
        object.__setattr__(self, "kind", TransformKind(self.kind))
        object.__setattr__(self, "direction", Direction(self.direction))

        if self.nx < 1 or self.ny < 1:
            raise ValueError(f"Transform sizes must be positive, got {self.nx}x{self.ny}")
        if self.kind is not TransformKind.C2C_2D and self.ny != 1:
            raise ValueError(f"{self.kind.value} transforms are one-dimensional, got ny={self.ny}")
        if self.kind is TransformKind.R2C_1D and self.direction is not Direction.FORWARD:
            raise ValueError("Real-to-complex transforms only run forward")
        if self.flags < 0:
            raise ValueError(f"flags must be non-negative, got {self.flags}")

    @classmethod
    def c2c_1d(cls, n: int, direction: Direction = Direction.FORWARD,
               flags: int = 0) -> "TransformDescriptor":
        return cls(TransformKind.C2C_1D, n, 1, direction, flags)

    @classmethod
    def r2c_1d(cls, n: int, flags: int = 0) -> "TransformDescriptor":
        return cls(TransformKind.R2C_1D, n, 1, Direction.FORWARD, flags)

    @classmethod
    def c2c_2d(cls, nx: int, ny: int, direction: Direction = Direction.FORWARD,
               flags: int = 0) -> "TransformDescriptor":
        return cls(TransformKind.C2C_2D, nx, ny, direction, flags)

    @property
    def is_real_input(self) -> bool:
        return self.kind is TransformKind.R2C_1D

    @property
    def sample_count(self) -> int:
        """Total number of samples (N for 1D, Nx * Ny for 2D)"""
        return self.nx * self.ny

    @property
    def input_length(self) -> int:
        return self.sample_count

    @property
    def output_length(self) -> int:
        """Length of a full-spectrum output buffer"""
        return self.sample_count

    @property
    def packed_length(self) -> int:
        """Number of bins both libraries produce (N/2 + 1 for r2c)"""
        if self.is_real_input:
            return self.nx // 2 + 1
        return self.sample_count

    def tolerance(self, epsilon: float = BASE_EPSILON) -> float:
        return tolerance(self.sample_count, epsilon)

    @property
    def label(self) -> str:
        """Human-readable case label"""
        if self.kind is TransformKind.C2C_2D:
            size = f"{self.nx}x{self.ny}"
        else:
            size = str(self.nx)
        return f"{self.kind.value} N={size} dir={self.direction.name.lower()} flags={self.flags}"

    def __str__(self) -> str:
        return self.label

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            "kind": self.kind.value,
            "nx": self.nx,
            "ny": self.ny,
            "direction": int(self.direction),
            "flags": self.flags,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TransformDescriptor":
        """Load from dictionary"""
        return cls(
            kind=TransformKind(data["kind"]),
            nx=data["nx"],
            ny=data.get("ny", 1),
            direction=Direction(data.get("direction", Direction.FORWARD)),
            flags=data.get("flags", 0),
        )
