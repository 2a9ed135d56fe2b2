"""
FFT backends.

- TorchBackend: library under test (torch.fft, width-then-height 2D plans)
- ScipyReferenceBackend: reference (scipy.fft, height-then-width 2D plans)
"""

from .base import (
    FFTBackend,
    PlanHandle,
    DimensionOrder,
)

from .reference import ScipyReferenceBackend

from .torch_backend import (
    TorchBackend,
    FLAG_PRECISE,
    FLAG_MIRROR,
    FLAG_DECOMPOSE,
    FLAG_FULL_R2C,
    VARIANT_FLAGS,
)


# Registry of backends selectable by name
BACKENDS = {
    TorchBackend.name: TorchBackend,
    ScipyReferenceBackend.name: ScipyReferenceBackend,
}


def get_backend(name: str, **kwargs) -> FFTBackend:
    """Instantiate a backend by name"""
    if name not in BACKENDS:
        available = ", ".join(BACKENDS.keys())
        raise ValueError(f"Unknown backend '{name}'. Available: {available}")
    return BACKENDS[name](**kwargs)


__all__ = [
    "FFTBackend",
    "PlanHandle",
    "DimensionOrder",
    "ScipyReferenceBackend",
    "TorchBackend",
    "FLAG_PRECISE",
    "FLAG_MIRROR",
    "FLAG_DECOMPOSE",
    "FLAG_FULL_R2C",
    "VARIANT_FLAGS",
    "BACKENDS",
    "get_backend",
]
