"""
Failure taxonomy.

Every way a validation case can fail maps to one FailureKind and one
exception type. The driver raises these; the sweep controller turns them
into case outcomes (or lets them propagate when running fail-fast).
"""

from enum import Enum
from typing import Optional


class FailureKind(Enum):
    """Why a case failed"""
    ALLOCATION_FAILURE = "allocation_failure"
    PLAN_CREATION_FAILURE = "plan_creation_failure"
    TOLERANCE_EXCEEDED = "tolerance_exceeded"
    SYMMETRY_VIOLATION = "symmetry_violation"


class ValidationError(Exception):
    """Base class for case failures"""

    kind: FailureKind = None

    def __init__(self, message: str, descriptor=None,
                 delta: Optional[float] = None, index: Optional[int] = None):
        super().__init__(message)
        self.descriptor = descriptor
        self.delta = delta
        self.index = index

    def __str__(self) -> str:
        msg = super().__str__()
        if self.descriptor is not None:
            msg = f"[{self.descriptor.label}] {msg}"
        return msg


class AllocationFailure(ValidationError):
    """A buffer allocation returned no memory"""
    kind = FailureKind.ALLOCATION_FAILURE


class PlanCreationFailure(ValidationError):
    """A plan constructor returned no handle"""
    kind = FailureKind.PLAN_CREATION_FAILURE


class ToleranceExceeded(ValidationError):
    """Tested output differs from the reference by at least the tolerance"""
    kind = FailureKind.TOLERANCE_EXCEEDED


class SymmetryViolation(ValidationError):
    """Real-input spectrum is not Hermitian symmetric"""
    kind = FailureKind.SYMMETRY_VIOLATION


ERROR_TYPES = {
    FailureKind.ALLOCATION_FAILURE: AllocationFailure,
    FailureKind.PLAN_CREATION_FAILURE: PlanCreationFailure,
    FailureKind.TOLERANCE_EXCEEDED: ToleranceExceeded,
    FailureKind.SYMMETRY_VIOLATION: SymmetryViolation,
}


def error_for(kind: FailureKind) -> type:
    """Exception class for a failure kind"""
    return ERROR_TYPES[kind]
