"""
Errors raised by the sumcheck engine.

Construction errors are raised eagerly while building fields and polynomials.
Soundness violations are raised by the verifier when a prover's claim is false
or malformed, and are turned into `Rejected` outcomes by the session.
Protocol order violations mean the driver called the session out of sequence.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class RejectKind(Enum):
    DEGREE_VIOLATION = "degree_violation"
    SUM_INCONSISTENCY = "sum_inconsistency"
    FINAL_MISMATCH = "final_mismatch"
    PROTOCOL_ORDER_VIOLATION = "protocol_order_violation"
    DIVISION_BY_ZERO = "division_by_zero"
    INVALID_MODULUS = "invalid_modulus"
    MALFORMED_POLYNOMIAL = "malformed_polynomial"
    FIELD_MISMATCH = "field_mismatch"


class SumcheckError(Exception):
    kind: RejectKind = None

    def __init__(self, message, round_index=None, expected=None, actual=None):
        super().__init__(message)
        self.round_index = round_index
        self.expected = expected
        self.actual = actual


class ConstructionError(SumcheckError):
    pass


class InvalidModulus(ConstructionError, ValueError):
    kind = RejectKind.INVALID_MODULUS


class MalformedPolynomial(ConstructionError, ValueError):
    kind = RejectKind.MALFORMED_POLYNOMIAL


class DivisionByZero(ConstructionError, ZeroDivisionError):
    kind = RejectKind.DIVISION_BY_ZERO


class SoundnessViolation(SumcheckError):
    pass


class DegreeViolation(SoundnessViolation):
    kind = RejectKind.DEGREE_VIOLATION

    def __init__(self, round_index, expected, actual):
        super().__init__(
            f"Round {round_index}: polynomial degree {actual} exceeds bound {expected}",
            round_index,
            expected,
            actual,
        )


class SumInconsistency(SoundnessViolation):
    kind = RejectKind.SUM_INCONSISTENCY

    def __init__(self, round_index, expected, actual):
        super().__init__(
            f"Round {round_index}: g(0) + g(1) = {actual}, expected {expected}",
            round_index,
            expected,
            actual,
        )


class FieldMismatch(SoundnessViolation):
    kind = RejectKind.FIELD_MISMATCH

    def __init__(self, round_index, expected, actual):
        super().__init__(
            f"Round {round_index}: message is over Z_{actual}, "
            f"session field is Z_{expected}",
            round_index,
            expected,
            actual,
        )


class FinalMismatch(SoundnessViolation):
    kind = RejectKind.FINAL_MISMATCH

    def __init__(self, round_index, expected, actual):
        super().__init__(
            f"Final check: polynomial evaluates to {actual} at the challenges, "
            f"last round claims {expected}",
            round_index,
            expected,
            actual,
        )


class ProtocolOrderViolation(SumcheckError):
    kind = RejectKind.PROTOCOL_ORDER_VIOLATION


class SessionClosed(ProtocolOrderViolation):
    """Raised when a session that already reached a verdict is used again"""


class ChallengesExhausted(ProtocolOrderViolation, ValueError):
    """Raised when a scripted challenge source has no values left"""


@dataclass(frozen=True)
class Rejection:
    """Structured reason attached to a rejected session"""

    kind: RejectKind
    round_index: Optional[int] = None
    expected: Optional[int] = None
    actual: Optional[int] = None
    message: str = ""

    @classmethod
    def from_error(cls, exc: SumcheckError) -> "Rejection":
        return cls(exc.kind, exc.round_index, exc.expected, exc.actual, str(exc))

    def __str__(self):
        return f"{self.kind.value}: {self.message}"
