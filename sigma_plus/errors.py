"""
Failure Kinds and Exceptions
============================

Verification failures are classified into five kinds. Inside the verifier
each kind is raised as a ``VerificationError`` subclass; at the public
``verify`` / ``batchverify`` boundary all of them collapse to ``False``,
while ``check`` / ``check_batch`` report them as a ``VerifyResult``.

Caller mistakes that are not proof failures (bad construction arguments,
undecodable bytes) raise ``ParameterError`` and ``DecodeError``, both
``ValueError`` subclasses.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class FailureKind(Enum):
    """Diagnostic classification of a rejected proof."""

    SHAPE = "shape"
    MEMBERSHIP = "membership"
    DEGENERATE_CHALLENGE = "degenerate_challenge"
    CONSISTENCY = "consistency"
    EQUATION = "equation"


class SigmaError(Exception):
    """Base class for all errors raised by this package."""


class ParameterError(SigmaError, ValueError):
    """Invalid verifier/prover construction arguments."""


class DecodeError(SigmaError, ValueError):
    """Bytes that do not decode to a well-formed scalar, point or proof."""


class VerificationError(SigmaError):
    """
    A proof failed one of the verification checks.

    Never propagates out of the public verifier API.

    Parameters
    ----------
    detail : str
        Human-readable description of the failed check
    index : int, optional
        Position of the offending proof inside a batch
    """

    kind = None

    def __init__(self, detail: str, index: Optional[int] = None):
        super().__init__(detail)
        self.detail = detail
        self.index = index


class ShapeError(VerificationError):
    kind = FailureKind.SHAPE


class MembershipError(VerificationError):
    kind = FailureKind.MEMBERSHIP


class DegenerateChallengeError(VerificationError):
    kind = FailureKind.DEGENERATE_CHALLENGE


class ConsistencyError(VerificationError):
    kind = FailureKind.CONSISTENCY


class EquationError(VerificationError):
    kind = FailureKind.EQUATION


@dataclass(frozen=True)
class VerifyResult:
    """
    Diagnostic outcome of a verification call.

    ``ok`` is authoritative; ``kind``, ``index`` and ``detail`` are only set
    on failure and are meant for logging.
    """

    ok: bool
    kind: Optional[FailureKind] = None
    index: Optional[int] = None
    detail: str = ""

    def __bool__(self):
        return self.ok

    @classmethod
    def success(cls) -> "VerifyResult":
        return cls(ok=True)

    @classmethod
    def failure(cls, error: VerificationError) -> "VerifyResult":
        return cls(ok=False, kind=error.kind, index=error.index, detail=error.detail)
