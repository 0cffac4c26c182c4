"""
app/schemas/verification.py

Purpose: Internal verification result types

- VerificationAttempt: one request accepted by Vonage
- CancelResult: best-effort outcome of cancelling a superseded request
- VerificationSuccess / VerificationFailure: normalized outcome of start()
"""

from dataclasses import dataclass
from typing import Optional, Union

DEFAULT_ERROR_SUMMARY = "VerifyError"
DEFAULT_ERROR_CODE = "VERIFY_ERROR"
DEFAULT_ERROR_REASON = "Unknown error"


@dataclass(frozen=True)
class VerificationAttempt:
    destination: str
    channel: str
    provider_request_id: Optional[str]


@dataclass(frozen=True)
class CancelResult:
    """
    Outcome of cancelling the previous request for a destination.

    A failed cancel is not an error for the caller: the registry entry is
    dropped either way and a new request is issued.
    """
    request_id: str
    cancelled: bool
    error: Optional[str] = None


@dataclass(frozen=True)
class VerificationSuccess:
    method: str
    transaction_id: Optional[str] = None
    attempt: Optional[VerificationAttempt] = None

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class VerificationFailure:
    method: str
    error_summary: str = DEFAULT_ERROR_SUMMARY
    error_code: str = DEFAULT_ERROR_CODE
    reason: str = DEFAULT_ERROR_REASON

    @property
    def ok(self) -> bool:
        return False


VerificationOutcome = Union[VerificationSuccess, VerificationFailure]
