"""
app/schemas/response.py

Purpose: Okta telephony inline hook response bodies

- Success: a com.okta.telephony.action command carrying the transaction id
- Error: the Okta error object with a single cause
- build_hook_response() maps any VerificationOutcome to exactly one body
"""

from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional

from app.schemas.verification import (
    DEFAULT_ERROR_CODE,
    DEFAULT_ERROR_REASON,
    DEFAULT_ERROR_SUMMARY,
    VerificationFailure,
    VerificationOutcome,
)

TELEPHONY_ACTION_TYPE = "com.okta.telephony.action"
ACTION_STATUS_SUCCESSFUL = "SUCCESSFUL"
PROVIDER_NAME = "VONAGE"


class TelephonyActionValue(BaseModel):
    status: str = ACTION_STATUS_SUCCESSFUL
    provider: str = PROVIDER_NAME
    transactionId: Optional[str] = None


class TelephonyCommand(BaseModel):
    type: str = TELEPHONY_ACTION_TYPE
    value: List[TelephonyActionValue]


class TelephonyHookResponse(BaseModel):
    """
    Successful inline hook response.
    """
    commands: List[TelephonyCommand]


class ErrorCause(BaseModel):
    errorSummary: str
    reason: str


class ErrorBody(BaseModel):
    errorSummary: str
    errorCauses: List[ErrorCause] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    """
    Error inline hook response.
    """
    error: ErrorBody


def build_success_response(transaction_id: Optional[str]) -> Dict[str, Any]:
    """
    Builds the telephony action body. ``transactionId`` is left out when
    Vonage did not return a request id.
    """
    response = TelephonyHookResponse(
        commands=[TelephonyCommand(value=[TelephonyActionValue(transactionId=transaction_id)])]
    )
    return response.model_dump(exclude_none=True)


def build_error_response(
    error_summary: Optional[str] = None,
    error_code: Optional[str] = None,
    reason: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Builds the error body, substituting defaults for any empty field.
    """
    response = ErrorResponse(
        error=ErrorBody(
            errorSummary=error_summary or DEFAULT_ERROR_SUMMARY,
            errorCauses=[
                ErrorCause(
                    errorSummary=error_code or DEFAULT_ERROR_CODE,
                    reason=reason or DEFAULT_ERROR_REASON,
                )
            ],
        )
    )
    return response.model_dump()


def build_hook_response(outcome: VerificationOutcome) -> Dict[str, Any]:
    """Maps a verification outcome to its inline hook response body."""
    if isinstance(outcome, VerificationFailure):
        return build_error_response(outcome.error_summary, outcome.error_code, outcome.reason)
    return build_success_response(outcome.transaction_id)
