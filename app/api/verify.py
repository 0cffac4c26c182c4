"""
app/api/verify.py

Purpose: Okta telephony inline hook endpoint

- Authenticates Okta with a shared header secret
- Extracts phone number and delivery channel from the hook body
- Starts a Vonage verification
- Returns the Okta action or error body
"""

import hmac

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.exceptions import AuthenticationError
from app.core.logging import get_logger
from app.schemas.hook import TelephonyHookRequest, extract_verification_target
from app.schemas.response import build_hook_response
from app.services.verification_service import VerificationService, get_verification_service

logger = get_logger(__name__)


async def verify_hook_auth(request: Request):
    """
    Rejects callers whose auth header does not match AUTH_HEADER_VALUE.
    With no AUTH_HEADER_VALUE configured every caller is rejected.
    """
    expected = settings.AUTH_HEADER_VALUE
    incoming = request.headers.get(settings.AUTH_HEADER_KEY)

    if not expected or incoming is None:
        raise AuthenticationError()
    if not hmac.compare_digest(incoming.encode("utf-8"), expected.encode("utf-8")):
        raise AuthenticationError()


router = APIRouter(dependencies=[Depends(verify_hook_auth)])


@router.post("/verify")
async def verify_handler(
    payload: TelephonyHookRequest,
    service: VerificationService = Depends(get_verification_service),
):
    """
    Telephony inline hook.

    200 with a com.okta.telephony.action command when Vonage accepted the
    request, 500 with an Okta error object otherwise.
    """
    destination, channel = extract_verification_target(payload)
    logger.info(f"📱 Inline hook received ({payload.eventType or 'unknown event'})")

    outcome = await service.start(destination, channel)
    body = build_hook_response(outcome)

    if not outcome.ok:
        return JSONResponse(status_code=500, content=body)
    return body
