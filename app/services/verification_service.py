"""
app/services/verification_service.py

Purpose: Verification session control

- Keeps at most one tracked Vonage request per phone number
- Cancels the previous request before starting a new one
  (Vonage answers 409 "Concurrent verifications" otherwise)
- Normalizes the result into VerificationSuccess / VerificationFailure

Concurrency: start() suspends on the cancel and create calls. Two hook
calls for the same number can both read the same previous request id,
both cancel it, and both create a new request; the last one to finish owns
the registry slot and Vonage's own concurrency check rejects the other.
Setting serialize_per_destination runs _issue() under a per-number
asyncio.Lock instead.
"""

import asyncio
from typing import Any, Callable, Dict, List, Optional, Protocol

from app.core.config import settings
from app.core.exceptions import ProviderError
from app.core.logging import get_logger, LogContext
from app.schemas.hook import normalize_channel
from app.schemas.verification import (
    DEFAULT_ERROR_CODE,
    DEFAULT_ERROR_REASON,
    DEFAULT_ERROR_SUMMARY,
    CancelResult,
    VerificationAttempt,
    VerificationFailure,
    VerificationOutcome,
    VerificationSuccess,
)
from app.services.session_registry import SessionRegistry
from app.services.vonage_service import get_vonage_client
from utils.phone_utils import is_e164

logger = get_logger(__name__)

VERIFY_METHOD = "verify"


class VerifyProvider(Protocol):
    async def create(self, request: Dict[str, Any]) -> Dict[str, Any]: ...

    async def cancel(self, request_id: str) -> None: ...


def _nested(*keys: str) -> Callable[[Any], Any]:
    def extract(response: Any) -> Any:
        value = response
        for key in keys:
            if not isinstance(value, dict):
                return None
            value = value.get(key)
        return value
    return extract


# Tried in order; the first populated value wins.
REQUEST_ID_EXTRACTORS: List[Callable[[Any], Any]] = [
    _nested("requestId"),
    _nested("request_id"),
    _nested("data", "request_id"),
]


def extract_request_id(response: Any) -> Optional[str]:
    """
    Pulls the Vonage request id out of a create response.

    Returns:
        The id as a string, or None if no candidate field is populated
    """
    for extractor in REQUEST_ID_EXTRACTORS:
        value = extractor(response)
        if value:
            return str(value)
    return None


def classify_error(error: BaseException, method: str = VERIFY_METHOD) -> VerificationFailure:
    """
    Converts a create failure into a fully populated VerificationFailure.
    """
    if isinstance(error, ProviderError):
        return VerificationFailure(
            method=method,
            error_summary=error.title or DEFAULT_ERROR_SUMMARY,
            error_code=error.provider_code or DEFAULT_ERROR_CODE,
            reason=error.detail or error.message or DEFAULT_ERROR_REASON,
        )

    return VerificationFailure(
        method=method,
        error_summary=DEFAULT_ERROR_SUMMARY,
        error_code=DEFAULT_ERROR_CODE,
        reason=str(error) or DEFAULT_ERROR_REASON,
    )


class VerificationService:
    """
    Starts Vonage verifications for Okta OTP requests.
    """

    def __init__(
        self,
        provider: VerifyProvider,
        registry: Optional[SessionRegistry] = None,
        brand: Optional[str] = None,
        serialize_per_destination: bool = False,
    ):
        self.provider = provider
        self.registry = registry if registry is not None else SessionRegistry()
        self.brand = brand or settings.VERIFY_BRAND
        self.serialize_per_destination = serialize_per_destination
        self._locks: Dict[str, asyncio.Lock] = {}

    async def start(self, destination: str, channel: Optional[str] = None) -> VerificationOutcome:
        """
        Cancels any tracked request for the destination and starts a new one.
        The channel is lowercased, empty or missing means sms.

        Never raises for provider errors: failures come back as
        VerificationFailure.
        """
        channel = normalize_channel(channel)

        with LogContext(destination=destination, channel=channel):
            if not is_e164(destination):
                logger.warning("Destination is not E.164, forwarding unchanged")

            if not self.serialize_per_destination:
                return await self._issue(destination, channel)

            lock = self._locks.setdefault(destination, asyncio.Lock())
            async with lock:
                return await self._issue(destination, channel)

    async def _issue(self, destination: str, channel: str) -> VerificationOutcome:
        # read -> cancel -> clear -> create -> record
        await self._cancel_prior(destination)

        request = self.build_request(destination, channel)

        try:
            response = await self.provider.create(request)
        except Exception as e:
            failure = classify_error(e)
            logger.error(
                f"Verify request failed: {failure.error_summary} ({failure.error_code}) - {failure.reason}",
                extra={"provider_response": getattr(e, "details", None)},
                exc_info=not isinstance(e, ProviderError),
            )
            return failure

        request_id = extract_request_id(response)
        if request_id:
            self.registry.set(destination, request_id)
        else:
            logger.warning(f"Vonage response carried no request id: {response}")

        logger.info(f"Successfully sent {VERIFY_METHOD} : {request_id}")
        return VerificationSuccess(
            method=VERIFY_METHOD,
            transaction_id=request_id,
            attempt=VerificationAttempt(
                destination=destination,
                channel=channel,
                provider_request_id=request_id,
            ),
        )

    async def _cancel_prior(self, destination: str) -> Optional[CancelResult]:
        """
        Best-effort cancel of the tracked request. The registry entry is
        removed whatever the outcome.

        Returns:
            CancelResult, or None when nothing was tracked
        """
        prior_id = self.registry.get(destination)
        if not prior_id:
            return None

        try:
            await self.provider.cancel(prior_id)
            result = CancelResult(request_id=prior_id, cancelled=True)
            logger.info(f"Canceled prior verify: {prior_id}")
        except Exception as e:
            error = getattr(e, "detail", None) or str(e) or type(e).__name__
            result = CancelResult(request_id=prior_id, cancelled=False, error=error)
            logger.info(f"Cancel failed (continuing): {error}", extra={"request_id": prior_id})

        self.registry.remove(destination)
        return result

    def build_request(self, destination: str, channel: str) -> Dict[str, Any]:
        """
        Verify v2 request body. No "code" is sent: Vonage generates the OTP.
        """
        return {
            "brand": self.brand,
            "workflow": [{"channel": channel, "to": destination}],
        }


# Global verification service instance
_verification_service: Optional[VerificationService] = None


def get_verification_service() -> VerificationService:
    """Get or create the process-wide verification service."""
    global _verification_service
    if _verification_service is None:
        _verification_service = VerificationService(
            provider=get_vonage_client(),
            registry=SessionRegistry(),
            brand=settings.VERIFY_BRAND,
            serialize_per_destination=settings.VERIFY_SERIALIZE_PER_DESTINATION,
        )
    return _verification_service


def reset_verification_service():
    """Drop the process-wide service (its registry goes with it)."""
    global _verification_service
    _verification_service = None
