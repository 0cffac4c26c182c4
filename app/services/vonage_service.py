"""
app/services/vonage_service.py

Purpose: Vonage Verify v2 API client

- Starts verification requests (POST /v2/verify/)
- Cancels in-flight requests (DELETE /v2/verify/{request_id})
- Authenticates with a short-lived RS256 application JWT
- Translates non-2xx responses into ProviderError
"""

import time
import uuid
from typing import Any, Dict, Optional

import httpx
import jwt

from app.core.config import settings
from app.core.exceptions import ProviderError
from app.core.logging import get_logger

logger = get_logger(__name__)

VERIFY_PATH = "/v2/verify/"


class VonageVerifyClient:
    """
    Async client for the Vonage Verify v2 endpoints used by the bridge.
    No retries: every failure is raised to the caller as ProviderError.
    """

    def __init__(
        self,
        application_id: str,
        private_key: str,
        base_url: str = "https://api.nexmo.com",
        timeout: float = 10.0,
        jwt_ttl_seconds: int = 900,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.application_id = application_id
        self._private_key = private_key
        self.base_url = base_url.rstrip("/")
        self.jwt_ttl_seconds = jwt_ttl_seconds
        self._client = client or httpx.AsyncClient(base_url=self.base_url, timeout=timeout)

    def generate_jwt(self) -> str:
        """Mints an application JWT for a single API call."""
        now = int(time.time())
        claims = {
            "application_id": self.application_id,
            "iat": now,
            "exp": now + self.jwt_ttl_seconds,
            "jti": str(uuid.uuid4()),
        }
        return jwt.encode(claims, self._private_key, algorithm="RS256")

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.generate_jwt()}",
            "Accept": "application/json",
        }

    async def create(self, request: Dict[str, Any]) -> Dict[str, Any]:
        """
        Starts a verification.

        Args:
            request: {"brand": ..., "workflow": [{"channel": "sms", "to": "+1..."}]}

        Returns:
            Parsed response body, e.g. {"request_id": "c11236f4-..."}

        Raises:
            ProviderError: If Vonage rejects the request or cannot be reached
        """
        response = await self._send("POST", VERIFY_PATH, json=request)
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError:
            logger.warning(f"Vonage returned a non-JSON body for create: {response.text[:200]}")
            return {}

    async def cancel(self, request_id: str) -> None:
        """
        Cancels an in-flight verification.

        Raises:
            ProviderError: If Vonage refuses (already completed, expired, unknown id)
        """
        await self._send("DELETE", f"{VERIFY_PATH}{request_id}")

    async def _send(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            response = await self._client.request(method, path, headers=self._headers(), **kwargs)
        except httpx.TimeoutException as e:
            logger.error(f"Vonage API timeout: {method} {path}")
            raise ProviderError(
                "Vonage API timeout",
                title="VerifyTimeout",
                detail=str(e) or "Vonage API timeout",
                code="VERIFY_TIMEOUT",
            )
        except httpx.RequestError as e:
            logger.error(f"Network error calling Vonage: {e}")
            raise ProviderError(
                "Unable to reach Vonage",
                detail=str(e) or "Unable to reach Vonage",
                code="VERIFY_TRANSPORT",
            )

        if response.is_success:
            return response

        raise self._error_from_response(response)

    @staticmethod
    def _error_from_response(response: httpx.Response) -> ProviderError:
        """
        Builds a ProviderError from an RFC 7807 problem body. Bodies that are
        not JSON objects leave title/detail unset.
        """
        body: Any = None
        try:
            body = response.json()
        except ValueError:
            body = None

        problem = body if isinstance(body, dict) else {}
        title = problem.get("title")
        detail = problem.get("detail")

        logger.error(
            f"Vonage API error: {response.status_code} - {title or response.text[:200]}",
            extra={"request_id": problem.get("request_id")}
        )

        return ProviderError(
            f"Vonage API error: {response.status_code}",
            title=title,
            detail=detail,
            http_status=response.status_code,
            details=body if body is not None else response.text,
        )

    async def close(self):
        await self._client.aclose()


# Global Vonage client instance
_vonage_client: Optional[VonageVerifyClient] = None


def get_vonage_client() -> VonageVerifyClient:
    """Get or create the global Vonage client from settings."""
    global _vonage_client
    if _vonage_client is None:
        _vonage_client = VonageVerifyClient(
            application_id=settings.VONAGE_APPLICATION_ID or "",
            private_key=settings.load_private_key() or "",
            base_url=settings.VONAGE_API_URL,
            timeout=settings.VONAGE_TIMEOUT,
            jwt_ttl_seconds=settings.VONAGE_JWT_TTL_SECONDS,
        )
    return _vonage_client


async def close_vonage_client():
    """Close the Vonage HTTP client."""
    global _vonage_client
    if _vonage_client:
        await _vonage_client.close()
        _vonage_client = None
