from typing import Optional, Any

class BridgeError(Exception):
    """
    Base exception for the verify bridge.
    """
    def __init__(self, message: str, code: str = "INTERNAL_ERROR", status_code: int = 500, details: Optional[Any] = None):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)

class AuthenticationError(BridgeError):
    """
    Raised when the inline hook caller fails header authentication.
    """
    def __init__(self, message: str = "Unauthorized", details: Optional[Any] = None):
        super().__init__(message, code="AUTHENTICATION_FAILED", status_code=401, details=details)

class ProviderError(BridgeError):
    """
    Raised by the Vonage client when a Verify call fails.

    ``title`` and ``detail`` come from the RFC 7807 problem body when Vonage
    sends one; ``code`` is only set for failures classified locally
    (timeouts, transport errors).
    """
    def __init__(
        self,
        message: str = "Verify request failed",
        title: Optional[str] = None,
        detail: Optional[str] = None,
        code: Optional[str] = None,
        http_status: Optional[int] = None,
        details: Optional[Any] = None,
    ):
        super().__init__(message, code=code or "VERIFY_ERROR", status_code=502, details=details)
        self.title = title
        self.detail = detail
        self.provider_code = code
        self.http_status = http_status
