import asyncio
from typing import Any, Dict, List, Optional

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from app.core.exceptions import ProviderError
from app.services.session_registry import SessionRegistry
from app.services.verification_service import VerificationService


class FakeVerifyProvider:
    """
    Scripted stand-in for VonageVerifyClient.

    ``calls`` records ("cancel", id) / ("create", request) in call order.
    ``create_gate`` / ``cancel_gate`` let a test hold a call at its
    suspension point until the event is set.
    """

    def __init__(self):
        self.calls: List[tuple] = []
        self.create_responses: List[Any] = []
        self.cancel_error: Optional[Exception] = None
        self.create_gate: Optional[asyncio.Event] = None
        self.cancel_gate: Optional[asyncio.Event] = None
        self._counter = 0

    async def create(self, request: Dict[str, Any]) -> Dict[str, Any]:
        self.calls.append(("create", request))
        if self.create_gate is not None:
            await self.create_gate.wait()
        if self.create_responses:
            response = self.create_responses.pop(0)
            if isinstance(response, Exception):
                raise response
            return response
        self._counter += 1
        return {"request_id": f"req-{self._counter}"}

    async def cancel(self, request_id: str) -> None:
        self.calls.append(("cancel", request_id))
        if self.cancel_gate is not None:
            await self.cancel_gate.wait()
        if self.cancel_error is not None:
            raise self.cancel_error

    @property
    def cancelled(self) -> List[str]:
        return [arg for name, arg in self.calls if name == "cancel"]

    @property
    def created(self) -> List[Dict[str, Any]]:
        return [arg for name, arg in self.calls if name == "create"]


@pytest.fixture
def provider() -> FakeVerifyProvider:
    return FakeVerifyProvider()


@pytest.fixture
def registry() -> SessionRegistry:
    return SessionRegistry()


@pytest.fixture
def service(provider, registry) -> VerificationService:
    return VerificationService(provider=provider, registry=registry, brand="Acme")


@pytest.fixture
def provider_error():
    def make(**kwargs) -> ProviderError:
        return ProviderError("Vonage API error: 409", **kwargs)
    return make


@pytest.fixture(scope="session")
def rsa_keypair():
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_pem = key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode()
    public_pem = key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode()
    return private_pem, public_pem
