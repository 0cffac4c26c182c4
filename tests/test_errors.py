from fastapi.testclient import TestClient
from app.main import app

client = TestClient(app)

def test_404_not_found():
    response = client.get("/non-existent-route")
    assert response.status_code == 404
    data = response.json()
    assert data["error"]["errorSummary"] == "HTTPError"
    assert data["error"]["errorCauses"][0]["errorSummary"] == "HTTP_ERROR"

def test_405_method_not_allowed():
    response = client.get("/verify")
    assert response.status_code == 405
    assert "error" in response.json()

def test_custom_exception():
    from app.core.exceptions import ProviderError

    @app.get("/test-custom-error")
    def trigger_custom_error():
        raise ProviderError(message="Vonage unreachable", code="VERIFY_TRANSPORT")

    response = client.get("/test-custom-error")
    assert response.status_code == 502
    data = response.json()
    assert data["error"]["errorSummary"] == "ProviderError"
    assert data["error"]["errorCauses"] == [
        {"errorSummary": "VERIFY_TRANSPORT", "reason": "Vonage unreachable"}
    ]
