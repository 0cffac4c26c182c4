import pytest

from app.schemas.hook import TelephonyHookRequest, extract_verification_target, normalize_channel
from app.schemas.response import build_error_response, build_hook_response, build_success_response
from app.schemas.verification import VerificationFailure, VerificationSuccess


@pytest.mark.parametrize(
    "channel, expected",
    [("SMS", "sms"), ("Voice", "voice"), ("", "sms"), (None, "sms"), ("WhatsApp", "whatsapp")],
)
def test_normalize_channel(channel, expected):
    assert normalize_channel(channel) == expected


def test_extract_keeps_phone_verbatim():
    payload = TelephonyHookRequest.model_validate(
        {"data": {"messageProfile": {"phoneNumber": "+15551234567", "deliveryChannel": "VOICE"}}}
    )
    assert extract_verification_target(payload) == ("+15551234567", "voice")


def test_extract_tolerates_missing_profile():
    payload = TelephonyHookRequest.model_validate({})
    assert extract_verification_target(payload) == ("", "sms")


def test_success_response_shape():
    assert build_success_response("req-1") == {
        "commands": [
            {
                "type": "com.okta.telephony.action",
                "value": [{"status": "SUCCESSFUL", "provider": "VONAGE", "transactionId": "req-1"}],
            }
        ]
    }


def test_success_response_omits_missing_transaction_id():
    value = build_success_response(None)["commands"][0]["value"][0]
    assert value == {"status": "SUCCESSFUL", "provider": "VONAGE"}


def test_error_response_substitutes_defaults_for_empty_fields():
    body = build_error_response("", None, "")
    assert body == {
        "error": {
            "errorSummary": "VerifyError",
            "errorCauses": [{"errorSummary": "VERIFY_ERROR", "reason": "Unknown error"}],
        }
    }


def test_hook_response_dispatches_on_outcome():
    success = build_hook_response(VerificationSuccess(method="verify", transaction_id="req-9"))
    failure = build_hook_response(
        VerificationFailure(method="verify", error_summary="Conflict", error_code="VERIFY_ERROR", reason="busy")
    )

    assert "commands" in success
    assert failure["error"]["errorSummary"] == "Conflict"
    assert failure["error"]["errorCauses"][0]["reason"] == "busy"


@pytest.mark.parametrize("body", [{"data": None}, {"data": {"messageProfile": None}}])
def test_extract_tolerates_null_profile(body):
    payload = TelephonyHookRequest.model_validate(body)
    assert extract_verification_target(payload) == ("", "sms")
