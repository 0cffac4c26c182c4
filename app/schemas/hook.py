"""
app/schemas/hook.py

Purpose: Okta telephony inline hook request schema

- Validates the parts of the hook body the bridge reads
- Extracts (destination, channel) for the verification service
- Phone number is kept verbatim, leading '+' included
"""

from pydantic import BaseModel, Field
from typing import Optional, Tuple

DEFAULT_CHANNEL = "sms"


class MessageProfile(BaseModel):
    """
    Delivery details Okta attaches to each OTP request.
    """
    phoneNumber: Optional[str] = Field(default=None, description="Destination in E.164 format")
    deliveryChannel: Optional[str] = Field(default=None, description="SMS or VOICE")
    otpCode: Optional[str] = Field(default=None, description="Okta-generated OTP (unused, Vonage generates its own)")
    locale: Optional[str] = None
    otpExpires: Optional[str] = None


class HookData(BaseModel):
    messageProfile: Optional[MessageProfile] = None


class TelephonyHookRequest(BaseModel):
    """
    Okta telephony inline hook body. Only data.messageProfile is read;
    the remaining keys (eventType, source, userProfile, ...) are ignored.
    """
    eventType: Optional[str] = None
    data: Optional[HookData] = None

    class Config:
        json_schema_extra = {
            "example": {
                "eventType": "com.okta.telephony.provider",
                "data": {
                    "messageProfile": {
                        "phoneNumber": "+15551234567",
                        "deliveryChannel": "SMS",
                    }
                },
            }
        }


def normalize_channel(channel: Optional[str]) -> str:
    """
    Lowercases the delivery channel, defaulting to sms. Unknown values are
    passed through for Vonage to reject.
    """
    if not channel:
        return DEFAULT_CHANNEL
    return channel.lower()


def extract_verification_target(payload: TelephonyHookRequest) -> Tuple[str, str]:
    """
    Returns (destination, channel) from a hook body. A missing or null
    data/messageProfile is treated as empty.
    """
    data = payload.data or HookData()
    profile = data.messageProfile or MessageProfile()
    destination = profile.phoneNumber if profile.phoneNumber is not None else ""
    return destination, normalize_channel(profile.deliveryChannel)
