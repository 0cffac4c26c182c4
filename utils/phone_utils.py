"""
utils/phone_utils.py

Purpose: Phone number helpers

- E.164 shape check (advisory only, numbers are never rejected locally)
- Masking for log output
"""

import re
from typing import Any

E164_PATTERN = re.compile(r"^\+[1-9]\d{6,14}$")


def is_e164(phone: str) -> bool:
    """
    Checks whether a number looks like E.164 (+ country code + subscriber).

    Args:
        phone: Phone number string

    Returns:
        True if the number matches the E.164 shape
    """
    if not phone:
        return False
    return bool(E164_PATTERN.match(phone))


def mask_phone(phone: Any) -> str:
    """
    Masks the middle digits of a phone number for logging.

    Example: +15551234567 -> +1555****567
    """
    if phone is None:
        return ""
    phone = str(phone)
    if len(phone) <= 7:
        return "*" * len(phone)
    return f"{phone[:5]}{'*' * (len(phone) - 8)}{phone[-3:]}"
