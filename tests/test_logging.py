import asyncio
import logging

import pytest

from app.core.logging import LogContext, StructuredFormatter
from utils.phone_utils import is_e164, mask_phone


def make_record(msg="hello"):
    return logging.getLogger("bridge.test").makeRecord(
        "bridge.test", logging.INFO, __file__, 1, msg, None, None
    )


def test_log_context_sets_and_clears_fields():
    with LogContext(destination="+15551234567", channel="sms"):
        record = make_record()
    after = make_record()

    assert record.destination == "+15551234567"
    assert record.channel == "sms"
    assert not hasattr(after, "destination")


@pytest.mark.asyncio
async def test_log_context_is_isolated_between_tasks():
    seen = {}

    async def worker(phone, pause):
        with LogContext(destination=phone):
            await asyncio.sleep(pause)
            seen[phone] = make_record().destination

    await asyncio.gather(worker("+15550000001", 0.02), worker("+15550000002", 0.0))

    assert seen == {"+15550000001": "+15550000001", "+15550000002": "+15550000002"}
    assert not hasattr(make_record(), "destination")


def test_structured_formatter_masks_destination():
    with LogContext(destination="+15551234567", request_id="req-1"):
        output = StructuredFormatter().format(make_record())

    assert "+15551234567" not in output
    assert '"destination": "+1555****567"' in output
    assert '"request_id": "req-1"' in output


@pytest.mark.parametrize(
    "phone, expected",
    [("+15551234567", True), ("+447700900123", True), ("15551234567", False), ("", False), ("+1", False)],
)
def test_is_e164(phone, expected):
    assert is_e164(phone) is expected


def test_mask_phone_short_values():
    assert mask_phone(None) == ""
    assert mask_phone("12345") == "*****"
