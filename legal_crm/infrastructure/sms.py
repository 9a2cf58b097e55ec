"""Send SMS messages through the Twilio Messages REST API."""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

import requests

from legal_crm.config import get_settings
from legal_crm.domain.exceptions import DeliveryTimeoutError, SmsDeliveryError

logger = logging.getLogger(__name__)

GREEK_COUNTRY_CODE = "30"
_GREEK_CHARACTERS = re.compile("[\u0370-\u03ff\u1f00-\u1fff]")
_NON_DIGITS = re.compile(r"\D")
# Unicode SMS parts carry 70 characters; Greek letters weigh double.
_UNICODE_PART_LENGTH = 70
_COST_PER_PART = Decimal("0.05")


@dataclass(frozen=True)
class SmsReceipt:
    """Provider acknowledgement of an accepted message."""

    message_id: str | None
    status: str | None
    to: str


@dataclass(frozen=True)
class SmsCost:
    character_count: int
    parts: int
    cost_per_recipient: Decimal
    total_cost: Decimal


def normalize_greek_number(number: str) -> str:
    """Return ``number`` in E.164 form, assuming Greece when no prefix is given."""

    cleaned = number.strip().replace(" ", "").replace("-", "")
    if cleaned.startswith("+"):
        return cleaned
    if cleaned.startswith("00"):
        return f"+{cleaned[2:]}"
    if cleaned.startswith(GREEK_COUNTRY_CODE) and len(cleaned) == 12:
        return f"+{cleaned}"
    return f"+{GREEK_COUNTRY_CODE}{cleaned}"


def _national_digits(number: str) -> str:
    digits = _NON_DIGITS.sub("", number)
    if digits.startswith(GREEK_COUNTRY_CODE) and len(digits) == 12:
        digits = digits[2:]
    return digits


def validate_greek_mobile(number: str) -> bool:
    """Greek mobile numbers have ten digits and start with ``69``."""

    digits = _national_digits(number)
    return len(digits) == 10 and digits.startswith("69")


def format_mobile_number(number: str) -> str:
    """Format a Greek mobile as ``69X XXX XXXX``; other input is returned as is."""

    digits = _national_digits(number)
    if len(digits) != 10:
        return number
    return f"{digits[:3]} {digits[3:6]} {digits[6:]}"


def calculate_sms_cost(text: str, recipient_count: int = 1) -> SmsCost:
    """Approximate the number of parts and the price of sending ``text``."""

    greek = len(_GREEK_CHARACTERS.findall(text))
    characters = greek * 2 + (len(text) - greek)
    parts = math.ceil(characters / _UNICODE_PART_LENGTH) if characters else 0
    per_recipient = _COST_PER_PART * parts
    return SmsCost(
        character_count=characters,
        parts=parts,
        cost_per_recipient=per_recipient,
        total_cost=per_recipient * recipient_count,
    )


def _provider_error(response: requests.Response) -> str:
    try:
        payload: Any = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict) and payload.get("message"):
        code = payload.get("code")
        suffix = f" (code {code})" if code else ""
        return f"SMS provider responded with status {response.status_code}: {payload['message']}{suffix}"
    return f"SMS provider responded with status {response.status_code}"


def send_sms(to: str, body: str, *, session: requests.Session | None = None) -> SmsReceipt:
    """Send ``body`` to ``to`` and return the provider receipt.

    Raises :class:`SmsDeliveryError` when SMS is disabled or the provider
    refuses the message, and :class:`DeliveryTimeoutError` when it does not
    answer within ``SMS_TIMEOUT_SECONDS``.
    """

    settings = get_settings()
    if not settings.sms_enabled:
        raise SmsDeliveryError("SMS service is not enabled", channel="sms")

    recipient = normalize_greek_number(to)
    url = (
        f"{settings.twilio_api_base_url.rstrip('/')}/Accounts/"
        f"{settings.twilio_account_sid}/Messages.json"
    )
    http = session or requests
    try:
        response = http.post(
            url,
            data={"To": recipient, "From": settings.twilio_from_number, "Body": body},
            auth=(settings.twilio_account_sid, settings.twilio_auth_token),
            timeout=settings.sms_timeout_seconds,
        )
    except requests.Timeout as exc:
        logger.error("SMS request to %s timed out", recipient)
        raise DeliveryTimeoutError(
            f"SMS delivery timed out after {settings.sms_timeout_seconds:g}s",
            channel="sms",
        ) from exc
    except requests.RequestException as exc:
        logger.error("SMS request to %s failed: %s", recipient, exc)
        raise SmsDeliveryError(f"SMS provider unreachable: {exc}", channel="sms") from exc

    if not response.ok:
        description = _provider_error(response)
        logger.error(description)
        raise SmsDeliveryError(description, channel="sms")

    try:
        payload = response.json()
    except ValueError:
        payload = {}
    return SmsReceipt(
        message_id=payload.get("sid"),
        status=payload.get("status"),
        to=payload.get("to") or recipient,
    )


__all__ = [
    "SmsCost",
    "SmsReceipt",
    "calculate_sms_cost",
    "format_mobile_number",
    "normalize_greek_number",
    "send_sms",
    "validate_greek_mobile",
]
