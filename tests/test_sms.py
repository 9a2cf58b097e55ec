from __future__ import annotations

from decimal import Decimal

import pytest
import requests

from legal_crm.domain.exceptions import DeliveryTimeoutError, SmsDeliveryError
from legal_crm.infrastructure import sms as sms_module


class DummySettings:
    sms_enabled = True
    twilio_account_sid = "AC123"
    twilio_auth_token = "token"
    twilio_from_number = "+15005550006"
    twilio_api_base_url = "https://api.twilio.test/2010-04-01/"
    sms_timeout_seconds = 4


class FakeResponse:
    def __init__(self, status_code: int, payload=None):
        self.status_code = status_code
        self._payload = payload

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self):
        if self._payload is None:
            raise ValueError("no JSON body")
        return self._payload


class FakeSession:
    def __init__(self, response=None, error: Exception | None = None):
        self.response = response
        self.error = error
        self.calls: list[dict] = []

    def post(self, url, **kwargs):
        self.calls.append({"url": url, **kwargs})
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture()
def enabled(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(sms_module, "get_settings", lambda: DummySettings())


def test_send_sms_posts_to_provider(enabled) -> None:
    session = FakeSession(
        FakeResponse(201, {"sid": "SM1", "status": "queued", "to": "+306912345678"})
    )

    receipt = sms_module.send_sms("691 234 5678", "Δικάσιμος: αύριο", session=session)

    assert receipt == sms_module.SmsReceipt(message_id="SM1", status="queued", to="+306912345678")
    (call,) = session.calls
    assert call["url"] == "https://api.twilio.test/2010-04-01/Accounts/AC123/Messages.json"
    assert call["data"] == {
        "To": "+306912345678",
        "From": "+15005550006",
        "Body": "Δικάσιμος: αύριο",
    }
    assert call["auth"] == ("AC123", "token")
    assert call["timeout"] == 4


def test_send_sms_disabled(monkeypatch: pytest.MonkeyPatch) -> None:
    class Disabled(DummySettings):
        sms_enabled = False

    monkeypatch.setattr(sms_module, "get_settings", lambda: Disabled())
    session = FakeSession(FakeResponse(201, {}))

    with pytest.raises(SmsDeliveryError, match="not enabled"):
        sms_module.send_sms("6912345678", "hi", session=session)
    assert session.calls == []


def test_send_sms_provider_rejection(enabled) -> None:
    session = FakeSession(
        FakeResponse(400, {"message": "The 'To' number is not valid.", "code": 21211})
    )

    with pytest.raises(SmsDeliveryError, match="status 400.*not valid.*21211"):
        sms_module.send_sms("123", "hi", session=session)


def test_send_sms_timeout(enabled) -> None:
    session = FakeSession(error=requests.Timeout("read timed out"))

    with pytest.raises(DeliveryTimeoutError, match="timed out after 4s"):
        sms_module.send_sms("6912345678", "hi", session=session)


def test_send_sms_connection_error(enabled) -> None:
    session = FakeSession(error=requests.ConnectionError("refused"))

    with pytest.raises(SmsDeliveryError, match="unreachable"):
        sms_module.send_sms("6912345678", "hi", session=session)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("6912345678", "+306912345678"),
        ("691 234-5678", "+306912345678"),
        ("306912345678", "+306912345678"),
        ("00306912345678", "+306912345678"),
        ("+447700900123", "+447700900123"),
    ],
)
def test_normalize_greek_number(raw, expected) -> None:
    assert sms_module.normalize_greek_number(raw) == expected


def test_validate_and_format_greek_mobile() -> None:
    assert sms_module.validate_greek_mobile("+30 691 234 5678")
    assert not sms_module.validate_greek_mobile("2101234567")
    assert sms_module.format_mobile_number("6912345678") == "691 234 5678"
    assert sms_module.format_mobile_number("12345") == "12345"


def test_calculate_sms_cost_counts_greek_double() -> None:
    latin = sms_module.calculate_sms_cost("a" * 70)
    greek = sms_module.calculate_sms_cost("α" * 70, recipient_count=3)

    assert (latin.character_count, latin.parts) == (70, 1)
    assert (greek.character_count, greek.parts) == (140, 2)
    assert greek.cost_per_recipient == Decimal("0.10")
    assert greek.total_cost == Decimal("0.30")
