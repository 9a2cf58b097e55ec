from __future__ import annotations

from datetime import datetime
from decimal import Decimal

import pytest

from legal_crm.application.use_cases.notifications.validators import (
    build_notification,
    ensure_valid_channels,
    ensure_valid_text,
)


def _data(**overrides):
    data = {
        "user_id": 7,
        "type": "court_reminder",
        "title": "  Δικάσιμος αύριο  ",
        "message": "Πρωτοδικείο Αθηνών, αίθουσα 5.",
    }
    data.update(overrides)
    return data


def test_build_notification_applies_defaults():
    notification = build_notification(_data())

    assert notification.id is None
    assert notification.title == "Δικάσιμος αύριο"
    assert notification.priority == "medium"
    assert notification.channels == ["in-app"]
    assert notification.read is False
    assert notification.metadata == {}
    assert notification.sent_channels == []


def test_build_notification_localizes_expiry():
    notification = build_notification(_data(expires_at=datetime(2026, 3, 1, 9, 30)))

    assert notification.expires_at.tzinfo is not None
    assert notification.expires_at.hour == 9


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"type": "birthday_party"}, "Unsupported notification type"),
        ({"priority": "critical"}, "Unsupported priority"),
        ({"user_id": 0}, "user_id"),
        ({"user_id": "5"}, "user_id"),
        ({"title": "   "}, "title is required"),
        ({"title": "x" * 201}, "at most 200"),
        ({"message": "x" * 1001}, "at most 1000"),
        ({"channels": ["fax"]}, "Unsupported channel"),
        ({"related_model": "Court"}, "provided together"),
        ({"related_model": "Invoice", "related_id": 3}, "Unsupported related model"),
        ({"expires_at": "tomorrow"}, "expires_at"),
        ({"metadata": ["a"]}, "metadata"),
        ({"metadata": {"amount": Decimal("150.00")}}, "JSON serialisable"),
        ({"metadata": {"hearing": datetime(2026, 11, 3)}}, "JSON serialisable"),
        ({"action_text": "Άνοιγμα"}, "action_text requires action_url"),
        ({"color": "red"}, "Unknown notification fields"),
    ],
)
def test_build_notification_rejects_invalid_input(overrides, message):
    with pytest.raises(ValueError, match=message):
        build_notification(_data(**overrides))


def test_text_at_limit_is_accepted():
    assert ensure_valid_text("x" * 200, field="title", max_length=200) == "x" * 200


def test_channels_are_deduplicated_in_order():
    assert ensure_valid_channels(["sms", "email", "sms", "in-app"]) == ["sms", "email", "in-app"]


def test_empty_channels_fall_back_to_in_app():
    assert ensure_valid_channels(None) == ["in-app"]
    assert ensure_valid_channels([]) == ["in-app"]
