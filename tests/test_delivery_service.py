"""Tests for the channel delivery service."""

from __future__ import annotations

import pytest
from sqlalchemy import text
from sqlalchemy.exc import OperationalError

from legal_crm.application.use_cases.notifications import NotificationDeliveryService
from legal_crm.domain.entities import Notification, User
from legal_crm.domain.exceptions import ChannelDeliveryError
from legal_crm.infrastructure.channels import (
    ChannelSender,
    EmailSender,
    PushSender,
    SmsSender,
)
from legal_crm.infrastructure.repositories import NotificationRepository


class RecordingSender(ChannelSender):
    """Sender double that records calls and optionally fails."""

    def __init__(self, channel: str, error: Exception | None = None) -> None:
        self.channel = channel
        self.error = error
        self.calls: list[tuple[int | None, int | None]] = []

    def deliver(self, notification: Notification, user: User | None) -> None:
        self.calls.append((notification.id, user.id if user else None))
        if self.error is not None:
            raise self.error


def _senders(*senders: ChannelSender) -> dict[str, ChannelSender]:
    return {sender.channel: sender for sender in senders}


def _payload(user_id: int, **overrides) -> dict:
    data = {
        "user_id": user_id,
        "type": "deadline_reminder",
        "title": "Υπενθύμιση Προθεσμίας",
        "message": "Η προθεσμία για την κατάθεση προτάσεων λήγει σε 3 ημέρες.",
    }
    data.update(overrides)
    return data


def test_send_records_one_attempt_per_channel_in_order(db_session, make_user):
    user = make_user(mobile="6912345678")
    senders = _senders(
        RecordingSender("sms"),
        RecordingSender("in-app"),
        RecordingSender("email"),
    )
    service = NotificationDeliveryService(db_session, senders=senders)

    result = service.create_and_send(
        _payload(user.id, channels=["sms", "in-app", "email"])
    )

    assert [attempt.channel for attempt in result.sent_channels] == ["sms", "in-app", "email"]
    assert all(attempt.status == "sent" for attempt in result.sent_channels)
    assert all(attempt.error is None for attempt in result.sent_channels)
    for sender in senders.values():
        assert sender.calls == [(result.id, user.id)]


def test_failing_channel_is_recorded_and_does_not_stop_the_rest(db_session, make_user):
    user = make_user()
    failing = RecordingSender("email", ChannelDeliveryError("SMTP relay refused"))
    in_app = RecordingSender("in-app")
    service = NotificationDeliveryService(db_session, senders=_senders(failing, in_app))

    result = service.create_and_send(_payload(user.id, channels=["email", "in-app"]))

    email_attempt, in_app_attempt = result.sent_channels
    assert email_attempt.status == "failed"
    assert email_attempt.error == "SMTP relay refused"
    assert in_app_attempt.status == "sent"
    assert in_app.calls


def test_unexpected_exceptions_are_recorded_as_failures(db_session, make_user):
    user = make_user()
    service = NotificationDeliveryService(
        db_session, senders=_senders(RecordingSender("in-app", KeyError("socket")))
    )

    result = service.create_and_send(_payload(user.id))

    (attempt,) = result.sent_channels
    assert attempt.status == "failed"
    assert attempt.error


def test_channel_without_sender_fails_with_reason(db_session, make_user):
    user = make_user()
    service = NotificationDeliveryService(db_session, senders={})

    result = service.create_and_send(_payload(user.id, channels=["in-app"]))

    (attempt,) = result.sent_channels
    assert attempt.status == "failed"
    assert "no sender registered" in attempt.error


def test_push_channel_always_fails_as_not_implemented(db_session, make_user):
    user = make_user()
    service = NotificationDeliveryService(db_session, senders=_senders(PushSender()))

    result = service.create_and_send(_payload(user.id, channels=["push"]))

    (attempt,) = result.sent_channels
    assert attempt.status == "failed"
    assert "not implemented" in attempt.error


def test_missing_email_address_fails_email_but_in_app_succeeds(db_session, make_user):
    user = make_user(email=None)
    sent_emails: list[tuple[str, str, str]] = []
    service = NotificationDeliveryService(
        db_session,
        senders=_senders(
            RecordingSender("in-app"),
            EmailSender(transport=lambda *args: sent_emails.append(args)),
        ),
    )

    result = service.create_and_send(_payload(user.id, channels=["in-app", "email"]))

    assert len(result.sent_channels) == 2
    in_app_attempt, email_attempt = result.sent_channels
    assert (in_app_attempt.channel, in_app_attempt.status) == ("in-app", "sent")
    assert (email_attempt.channel, email_attempt.status) == ("email", "failed")
    assert "missing email address" in email_attempt.error
    assert sent_emails == []


def test_sms_body_is_title_plus_first_140_characters(db_session, make_user):
    user = make_user(mobile="6987654321")
    delivered: list[tuple[str, str]] = []
    service = NotificationDeliveryService(
        db_session,
        senders=_senders(SmsSender(transport=lambda to, body: delivered.append((to, body)))),
    )
    message = "Α" * 150 + "B" * 50

    result = service.create_and_send(
        _payload(user.id, title="Δικάσιμος", message=message, channels=["sms"])
    )

    assert delivered == [("6987654321", "Δικάσιμος: " + "Α" * 140)]
    (attempt,) = result.sent_channels
    assert attempt.status == "sent"


def test_missing_mobile_number_fails_sms(db_session, make_user):
    user = make_user(mobile=None)
    service = NotificationDeliveryService(
        db_session, senders=_senders(SmsSender(transport=lambda to, body: None))
    )

    result = service.create_and_send(_payload(user.id, channels=["sms"]))

    (attempt,) = result.sent_channels
    assert attempt.status == "failed"
    assert "missing mobile number" in attempt.error


def test_inactive_user_is_not_emailed(db_session, make_user):
    user = make_user(is_active=False)
    sent: list[tuple] = []
    service = NotificationDeliveryService(
        db_session, senders=_senders(EmailSender(transport=lambda *args: sent.append(args)))
    )

    result = service.create_and_send(_payload(user.id, channels=["email"]))

    assert result.sent_channels[0].status == "failed"
    assert "inactive" in result.sent_channels[0].error
    assert sent == []


def test_repeated_send_appends_new_attempts(db_session, make_user):
    user = make_user()
    flaky = RecordingSender("email", ChannelDeliveryError("timeout"))
    service = NotificationDeliveryService(db_session, senders=_senders(flaky))
    first = service.create_and_send(_payload(user.id, channels=["email"]))

    flaky.error = None
    second = service.send(first)

    assert [attempt.status for attempt in second.sent_channels] == ["failed", "sent"]
    assert second.sent_channels[0].error == "timeout"
    reloaded = NotificationRepository(db_session).get(first.id)
    assert len(reloaded.sent_channels) == 2


def test_send_requires_a_persisted_notification(db_session):
    service = NotificationDeliveryService(db_session, senders={})
    draft = Notification(
        id=None, user_id=1, type="system_announcement", title="t", message="m"
    )

    with pytest.raises(ValueError):
        service.send(draft)


def test_persistence_failure_propagates(db_session, make_user, make_notification):
    user = make_user()
    notification = make_notification(user.id)

    class BrokenRepository(NotificationRepository):
        def append_delivery_attempts(self, notification_id, attempts):
            raise OperationalError("INSERT", {}, Exception("database is locked"))

    service = NotificationDeliveryService(
        db_session,
        senders=_senders(RecordingSender("in-app")),
        repository=BrokenRepository(db_session),
    )

    with pytest.raises(OperationalError):
        service.send(notification)


def test_create_and_send_rejects_invalid_data(db_session, make_user):
    user = make_user()
    service = NotificationDeliveryService(db_session, senders={})

    with pytest.raises(ValueError):
        service.create_and_send(_payload(user.id, title="x" * 201))

    assert NotificationRepository(db_session).count_unread(user.id) == 0


def test_send_for_deleted_notification_raises(db_session, make_user, make_notification):
    user = make_user()
    notification = make_notification(user.id)
    db_session.execute(text("DELETE FROM notification WHERE id = :id"), {"id": notification.id})
    db_session.commit()
    service = NotificationDeliveryService(
        db_session, senders=_senders(RecordingSender("in-app"))
    )

    with pytest.raises(ValueError):
        service.send(notification)
