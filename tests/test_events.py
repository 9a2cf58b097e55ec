from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

import pytest

from legal_crm.application.use_cases.notifications import (
    notify_appointment_reminder,
    notify_court_reminder,
    notify_deadline_reminder,
    notify_document_uploaded,
    notify_payment_received,
)
from legal_crm.application.use_cases.notifications.events import priority_for_days_left
from legal_crm.infrastructure.channels import PushSender


@pytest.mark.parametrize(
    "days_left, priority",
    [(0, "urgent"), (1, "urgent"), (2, "high"), (3, "high"), (7, "medium"), (8, "low")],
)
def test_priority_for_days_left(days_left, priority):
    assert priority_for_days_left(days_left) == priority


def test_court_reminder(db_session, make_user):
    user = make_user()

    notification = notify_court_reminder(
        db_session,
        user_id=user.id,
        court_id=12,
        court_name="Πρωτοδικείο Αθηνών",
        hearing_date=date(2026, 11, 3),
        days_left=1,
        client_name="Γ. Νικολάου",
        senders={},
    )

    assert notification.type == "court_reminder"
    assert notification.priority == "urgent"
    assert notification.related_model == "Court"
    assert notification.related_id == 12
    assert "αύριο (03/11/2026)" in notification.message
    assert "Γ. Νικολάου" in notification.message
    assert notification.channels == ["in-app", "email"]
    assert [a.status for a in notification.sent_channels] == ["failed", "failed"]


def test_deadline_reminder(db_session, make_user):
    user = make_user()

    notification = notify_deadline_reminder(
        db_session,
        user_id=user.id,
        deadline_id=5,
        deadline_name="Κατάθεση προτάσεων",
        due_date=date(2026, 12, 1),
        days_left=5,
        senders={},
    )

    assert notification.priority == "medium"
    assert notification.title == "Υπενθύμιση Προθεσμίας: Κατάθεση προτάσεων"
    assert notification.metadata == {"days_left": 5, "due_date": "2026-12-01"}
    assert notification.action_url == "/deadlines/5"


def test_appointment_reminder_expires_at_start(db_session, make_user):
    user = make_user()
    starts_at = datetime(2026, 11, 20, 10, 30)

    notification = notify_appointment_reminder(
        db_session,
        user_id=user.id,
        appointment_id=9,
        starts_at=starts_at,
        hours_left=1,
        channels=["push"],
        senders={"push": PushSender()},
    )

    assert notification.priority == "high"
    assert notification.expires_at.replace(tzinfo=None) == starts_at
    assert "στις 10:30" in notification.message
    assert notification.sent_channels[0].error == "push notifications are not implemented"


def test_payment_and_document_notifications(db_session, make_user):
    user = make_user()

    payment = notify_payment_received(
        db_session,
        user_id=user.id,
        financial_id=4,
        amount=Decimal("150"),
        client_name="Ε. Ιωάννου",
        senders={},
    )
    document = notify_document_uploaded(
        db_session,
        user_id=user.id,
        document_id=8,
        document_name="Αγωγή.pdf",
        uploaded_by="Κ. Δημητρίου",
        senders={},
    )

    assert payment.message == "Λάβαμε πληρωμή €150.00 από Ε. Ιωάννου."
    assert payment.priority == "low"
    assert document.related_model == "Document"
    assert "Κ. Δημητρίου" in document.message


def test_long_names_are_shortened_to_fit_the_message(db_session, make_user):
    user = make_user()
    long_name = "Κατάθεση προτάσεων και προσθήκης αντίκρουσης " * 40

    deadline = notify_deadline_reminder(
        db_session,
        user_id=user.id,
        deadline_id=6,
        deadline_name=long_name,
        due_date=date(2026, 12, 1),
        days_left=10,
        senders={},
    )
    court = notify_court_reminder(
        db_session,
        user_id=user.id,
        court_id=13,
        court_name=long_name,
        hearing_date=date(2026, 12, 2),
        days_left=4,
        client_name=long_name,
        senders={},
    )

    assert len(long_name) > 1000
    assert len(deadline.title) <= 200
    assert len(deadline.message) <= 1000
    assert "…" in deadline.message
    assert deadline.message.endswith("λήγει σε 10 ημέρες (01/12/2026).")
    assert len(court.message) <= 1000
