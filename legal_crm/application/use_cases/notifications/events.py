"""Helpers that turn office events into notifications and send them."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy.orm import Session

from legal_crm.domain.entities import (
    CHANNEL_EMAIL,
    CHANNEL_IN_APP,
    CHANNEL_SMS,
    PRIORITY_HIGH,
    PRIORITY_LOW,
    PRIORITY_MEDIUM,
    PRIORITY_URGENT,
    Notification,
)
from legal_crm.infrastructure.channels import ChannelSender

from .delivery import NotificationDeliveryService

_DATE_FORMAT = "%d/%m/%Y"
# Two names plus the fixed wording stay within the message limit.
_NAME_LIMIT = 400


def priority_for_days_left(days_left: int) -> str:
    """Sooner events are more pressing."""

    if days_left <= 1:
        return PRIORITY_URGENT
    if days_left <= 3:
        return PRIORITY_HIGH
    if days_left <= 7:
        return PRIORITY_MEDIUM
    return PRIORITY_LOW


def _in_days(days_left: int) -> str:
    if days_left == 0:
        return "σήμερα"
    if days_left == 1:
        return "αύριο"
    return f"σε {days_left} ημέρες"


def _format_date(value: date | datetime) -> str:
    return value.strftime(_DATE_FORMAT)


def _clip(name: str) -> str:
    if len(name) <= _NAME_LIMIT:
        return name
    return name[: _NAME_LIMIT - 1] + "…"


def _send(
    session: Session,
    data: dict,
    senders: Mapping[str, ChannelSender] | None,
) -> Notification:
    return NotificationDeliveryService(session, senders=senders).create_and_send(data)


def notify_court_reminder(
    session: Session,
    *,
    user_id: int,
    court_id: int,
    court_name: str,
    hearing_date: date | datetime,
    days_left: int,
    client_name: str | None = None,
    channels: Sequence[str] = (CHANNEL_IN_APP, CHANNEL_EMAIL),
    senders: Mapping[str, ChannelSender] | None = None,
) -> Notification:
    """Remind a lawyer of an upcoming hearing."""

    message = f"Δικάσιμος στο {_clip(court_name)} {_in_days(days_left)} ({_format_date(hearing_date)})."
    if client_name:
        message = f"{message} Εντολέας: {_clip(client_name)}."
    return _send(
        session,
        {
            "user_id": user_id,
            "type": "court_reminder",
            "title": "Υπενθύμιση Δικαστηρίου",
            "message": message,
            "priority": priority_for_days_left(days_left),
            "related_model": "Court",
            "related_id": court_id,
            "action_url": f"/courts/{court_id}",
            "action_text": "Προβολή δικασίμου",
            "metadata": {"days_left": days_left, "hearing_date": hearing_date.isoformat()},
            "channels": list(channels),
        },
        senders,
    )


def notify_deadline_reminder(
    session: Session,
    *,
    user_id: int,
    deadline_id: int,
    deadline_name: str,
    due_date: date | datetime,
    days_left: int,
    channels: Sequence[str] = (CHANNEL_IN_APP, CHANNEL_EMAIL),
    senders: Mapping[str, ChannelSender] | None = None,
) -> Notification:
    """Warn that a procedural deadline is approaching."""

    return _send(
        session,
        {
            "user_id": user_id,
            "type": "deadline_reminder",
            "title": f"Υπενθύμιση Προθεσμίας: {deadline_name}"[:200],
            "message": (
                f'Η προθεσμία "{_clip(deadline_name)}" λήγει {_in_days(days_left)} '
                f"({_format_date(due_date)})."
            ),
            "priority": priority_for_days_left(days_left),
            "related_model": "Deadline",
            "related_id": deadline_id,
            "action_url": f"/deadlines/{deadline_id}",
            "action_text": "Προβολή προθεσμίας",
            "metadata": {"days_left": days_left, "due_date": due_date.isoformat()},
            "channels": list(channels),
        },
        senders,
    )


def notify_appointment_reminder(
    session: Session,
    *,
    user_id: int,
    appointment_id: int,
    starts_at: datetime,
    hours_left: int,
    channels: Sequence[str] = (CHANNEL_IN_APP, CHANNEL_SMS),
    senders: Mapping[str, ChannelSender] | None = None,
) -> Notification:
    """Remind a user of an appointment in the next hours.

    The notification expires once the appointment has started.
    """

    return _send(
        session,
        {
            "user_id": user_id,
            "type": "appointment_reminder",
            "title": "Υπενθύμιση Ραντεβού",
            "message": (
                f"Ραντεβού {_format_date(starts_at)} στις {starts_at.strftime('%H:%M')}."
            ),
            "priority": PRIORITY_HIGH if hours_left <= 2 else PRIORITY_MEDIUM,
            "related_model": "Appointment",
            "related_id": appointment_id,
            "expires_at": starts_at,
            "metadata": {"hours_left": hours_left},
            "channels": list(channels),
        },
        senders,
    )


def notify_payment_received(
    session: Session,
    *,
    user_id: int,
    financial_id: int,
    amount: Decimal,
    client_name: str | None = None,
    channels: Sequence[str] = (CHANNEL_IN_APP,),
    senders: Mapping[str, ChannelSender] | None = None,
) -> Notification:
    """Record an incoming payment."""

    message = f"Λάβαμε πληρωμή €{amount:.2f}."
    if client_name:
        message = f"Λάβαμε πληρωμή €{amount:.2f} από {_clip(client_name)}."
    return _send(
        session,
        {
            "user_id": user_id,
            "type": "payment_received",
            "title": "Πληρωμή ελήφθη",
            "message": message,
            "priority": PRIORITY_LOW,
            "related_model": "Financial",
            "related_id": financial_id,
            "metadata": {"amount": str(amount)},
            "channels": list(channels),
        },
        senders,
    )


def notify_document_uploaded(
    session: Session,
    *,
    user_id: int,
    document_id: int,
    document_name: str,
    uploaded_by: str | None = None,
    channels: Sequence[str] = (CHANNEL_IN_APP,),
    senders: Mapping[str, ChannelSender] | None = None,
) -> Notification:
    """Tell a user that a document was added to one of their cases."""

    message = f'Ανέβηκε νέο έγγραφο: "{_clip(document_name)}".'
    if uploaded_by:
        message = f'Ο/Η {_clip(uploaded_by)} ανέβασε νέο έγγραφο: "{_clip(document_name)}".'
    return _send(
        session,
        {
            "user_id": user_id,
            "type": "document_uploaded",
            "title": "Νέο έγγραφο",
            "message": message,
            "related_model": "Document",
            "related_id": document_id,
            "action_url": f"/documents/{document_id}",
            "action_text": "Άνοιγμα εγγράφου",
            "channels": list(channels),
        },
        senders,
    )


__all__ = [
    "notify_appointment_reminder",
    "notify_court_reminder",
    "notify_deadline_reminder",
    "notify_document_uploaded",
    "notify_payment_received",
    "priority_for_days_left",
]
