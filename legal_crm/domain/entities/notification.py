"""Domain entities representing user notifications and their delivery log."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any

NOTIFICATION_TYPES: tuple[str, ...] = (
    "court_reminder",
    "deadline_reminder",
    "appointment_reminder",
    "payment_received",
    "payment_due",
    "document_uploaded",
    "document_signed",
    "client_message",
    "system_announcement",
    "task_assigned",
    "court_update",
    "birthday_reminder",
)

PRIORITY_LOW = "low"
PRIORITY_MEDIUM = "medium"
PRIORITY_HIGH = "high"
PRIORITY_URGENT = "urgent"
PRIORITIES: tuple[str, ...] = (
    PRIORITY_LOW,
    PRIORITY_MEDIUM,
    PRIORITY_HIGH,
    PRIORITY_URGENT,
)

CHANNEL_IN_APP = "in-app"
CHANNEL_EMAIL = "email"
CHANNEL_SMS = "sms"
CHANNEL_PUSH = "push"
CHANNELS: tuple[str, ...] = (CHANNEL_IN_APP, CHANNEL_EMAIL, CHANNEL_SMS, CHANNEL_PUSH)
DEFAULT_CHANNELS: tuple[str, ...] = (CHANNEL_IN_APP,)

RELATED_MODELS: tuple[str, ...] = (
    "Court",
    "Deadline",
    "Appointment",
    "Client",
    "Document",
    "Financial",
)

DELIVERY_STATUS_PENDING = "pending"
DELIVERY_STATUS_SENT = "sent"
DELIVERY_STATUS_FAILED = "failed"

TITLE_MAX_LENGTH = 200
MESSAGE_MAX_LENGTH = 1000


@dataclass(frozen=True)
class DeliveryAttempt:
    """Outcome of one attempt to deliver a notification over one channel."""

    channel: str
    sent_at: datetime
    status: str
    error: str | None = None

    def succeeded(self) -> "DeliveryAttempt":
        return DeliveryAttempt(self.channel, self.sent_at, DELIVERY_STATUS_SENT)

    def failed(self, error: str) -> "DeliveryAttempt":
        return DeliveryAttempt(
            self.channel, self.sent_at, DELIVERY_STATUS_FAILED, error or "unknown error"
        )


@dataclass
class Notification:
    """Message addressed to a single user, with its delivery history."""

    id: int | None
    user_id: int
    type: str
    title: str
    message: str
    priority: str = PRIORITY_MEDIUM
    read: bool = False
    read_at: datetime | None = None
    action_url: str | None = None
    action_text: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    related_model: str | None = None
    related_id: int | None = None
    expires_at: datetime | None = None
    channels: list[str] = field(default_factory=lambda: list(DEFAULT_CHANNELS))
    sent_channels: list[DeliveryAttempt] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def mark_as_read(self, now: datetime) -> bool:
        """Flag the notification as read; return ``False`` when it already was."""

        if self.read:
            return False
        self.read = True
        self.read_at = now
        return True

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and self.expires_at <= now

    def age(self, now: datetime) -> timedelta | None:
        if self.created_at is None:
            return None
        return now - self.created_at

    def attempts_for(self, channel: str) -> list[DeliveryAttempt]:
        return [attempt for attempt in self.sent_channels if attempt.channel == channel]


__all__ = [
    "CHANNELS",
    "CHANNEL_EMAIL",
    "CHANNEL_IN_APP",
    "CHANNEL_PUSH",
    "CHANNEL_SMS",
    "DEFAULT_CHANNELS",
    "DELIVERY_STATUS_FAILED",
    "DELIVERY_STATUS_PENDING",
    "DELIVERY_STATUS_SENT",
    "DeliveryAttempt",
    "MESSAGE_MAX_LENGTH",
    "NOTIFICATION_TYPES",
    "Notification",
    "PRIORITIES",
    "PRIORITY_HIGH",
    "PRIORITY_LOW",
    "PRIORITY_MEDIUM",
    "PRIORITY_URGENT",
    "RELATED_MODELS",
    "TITLE_MAX_LENGTH",
]
