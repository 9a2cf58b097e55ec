"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from legal_crm.domain.entities import MESSAGE_MAX_LENGTH, TITLE_MAX_LENGTH

NotificationType = Literal[
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
]
Priority = Literal["low", "medium", "high", "urgent"]
Channel = Literal["in-app", "email", "sms", "push"]
RelatedModel = Literal["Court", "Deadline", "Appointment", "Client", "Document", "Financial"]


class NotificationMarkReadRequest(BaseModel):
    """Payload used to mark a batch of notifications as read."""

    ids: list[int] = Field(..., min_length=1, description="Αναγνωριστικά ειδοποιήσεων")

    def unique_ids(self) -> list[int]:
        """Return the identifiers without duplicates, preserving order."""

        return list(dict.fromkeys(self.ids))


class NotificationCreate(BaseModel):
    """Request body for creating and immediately sending a notification."""

    user_id: int = Field(..., gt=0)
    type: NotificationType
    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    message: str = Field(..., min_length=1, max_length=MESSAGE_MAX_LENGTH)
    priority: Priority = "medium"
    action_url: str | None = None
    action_text: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    related_model: RelatedModel | None = None
    related_id: int | None = None
    expires_at: datetime | None = None
    channels: list[Channel] = Field(default_factory=lambda: ["in-app"])


class DeliveryAttemptRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    channel: str
    sent_at: datetime
    status: str
    error: str | None = None


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    type: str
    title: str
    message: str
    priority: str
    read: bool
    read_at: datetime | None = None
    action_url: str | None = None
    action_text: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    related_model: str | None = None
    related_id: int | None = None
    expires_at: datetime | None = None
    channels: list[str] = Field(default_factory=list)
    sent_channels: list[DeliveryAttemptRead] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime | None = None


class UnreadCountRead(BaseModel):
    count: int


class MarkReadResult(BaseModel):
    updated: int


__all__ = [
    "DeliveryAttemptRead",
    "MarkReadResult",
    "NotificationCreate",
    "NotificationMarkReadRequest",
    "NotificationRead",
    "UnreadCountRead",
]
