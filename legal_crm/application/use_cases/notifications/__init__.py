"""Public helpers for creating, delivering and maintaining notifications."""

from .delivery import NotificationDeliveryService, create_and_send_notification
from .events import (
    notify_appointment_reminder,
    notify_court_reminder,
    notify_deadline_reminder,
    notify_document_uploaded,
    notify_payment_received,
)
from .lifecycle import (
    cleanup_read_notifications,
    get_unread_count,
    list_notifications,
    mark_as_read,
    mark_many_as_read,
    purge_expired_notifications,
)
from .validators import build_notification

__all__ = [
    "NotificationDeliveryService",
    "build_notification",
    "cleanup_read_notifications",
    "create_and_send_notification",
    "get_unread_count",
    "list_notifications",
    "mark_as_read",
    "mark_many_as_read",
    "notify_appointment_reminder",
    "notify_court_reminder",
    "notify_deadline_reminder",
    "notify_document_uploaded",
    "notify_payment_received",
    "purge_expired_notifications",
]
