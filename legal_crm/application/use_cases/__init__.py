"""Aggregate application use cases."""

from .notifications import (
    NotificationDeliveryService,
    cleanup_read_notifications,
    purge_expired_notifications,
)

__all__ = [
    "NotificationDeliveryService",
    "cleanup_read_notifications",
    "purge_expired_notifications",
]
