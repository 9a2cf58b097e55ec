"""Domain entities exposed by the application."""

from .notification import (
    CHANNELS,
    CHANNEL_EMAIL,
    CHANNEL_IN_APP,
    CHANNEL_PUSH,
    CHANNEL_SMS,
    DEFAULT_CHANNELS,
    DELIVERY_STATUS_FAILED,
    DELIVERY_STATUS_PENDING,
    DELIVERY_STATUS_SENT,
    MESSAGE_MAX_LENGTH,
    NOTIFICATION_TYPES,
    PRIORITIES,
    PRIORITY_HIGH,
    PRIORITY_LOW,
    PRIORITY_MEDIUM,
    PRIORITY_URGENT,
    RELATED_MODELS,
    TITLE_MAX_LENGTH,
    DeliveryAttempt,
    Notification,
)
from .role import ROLE_ALIASES, Role
from .user import User

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
    "ROLE_ALIASES",
    "Role",
    "TITLE_MAX_LENGTH",
    "User",
]
