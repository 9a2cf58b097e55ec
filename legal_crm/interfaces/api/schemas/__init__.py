from .notification import (
    DeliveryAttemptRead,
    MarkReadResult,
    NotificationCreate,
    NotificationMarkReadRequest,
    NotificationRead,
    UnreadCountRead,
)

__all__ = [
    "DeliveryAttemptRead",
    "MarkReadResult",
    "NotificationCreate",
    "NotificationMarkReadRequest",
    "NotificationRead",
    "UnreadCountRead",
]
