"""ORM models used by the application infrastructure."""

from .role import RoleModel
from .user import UserModel
from .notification import NotificationDeliveryAttemptModel, NotificationModel

__all__ = [
    "RoleModel",
    "UserModel",
    "NotificationModel",
    "NotificationDeliveryAttemptModel",
]
