"""Domain entity representing a CRM user."""

from dataclasses import dataclass
from datetime import datetime


from .role import Role


@dataclass
class User:
    """Attributes of a portal user that the notification core relies on."""

    id: int | None
    role: Role
    name: str
    email: str | None
    mobile: str | None
    is_active: bool
    deleted: bool = False
    created_at: datetime | None = None

    def has_role(self, alias: str) -> bool:
        """Return ``True`` when the user's role alias matches ``alias``."""

        return self.role.alias.lower() == alias.lower()

    def can_receive(self) -> bool:
        """Inactive or deleted accounts must not be contacted."""

        return self.is_active and not self.deleted
