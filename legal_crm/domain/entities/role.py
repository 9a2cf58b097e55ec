"""Domain entity representing a portal role."""

from dataclasses import dataclass

ROLE_ADMIN = "admin"
ROLE_SUPERVISOR = "supervisor"
ROLE_SECRETARY = "secretary"
ROLE_CLIENT = "client"
ROLE_ALIASES: tuple[str, ...] = (ROLE_ADMIN, ROLE_SUPERVISOR, ROLE_SECRETARY, ROLE_CLIENT)


@dataclass
class Role:
    """Portal a user belongs to (admin, supervisor, secretary or client)."""

    id: int
    name: str
    alias: str


__all__ = [
    "ROLE_ADMIN",
    "ROLE_ALIASES",
    "ROLE_CLIENT",
    "ROLE_SECRETARY",
    "ROLE_SUPERVISOR",
    "Role",
]
