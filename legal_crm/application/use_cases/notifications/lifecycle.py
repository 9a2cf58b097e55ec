"""Read-side and housekeeping operations on notifications."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import datetime

from sqlalchemy.orm import Session

from legal_crm.config import get_settings
from legal_crm.domain.entities import Notification
from legal_crm.infrastructure.repositories import NotificationRepository
from legal_crm.utils import days_before_now, now_in_app_timezone

logger = logging.getLogger(__name__)


def list_notifications(
    session: Session, *, user_id: int, unread_only: bool = False, limit: int | None = 50
) -> Sequence[Notification]:
    return NotificationRepository(session).list_for_user(
        user_id, unread_only=unread_only, limit=limit
    )


def get_unread_count(session: Session, user_id: int) -> int:
    """Return how many notifications of ``user_id`` are still unread."""

    return NotificationRepository(session).count_unread(user_id)


def mark_as_read(session: Session, *, notification_id: int, user_id: int) -> Notification | None:
    """Mark one notification as read; ``None`` if it is not ``user_id``'s."""

    return NotificationRepository(session).mark_as_read(notification_id, user_id=user_id)


def mark_many_as_read(
    session: Session, *, user_id: int, notification_ids: Iterable[int]
) -> int:
    """Mark the given notifications of ``user_id`` as read.

    Identifiers that are unknown or owned by another user are ignored.
    Returns the number of notifications that changed state.
    """

    return NotificationRepository(session).mark_many_as_read(
        notification_ids, user_id=user_id
    )


def cleanup_read_notifications(
    session: Session, days_to_keep: int | None = None, *, now: datetime | None = None
) -> int:
    """Delete read notifications whose ``read_at`` is older than the window.

    ``days_to_keep`` defaults to ``NOTIFICATION_RETENTION_DAYS`` (90).
    Unread notifications are never removed here.
    """

    if days_to_keep is None:
        days_to_keep = get_settings().notification_retention_days
    cutoff = days_before_now(days_to_keep, now=now)
    removed = NotificationRepository(session).delete_read_before(cutoff)
    logger.info("Removed %d read notifications older than %d days", removed, days_to_keep)
    return removed


def purge_expired_notifications(session: Session, *, now: datetime | None = None) -> int:
    """Delete every notification whose ``expires_at`` has passed."""

    removed = NotificationRepository(session).delete_expired(now or now_in_app_timezone())
    logger.info("Removed %d expired notifications", removed)
    return removed


__all__ = [
    "cleanup_read_notifications",
    "get_unread_count",
    "list_notifications",
    "mark_as_read",
    "mark_many_as_read",
    "purge_expired_notifications",
]
