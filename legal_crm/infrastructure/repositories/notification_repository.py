"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Iterable

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from legal_crm.domain.entities import DeliveryAttempt, Notification
from legal_crm.infrastructure.models import (
    NotificationDeliveryAttemptModel,
    NotificationModel,
)
from legal_crm.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_timezone,
)


class NotificationRepository:
    """Provide persistence operations for :class:`Notification` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, notification_id: int, *, user_id: int | None = None) -> Notification | None:
        model = self._get_model(notification_id, user_id=user_id)
        return self._to_entity(model) if model else None

    def list_for_user(
        self,
        user_id: int,
        *,
        unread_only: bool = False,
        limit: int | None = 50,
    ) -> Sequence[Notification]:
        query = self.session.query(NotificationModel)
        query = query.filter(NotificationModel.user_id == user_id)
        if unread_only:
            query = query.filter(NotificationModel.read.is_(False))
        query = query.order_by(
            NotificationModel.created_at.desc(), NotificationModel.id.desc()
        )
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def create(self, notification: Notification) -> Notification:
        model = NotificationModel()
        self._apply_entity_to_model(model, notification)
        self.session.add(model)
        self._commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def append_delivery_attempts(
        self, notification_id: int, attempts: Iterable[DeliveryAttempt]
    ) -> Notification:
        """Insert ``attempts`` for ``notification_id`` in a single transaction.

        Attempts are new rows, so concurrent senders never overwrite each
        other's history; only ``updated_at`` is touched on the parent row.
        """

        touched = self.session.execute(
            update(NotificationModel)
            .where(NotificationModel.id == notification_id)
            .values(updated_at=ensure_app_naive_datetime(now_in_app_timezone()))
            .execution_options(synchronize_session=False)
        )
        if touched.rowcount == 0:
            self.session.rollback()
            msg = f"Notification with id {notification_id} not found"
            raise ValueError(msg)

        for attempt in attempts:
            self.session.add(
                NotificationDeliveryAttemptModel(
                    notification_id=notification_id,
                    channel=attempt.channel,
                    sent_at=ensure_app_naive_datetime(attempt.sent_at),
                    status=attempt.status,
                    error=attempt.error,
                )
            )
        self._commit()

        model = self._get_model(notification_id)
        if model is None:  # pragma: no cover - deleted between commit and reload
            msg = f"Notification with id {notification_id} not found"
            raise ValueError(msg)
        return self._to_entity(model)

    def count_unread(self, user_id: int) -> int:
        return (
            self.session.query(NotificationModel)
            .filter(NotificationModel.user_id == user_id)
            .filter(NotificationModel.read.is_(False))
            .count()
        )

    def mark_as_read(self, notification_id: int, *, user_id: int) -> Notification | None:
        """Mark one notification owned by ``user_id`` as read.

        Returns ``None`` when the notification does not exist or belongs to
        someone else. Already read notifications keep their ``read_at``.
        """

        self.mark_many_as_read([notification_id], user_id=user_id)
        return self.get(notification_id, user_id=user_id)

    def mark_many_as_read(self, notification_ids: Iterable[int], *, user_id: int) -> int:
        ids = {notification_id for notification_id in notification_ids if notification_id is not None}
        if not ids:
            return 0
        result = self.session.execute(
            update(NotificationModel)
            .where(
                NotificationModel.id.in_(ids),
                NotificationModel.user_id == user_id,
                NotificationModel.read.is_(False),
            )
            .values(
                read=True,
                read_at=ensure_app_naive_datetime(now_in_app_timezone()),
            )
            .execution_options(synchronize_session=False)
        )
        self._commit()
        return result.rowcount or 0

    def delete_read_before(self, cutoff: datetime) -> int:
        """Delete read notifications whose ``read_at`` is older than ``cutoff``."""

        return self._delete_where(
            NotificationModel.read.is_(True),
            NotificationModel.read_at.is_not(None),
            NotificationModel.read_at < ensure_app_naive_datetime(cutoff),
        )

    def delete_expired(self, now: datetime) -> int:
        """Delete notifications whose ``expires_at`` is at or before ``now``."""

        return self._delete_where(
            NotificationModel.expires_at.is_not(None),
            NotificationModel.expires_at <= ensure_app_naive_datetime(now),
        )

    def _delete_where(self, *conditions) -> int:
        target_ids = select(NotificationModel.id).where(*conditions)
        self.session.query(NotificationDeliveryAttemptModel).filter(
            NotificationDeliveryAttemptModel.notification_id.in_(target_ids)
        ).delete(synchronize_session=False)
        deleted = (
            self.session.query(NotificationModel)
            .filter(*conditions)
            .delete(synchronize_session=False)
        )
        self._commit()
        return deleted or 0

    def _get_model(
        self, notification_id: int, *, user_id: int | None = None
    ) -> NotificationModel | None:
        query = self.session.query(NotificationModel).filter(
            NotificationModel.id == notification_id
        )
        if user_id is not None:
            query = query.filter(NotificationModel.user_id == user_id)
        return query.populate_existing().one_or_none()

    def _commit(self) -> None:
        try:
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise

    @staticmethod
    def _apply_entity_to_model(model: NotificationModel, notification: Notification) -> None:
        model.created_at = (
            ensure_app_naive_datetime(notification.created_at)
            or ensure_app_naive_datetime(now_in_app_timezone())
        )
        model.user_id = notification.user_id
        model.type = notification.type
        model.title = notification.title
        model.message = notification.message
        model.priority = notification.priority
        model.read = notification.read
        model.read_at = ensure_app_naive_datetime(notification.read_at)
        model.action_url = notification.action_url
        model.action_text = notification.action_text
        model.extra_data = dict(notification.metadata or {})
        model.related_model = notification.related_model
        model.related_id = notification.related_id
        model.expires_at = ensure_app_naive_datetime(notification.expires_at)
        model.channels = list(notification.channels)

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            user_id=model.user_id,
            type=model.type,
            title=model.title,
            message=model.message,
            priority=model.priority,
            read=bool(model.read),
            read_at=ensure_app_timezone(model.read_at),
            action_url=model.action_url,
            action_text=model.action_text,
            metadata=dict(model.extra_data or {}),
            related_model=model.related_model,
            related_id=model.related_id,
            expires_at=ensure_app_timezone(model.expires_at),
            channels=list(model.channels or []),
            sent_channels=[
                DeliveryAttempt(
                    channel=attempt.channel,
                    sent_at=ensure_app_timezone(attempt.sent_at),
                    status=attempt.status,
                    error=attempt.error,
                )
                for attempt in model.attempts
            ],
            created_at=ensure_app_timezone(model.created_at),
            updated_at=ensure_app_timezone(model.updated_at),
        )


__all__ = ["NotificationRepository"]
