"""Deliver notifications over their configured channels."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any

from sqlalchemy.orm import Session

from legal_crm.domain.entities import (
    DELIVERY_STATUS_PENDING,
    DeliveryAttempt,
    Notification,
)
from legal_crm.infrastructure.channels import ChannelSender, build_default_senders
from legal_crm.infrastructure.repositories import NotificationRepository, UserRepository
from legal_crm.utils import now_in_app_timezone

from .validators import build_notification

logger = logging.getLogger(__name__)

_UNSET = object()


class NotificationDeliveryService:
    """Best-effort, sequential, at-most-once-per-call channel delivery.

    Every requested channel yields exactly one :class:`DeliveryAttempt` per
    :meth:`send` call, in the order the channels are listed. Channel errors
    are recorded and never raised; only the final persistence step can fail
    the call.
    """

    def __init__(
        self,
        session: Session,
        *,
        senders: Mapping[str, ChannelSender] | None = None,
        repository: NotificationRepository | None = None,
        users: UserRepository | None = None,
        clock: Callable[[], datetime] = now_in_app_timezone,
    ) -> None:
        self._repository = repository or NotificationRepository(session)
        self._users = users or UserRepository(session)
        self._senders = dict(senders) if senders is not None else build_default_senders()
        self._clock = clock

    def send(self, notification: Notification) -> Notification:
        if notification.id is None:
            raise ValueError("Notification must be persisted before it is sent")

        recipient: Any = _UNSET
        attempts: list[DeliveryAttempt] = []
        for channel in notification.channels:
            attempt = DeliveryAttempt(
                channel=channel, sent_at=self._clock(), status=DELIVERY_STATUS_PENDING
            )
            try:
                sender = self._senders.get(channel)
                if sender is None:
                    raise LookupError(f"no sender registered for channel '{channel}'")
                if recipient is _UNSET:
                    recipient = self._users.get(notification.user_id)
                sender.deliver(notification, recipient)
            except Exception as exc:
                logger.warning(
                    "Channel %s failed for notification %s: %s",
                    channel,
                    notification.id,
                    exc,
                )
                attempt = attempt.failed(str(exc) or exc.__class__.__name__)
            else:
                attempt = attempt.succeeded()
            attempts.append(attempt)

        saved = self._repository.append_delivery_attempts(notification.id, attempts)
        logger.info(
            "Notification %s delivered: %s",
            notification.id,
            ", ".join(f"{a.channel}={a.status}" for a in attempts) or "no channels",
        )
        return saved

    def create_and_send(self, data: Mapping[str, Any]) -> Notification:
        """Validate and persist ``data`` as a notification, then :meth:`send` it."""

        created = self._repository.create(build_notification(data))
        return self.send(created)


def create_and_send_notification(
    session: Session,
    data: Mapping[str, Any],
    *,
    senders: Mapping[str, ChannelSender] | None = None,
) -> Notification:
    """Shortcut used by the event helpers and scripts."""

    return NotificationDeliveryService(session, senders=senders).create_and_send(data)


__all__ = [
    "NotificationDeliveryService",
    "create_and_send_notification",
]
