"""Realtime (websocket) channel."""

from __future__ import annotations

import logging

from legal_crm.domain.entities import CHANNEL_IN_APP, Notification, User
from legal_crm.domain.exceptions import (
    ChannelDeliveryError,
    DeliveryTimeoutError,
    RecipientNotConnectedError,
)
from legal_crm.infrastructure.notifications import (
    NotificationPublisher,
    notification_publisher,
)

from .base import ChannelSender

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 5.0


class InAppSender(ChannelSender):
    """Push the notification to every open websocket of its owner."""

    channel = CHANNEL_IN_APP

    def __init__(
        self,
        publisher: NotificationPublisher | None = None,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self._publisher = publisher or notification_publisher
        self._timeout = timeout

    def deliver(self, notification: Notification, user: User | None) -> None:
        if not self._publisher.manager.is_connected(notification.user_id):
            raise RecipientNotConnectedError(
                f"user {notification.user_id} has no open realtime session",
                channel=self.channel,
            )
        try:
            reached = self._publisher.dispatch(notification, timeout=self._timeout)
        except TimeoutError as exc:
            raise DeliveryTimeoutError(
                f"realtime delivery timed out after {self._timeout:g}s",
                channel=self.channel,
            ) from exc
        except RuntimeError as exc:
            # Raised on the event loop thread or outside a worker thread of a running loop.
            raise ChannelDeliveryError(
                f"realtime transport unavailable: {exc}", channel=self.channel
            ) from exc

        if reached == 0:
            raise RecipientNotConnectedError(
                f"user {notification.user_id} disconnected before delivery",
                channel=self.channel,
            )
        logger.debug("Notification %s pushed to user %s", notification.id, notification.user_id)
