"""Push notifications to websocket subscribers."""

from __future__ import annotations

import asyncio
from typing import Any

import anyio
from anyio import from_thread

from legal_crm.domain.entities import Notification
from legal_crm.utils import isoformat_or_none

from .manager import NotificationConnectionManager, notification_manager


class NotificationPublisher:
    """Serialize notifications and hand them to the connection manager."""

    def __init__(self, manager: NotificationConnectionManager) -> None:
        self._manager = manager

    @property
    def manager(self) -> NotificationConnectionManager:
        return self._manager

    def dispatch(self, notification: Notification, *, timeout: float | None = None) -> int:
        """Deliver ``notification`` to its user's open sockets.

        Must be called from a worker thread of the running event loop (the
        FastAPI threadpool). Blocks until the send finishes and returns the
        number of sockets reached; ``TimeoutError`` is raised when ``timeout``
        elapses. ``RuntimeError`` is raised when called on the event loop
        thread itself, where waiting for the result would deadlock.
        """

        try:
            asyncio.get_running_loop()
        except RuntimeError:
            pass
        else:
            raise RuntimeError("cannot block the event loop waiting for delivery")

        message = {"type": "notification", "data": serialize_notification(notification)}
        return from_thread.run(self._send, notification.user_id, message, timeout)

    async def _send(
        self, user_id: int, message: dict[str, Any], timeout: float | None
    ) -> int:
        with anyio.fail_after(timeout):
            return await self._manager.send_to_user(user_id, message)


def serialize_notification(notification: Notification) -> dict[str, Any]:
    """Return the JSON payload representation for ``notification``."""

    return {
        "id": notification.id,
        "user_id": notification.user_id,
        "type": notification.type,
        "title": notification.title,
        "message": notification.message,
        "priority": notification.priority,
        "read": notification.read,
        "read_at": isoformat_or_none(notification.read_at),
        "action_url": notification.action_url,
        "action_text": notification.action_text,
        "metadata": notification.metadata or {},
        "related_model": notification.related_model,
        "related_id": notification.related_id,
        "expires_at": isoformat_or_none(notification.expires_at),
        "channels": list(notification.channels),
        "created_at": isoformat_or_none(notification.created_at),
    }


notification_publisher = NotificationPublisher(notification_manager)


__all__ = [
    "NotificationPublisher",
    "notification_publisher",
    "serialize_notification",
]
