"""Push channel placeholder."""

from __future__ import annotations

from legal_crm.domain.entities import CHANNEL_PUSH, Notification, User
from legal_crm.domain.exceptions import ChannelNotImplementedError

from .base import ChannelSender


class PushSender(ChannelSender):
    """Accepted by the model, but there is no push provider yet."""

    channel = CHANNEL_PUSH

    def deliver(self, notification: Notification, user: User | None) -> None:
        raise ChannelNotImplementedError(
            "push notifications are not implemented", channel=self.channel
        )
