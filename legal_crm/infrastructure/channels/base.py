"""Common interface for notification channel senders."""

from __future__ import annotations

import abc

from legal_crm.domain.entities import Notification, User
from legal_crm.domain.exceptions import ChannelDeliveryError, MissingContactError


class ChannelSender(abc.ABC):
    """Deliver a notification over one channel.

    ``deliver`` returns normally on success and raises a
    :class:`~legal_crm.domain.exceptions.ChannelDeliveryError` (or any other
    exception) on failure. ``user`` is ``None`` when the owner could not be
    found in the user directory.
    """

    channel: str

    @abc.abstractmethod
    def deliver(self, notification: Notification, user: User | None) -> None:
        """Send ``notification`` to ``user``."""


def require_contact(
    notification: Notification, user: User | None, attribute: str, label: str, channel: str
) -> str:
    """Return the recipient's ``attribute`` or raise a channel error."""

    if user is None:
        raise MissingContactError(
            f"user {notification.user_id} not found; missing {label}", channel=channel
        )
    if not user.can_receive():
        raise ChannelDeliveryError(
            f"user {notification.user_id} is inactive", channel=channel
        )
    value = getattr(user, attribute, None)
    if not value:
        raise MissingContactError(
            f"missing {label} for user {notification.user_id}", channel=channel
        )
    return value
