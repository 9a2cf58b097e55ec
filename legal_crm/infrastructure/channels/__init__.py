"""Channel senders used by the delivery service."""

from __future__ import annotations

from legal_crm.infrastructure.notifications import NotificationPublisher

from .base import ChannelSender
from .email import EmailSender
from .in_app import InAppSender
from .push import PushSender
from .sms import SMS_MESSAGE_LIMIT, SmsSender, build_sms_body


def build_default_senders(
    publisher: NotificationPublisher | None = None,
) -> dict[str, ChannelSender]:
    """Return the production sender for every supported channel."""

    senders: list[ChannelSender] = [
        InAppSender(publisher),
        EmailSender(),
        SmsSender(),
        PushSender(),
    ]
    return {sender.channel: sender for sender in senders}


__all__ = [
    "ChannelSender",
    "EmailSender",
    "InAppSender",
    "PushSender",
    "SMS_MESSAGE_LIMIT",
    "SmsSender",
    "build_default_senders",
    "build_sms_body",
]
