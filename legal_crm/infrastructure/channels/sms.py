"""SMS channel."""

from __future__ import annotations

from typing import Callable

from legal_crm.domain.entities import CHANNEL_SMS, Notification, User
from legal_crm.infrastructure.sms import send_sms

from .base import ChannelSender, require_contact

SMS_MESSAGE_LIMIT = 140

SmsTransport = Callable[[str, str], object]


def build_sms_body(notification: Notification) -> str:
    """Title followed by the first 140 characters of the message."""

    return f"{notification.title}: {notification.message[:SMS_MESSAGE_LIMIT]}"


class SmsSender(ChannelSender):
    """Text the notification to the owner's mobile number."""

    channel = CHANNEL_SMS

    def __init__(self, transport: SmsTransport | None = None) -> None:
        self._transport = transport or send_sms

    def deliver(self, notification: Notification, user: User | None) -> None:
        recipient = require_contact(notification, user, "mobile", "mobile number", self.channel)
        self._transport(recipient, build_sms_body(notification))
