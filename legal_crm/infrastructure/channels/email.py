"""Email channel."""

from __future__ import annotations

from typing import Callable

from legal_crm.domain.entities import CHANNEL_EMAIL, Notification, User
from legal_crm.infrastructure.email import render_notification_html, send_email

from .base import ChannelSender, require_contact

EmailTransport = Callable[[str, str, str], None]


class EmailSender(ChannelSender):
    """Email the notification to the owner's address on file."""

    channel = CHANNEL_EMAIL

    def __init__(self, transport: EmailTransport | None = None) -> None:
        self._transport = transport or send_email

    def deliver(self, notification: Notification, user: User | None) -> None:
        recipient = require_contact(notification, user, "email", "email address", self.channel)
        html_content = render_notification_html(
            notification.title,
            notification.message,
            action_url=notification.action_url,
            action_text=notification.action_text,
        )
        self._transport(notification.title, html_content, recipient)
