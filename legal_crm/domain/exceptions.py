"""Errors raised while delivering notifications.

Channel senders raise these; the delivery service turns each one into a
``failed`` attempt carrying ``str(exc)`` and moves on to the next channel.
"""

from __future__ import annotations


class ChannelDeliveryError(Exception):
    """Base class for failures confined to a single delivery channel."""

    def __init__(self, message: str, *, channel: str | None = None) -> None:
        super().__init__(message)
        self.channel = channel


class MissingContactError(ChannelDeliveryError):
    """The recipient has no address for the requested channel."""


class RecipientNotConnectedError(ChannelDeliveryError):
    """No realtime session is open for the recipient."""


class ChannelNotImplementedError(ChannelDeliveryError):
    """The channel is accepted by the model but has no transport yet."""


class DeliveryTimeoutError(ChannelDeliveryError):
    """The transport did not answer within the configured bound."""


class EmailDeliveryError(ChannelDeliveryError):
    """SendGrid rejected the message or is not configured."""


class SmsDeliveryError(ChannelDeliveryError):
    """The SMS provider rejected the message or is not configured."""


__all__ = [
    "ChannelDeliveryError",
    "ChannelNotImplementedError",
    "DeliveryTimeoutError",
    "EmailDeliveryError",
    "MissingContactError",
    "RecipientNotConnectedError",
    "SmsDeliveryError",
]
