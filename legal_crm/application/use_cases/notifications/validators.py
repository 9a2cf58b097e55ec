"""Validation helpers for notification use cases."""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Iterable, Mapping

from legal_crm.domain.entities import (
    CHANNELS,
    DEFAULT_CHANNELS,
    MESSAGE_MAX_LENGTH,
    NOTIFICATION_TYPES,
    PRIORITIES,
    PRIORITY_MEDIUM,
    RELATED_MODELS,
    TITLE_MAX_LENGTH,
    Notification,
)
from legal_crm.utils import ensure_app_timezone

_FIELDS = {
    "user_id",
    "type",
    "title",
    "message",
    "priority",
    "action_url",
    "action_text",
    "metadata",
    "related_model",
    "related_id",
    "expires_at",
    "channels",
}


def ensure_valid_text(value: Any, *, field: str, max_length: int) -> str:
    """Return ``value`` stripped or raise ``ValueError``."""

    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{field} is required")
    normalized = value.strip()
    if len(normalized) > max_length:
        raise ValueError(f"{field} must be at most {max_length} characters")
    return normalized


def ensure_valid_channels(channels: Iterable[str] | None) -> list[str]:
    """Validate channel names, keeping the first occurrence of each in order."""

    if channels is None:
        return list(DEFAULT_CHANNELS)
    if isinstance(channels, str):
        channels = [channels]
    unique: list[str] = []
    for channel in channels:
        if channel not in CHANNELS:
            raise ValueError(f"Unsupported channel '{channel}'")
        if channel not in unique:
            unique.append(channel)
    return unique or list(DEFAULT_CHANNELS)


def build_notification(data: Mapping[str, Any]) -> Notification:
    """Create an unsaved :class:`Notification` from caller supplied ``data``."""

    unknown = set(data) - _FIELDS
    if unknown:
        raise ValueError("Unknown notification fields: " + ", ".join(sorted(unknown)))

    user_id = data.get("user_id")
    if not isinstance(user_id, int) or isinstance(user_id, bool) or user_id <= 0:
        raise ValueError("user_id must be a positive integer")

    notification_type = data.get("type")
    if notification_type not in NOTIFICATION_TYPES:
        raise ValueError(f"Unsupported notification type '{notification_type}'")

    priority = data.get("priority") or PRIORITY_MEDIUM
    if priority not in PRIORITIES:
        raise ValueError(f"Unsupported priority '{priority}'")

    related_model = data.get("related_model")
    related_id = data.get("related_id")
    if (related_model is None) != (related_id is None):
        raise ValueError("related_model and related_id must be provided together")
    if related_model is not None and related_model not in RELATED_MODELS:
        raise ValueError(f"Unsupported related model '{related_model}'")

    expires_at = data.get("expires_at")
    if expires_at is not None and not isinstance(expires_at, datetime):
        raise ValueError("expires_at must be a datetime")

    metadata = data.get("metadata") or {}
    if not isinstance(metadata, Mapping):
        raise ValueError("metadata must be a mapping")
    try:
        json.dumps(metadata)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"metadata must be JSON serialisable: {exc}") from exc

    action_url = data.get("action_url") or None
    action_text = data.get("action_text") or None
    if action_text and not action_url:
        raise ValueError("action_text requires action_url")

    return Notification(
        id=None,
        user_id=user_id,
        type=notification_type,
        title=ensure_valid_text(data.get("title"), field="title", max_length=TITLE_MAX_LENGTH),
        message=ensure_valid_text(
            data.get("message"), field="message", max_length=MESSAGE_MAX_LENGTH
        ),
        priority=priority,
        action_url=action_url,
        action_text=action_text,
        metadata=dict(metadata),
        related_model=related_model,
        related_id=related_id,
        expires_at=ensure_app_timezone(expires_at),
        channels=ensure_valid_channels(data.get("channels")),
    )


__all__ = ["build_notification", "ensure_valid_channels", "ensure_valid_text"]
