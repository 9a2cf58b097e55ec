"""Timezone helpers shared by the domain, repositories and senders.

Timestamps are handled as aware datetimes in the office timezone throughout
the code base and stored naive (localized) in the database, so that SQLite and
SQL Server ``DATETIME`` columns behave the same way.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone, tzinfo
from functools import lru_cache
from typing import Final

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from legal_crm.config import get_settings

_DEFAULT_TIMEZONE: Final[str] = "Europe/Athens"
_OFFSET_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?:UTC|GMT)(?P<sign>[+-])(?P<hours>\d{1,2})(?::?(?P<minutes>\d{2}))?$",
    re.IGNORECASE,
)


@lru_cache(maxsize=1)
def get_app_timezone() -> tzinfo:
    """Return the office timezone configured through ``APP_TIMEZONE``.

    Accepts IANA names (``Europe/Athens``) as well as fixed offsets such as
    ``UTC+02:00``; anything unresolvable falls back to ``Europe/Athens``.
    """

    tz_name = (get_settings().app_timezone or "").strip() or _DEFAULT_TIMEZONE
    return _resolve_timezone(tz_name)


def now_in_app_timezone() -> datetime:
    """Return the current time localized to the office timezone."""

    return datetime.now(tz=get_app_timezone())


def now_in_app_naive_datetime() -> datetime:
    """Return the current office time without ``tzinfo`` (column default)."""

    return now_in_app_timezone().replace(tzinfo=None)


def ensure_app_timezone(value: datetime | None) -> datetime | None:
    """Express ``value`` in the office timezone, treating naive values as local."""

    if value is None:
        return None

    tz = get_app_timezone()
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value.astimezone(tz)


def ensure_app_naive_datetime(value: datetime | None) -> datetime | None:
    """Return ``value`` localized to the office timezone with ``tzinfo`` dropped."""

    localized = ensure_app_timezone(value)
    if localized is None:
        return None
    return localized.replace(tzinfo=None)


def days_before_now(days: int, *, now: datetime | None = None) -> datetime:
    """Return the aware instant ``days`` days before ``now``."""

    if days < 0:
        raise ValueError("days must not be negative")
    reference = ensure_app_timezone(now) if now is not None else now_in_app_timezone()
    return reference - timedelta(days=days)


def isoformat_or_none(value: datetime | None) -> str | None:
    """Serialize ``value`` for JSON payloads."""

    return value.isoformat() if value else None


def _resolve_timezone(tz_name: str) -> tzinfo:
    try:
        return ZoneInfo(tz_name)
    except ZoneInfoNotFoundError:
        match = _OFFSET_PATTERN.match(tz_name)
        if match:
            sign = -1 if match.group("sign") == "-" else 1
            offset = timedelta(
                hours=int(match.group("hours")),
                minutes=int(match.group("minutes") or 0),
            )
            return timezone(sign * offset)
    return ZoneInfo(_DEFAULT_TIMEZONE)
