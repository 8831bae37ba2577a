"""Timezone helpers."""

from __future__ import annotations

import datetime as dt
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from commitmail.config import settings

DEFAULT_TIMEZONE = "America/Los_Angeles"


def load_timezone(name: str, fallback: str = DEFAULT_TIMEZONE) -> tuple[ZoneInfo, str]:
    """Return a ``ZoneInfo`` instance and its canonical name with a fallback."""

    try:
        return ZoneInfo(name), name
    except (ZoneInfoNotFoundError, ValueError):
        return ZoneInfo(fallback), fallback


TZ, TZ_NAME = load_timezone(settings.timezone or DEFAULT_TIMEZONE)


def now_local() -> dt.datetime:
    """Current timezone-aware datetime in the configured timezone."""

    return dt.datetime.now(TZ)
