"""Wall-clock access for the HTTP layer. Core modules take ``now`` explicitly."""

from __future__ import annotations

import logging
from datetime import datetime, timezone, tzinfo
from typing import Optional

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)


def resolve_timezone(timezone_name: Optional[str]) -> tzinfo:
    if not timezone_name or not timezone_name.strip():
        return timezone.utc
    try:
        return ZoneInfo(timezone_name.strip())
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Ignoring unsupported timezone value: %s", timezone_name)
        return timezone.utc


def current_time(timezone_name: Optional[str] = None) -> datetime:
    return datetime.now(resolve_timezone(timezone_name))


def resolve_now(now: Optional[datetime], timezone_name: Optional[str]) -> datetime:
    """Use the caller's instant when supplied, otherwise read the clock once."""
    return now if now is not None else current_time(timezone_name)
