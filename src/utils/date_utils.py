"""Timestamp helpers shared by parsers and the status resolver."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional


def parse_timestamp(value: object) -> Optional[datetime]:
    """Parse an ISO-8601 feed timestamp into an aware datetime.

    Returns None for missing or unparseable input so callers can treat the
    value as unknown. Naive timestamps are taken as UTC.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value).strip()
        if not text or text.upper() == "TBD":
            return None
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
