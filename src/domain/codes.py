"""Canonical form for event / phase / discipline / competitor codes.

Feeds disagree on separators (``ATHM100M----------FNL-000100--`` vs
``ATHM100MFNL000100``). Every code used as a join key goes through
``canonicalize`` before it is compared or used as a dict key.
"""

from __future__ import annotations

import re
from typing import Any, Dict

_SEPARATOR_RE = re.compile(r"-")

UNIT_CODE_FIELDS = ("id", "eventId", "phaseId", "disciplineId")


def canonicalize(code: str | None) -> str:
    """Strip source-specific separators. Idempotent; ``None`` becomes ``""``."""
    if not code:
        return ""
    return _SEPARATOR_RE.sub("", str(code))


def same_code(a: str | None, b: str | None) -> bool:
    return canonicalize(a) == canonicalize(b)


def clean_unit(unit: Dict[str, Any]) -> Dict[str, Any]:
    """Return a shallow copy of a raw schedule unit with all join keys canonicalized."""
    cleaned = dict(unit)
    for key in UNIT_CODE_FIELDS:
        if key in cleaned and cleaned[key] is not None:
            cleaned[key] = canonicalize(cleaned[key])
    if cleaned.get("competitors"):
        cleaned["competitors"] = [
            {**competitor, "code": canonicalize(competitor.get("code"))}
            for competitor in cleaned["competitors"]
        ]
    return cleaned


def clean_schedule(document: Dict[str, Any]) -> Dict[str, Any]:
    """Canonicalize every unit of a raw schedule document, keeping other keys as-is."""
    cleaned = dict(document)
    cleaned["units"] = [clean_unit(u) for u in document.get("units", [])]
    return cleaned
