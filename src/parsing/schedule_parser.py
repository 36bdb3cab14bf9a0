"""Parsing of the competition schedule feed into typed records.

The feed shape is ``{"units": [{id, eventId, phaseId, disciplineId,
eventUnitName, startDate, endDate, status, phases: [...], competitors: [...]}]}``.
Codes are canonicalized here so raw and pre-cleaned documents load the same.
Required fields are checked once, at this boundary; the resolver downstream
assumes well-formed records.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Mapping

from domain.codes import canonicalize, clean_unit
from domain.models import Competitor, CompetitorResult, EventUnit, Phase, Schedule
from parsing.errors import MalformedDocumentError, MissingFieldError
from utils.date_utils import parse_timestamp

_NESTED_KEYS = ("phases", "competitors")


def load_document(source: str | bytes | Mapping[str, Any], *, feed: str) -> Dict[str, Any]:
    """Return a decoded JSON object, raising MalformedDocumentError on bad input."""
    if isinstance(source, Mapping):
        return dict(source)
    try:
        document = json.loads(source)
    except (TypeError, ValueError) as e:
        raise MalformedDocumentError(f"{feed} document is not valid JSON: {e}", context={"feed": feed}) from e
    if not isinstance(document, dict):
        raise MalformedDocumentError(f"{feed} document must be a JSON object", context={"feed": feed})
    return document


def _text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _order(value: Any) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def parse_result(raw: Mapping[str, Any] | None) -> CompetitorResult | None:
    if not raw:
        return None
    return CompetitorResult(
        position=_text(raw.get("position")),
        mark=_text(raw.get("mark")),
        medal_type=_text(raw.get("medalType")),
        irm=_text(raw.get("irm")),
        winner_loser_tie=_text(raw.get("winnerLoserTie")),
    )


def parse_competitor(raw: Mapping[str, Any], *, unit_id: str) -> Competitor:
    name = _text(raw.get("name"))
    if name is None:
        raise MissingFieldError("Competitor without name", context={"unit": unit_id, "competitor": dict(raw)})
    return Competitor(
        name=name,
        code=canonicalize(raw.get("code")),
        noc=_text(raw.get("noc")),
        order=_order(raw.get("order")),
        results=parse_result(raw.get("results")),
    )


def parse_phase(raw: Mapping[str, Any], *, unit_id: str) -> Phase:
    start_text = _text(raw.get("startDate"))
    competitors = [parse_competitor(c, unit_id=unit_id) for c in raw.get("competitors") or []]
    return Phase(
        description=_text(raw.get("description")) or "",
        status=_text(raw.get("status")) or "",
        start_text=start_text,
        start_date=parse_timestamp(start_text),
        code=canonicalize(raw.get("code")) or None,
        competitors=competitors,
    )


def parse_unit(raw: Mapping[str, Any], *, index: int = 0) -> EventUnit:
    for required in ("id", "eventId"):
        if not _text(raw.get(required)):
            raise MissingFieldError(
                f"Schedule unit #{index} lacks '{required}'",
                context={"index": index, "field": required, "unit_id": raw.get("id")},
            )
    cleaned = clean_unit(dict(raw))
    unit_id = cleaned["id"]
    start_text = _text(cleaned.get("startDate"))
    return EventUnit(
        id=unit_id,
        event_id=cleaned["eventId"],
        phase_id=cleaned.get("phaseId") or "",
        discipline_id=cleaned.get("disciplineId") or "",
        event_unit_name=_text(cleaned.get("eventUnitName")) or "",
        status=_text(cleaned.get("status")) or "",
        start_text=start_text,
        start_date=parse_timestamp(start_text),
        end_text=_text(cleaned.get("endDate")),
        phases=[parse_phase(p, unit_id=unit_id) for p in cleaned.get("phases") or []],
        competitors=[parse_competitor(c, unit_id=unit_id) for c in cleaned.get("competitors") or []],
        attributes={k: v for k, v in cleaned.items() if k not in _NESTED_KEYS},
    )


def parse_schedule(source: str | bytes | Mapping[str, Any]) -> Schedule:
    document = load_document(source, feed="schedule")
    units_raw = document.get("units")
    if not isinstance(units_raw, list):
        raise MalformedDocumentError("schedule document has no 'units' list", context={"feed": "schedule"})
    units: List[EventUnit] = [parse_unit(u, index=i) for i, u in enumerate(units_raw)]
    return Schedule(units=units)


def load_schedule(path: str | Path) -> Schedule:
    return parse_schedule(Path(path).read_text(encoding="utf-8"))
