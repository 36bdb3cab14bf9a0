"""Parsing of per-country iCalendar feeds into ``CalendarEvent`` records.

Each VEVENT description looks like::

    Archery - Men's Individual 1/32 Elimination Round
    🇧🇪 DOE John
    🇫🇷 MARTIN Paul

The first line carries sport and event details; the following lines list
competitors prefixed with their flag.
"""

from __future__ import annotations

import re
from datetime import date, datetime, time, timezone
from typing import List, Tuple

from icalendar import Calendar

from config.countries import CountryConfig
from domain.models import CalendarEvent
from parsing.errors import CalendarParseError

PHASES = (
    "Round 1",
    "Round 2",
    "Preliminary Round",
    "Elimination Round",
    "Quarterfinal",
    "Semifinal",
    "Final",
    "Bronze Medal Match",
    "Gold Medal Match",
    "Group Play Stage",
    "Pool A",
    "Pool B",
    "Qualification",
    "Heats",
    "Repechages",
    "Time Trial",
    "Table of 64",
    "Table of 32",
    "Table of 16",
    "Table of 8",
    "Placing 5-8",
    "Placing 9-12",
    "Ranking Round",
    "Preliminary",
)

NON_MEDAL_PHASES = ("Placing 5-8", "Placing 9-12", "Ranking Round")

NO_PHASE = "N/A"

_FRACTION_ROUND_RE = re.compile(r"(\d+/\d+)\s+Elimination Round")
_WS_RE = re.compile(r"\s+")


def parse_event_and_phase(details: str) -> Tuple[str, str, bool]:
    """Split event details into (event name, phase label, cannot_win_medal)."""
    event, phase = details, NO_PHASE
    fraction = _FRACTION_ROUND_RE.search(details)
    if fraction:
        phase = f"{fraction.group(1)} Elimination Round"
        event = details.replace(fraction.group(0), "", 1)
    else:
        for label in PHASES:
            if label in details:
                event = details.replace(label, "", 1)
                phase = label
                break
    event = _WS_RE.sub(" ", event).strip()
    cannot_win_medal = any(label in phase for label in NON_MEDAL_PHASES)
    return event, phase, cannot_win_medal


def _as_datetime(value) -> datetime | None:
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    return None


def _athletes(lines: List[str], flag: str) -> List[str]:
    names: List[str] = []
    for line in lines:
        if flag and flag in line:
            name = line.split(flag, 1)[1].strip()
            if name:
                names.append(name)
    return names


def parse_calendar(payload: str | bytes, country: CountryConfig) -> List[CalendarEvent]:
    try:
        calendar = Calendar.from_ical(payload)
    except ValueError as e:
        raise CalendarParseError(
            f"Invalid iCalendar data for {country.display_name}: {e}", context={"country": country.code}
        ) from e

    events: List[CalendarEvent] = []
    for component in calendar.walk("VEVENT"):
        description = str(component.get("DESCRIPTION") or "").replace("\\n", "\n")
        lines = [line.strip() for line in description.splitlines() if line.strip()]
        if not lines:
            continue
        sport, _, details = lines[0].partition(" - ")
        event_name, phase, cannot_win_medal = parse_event_and_phase(details)
        dtstart = component.get("DTSTART")
        location = component.get("LOCATION")
        events.append(
            CalendarEvent(
                country=country.display_name,
                sport=sport.strip(),
                event=event_name,
                phase=phase,
                cannot_win_medal=cannot_win_medal,
                athletes=_athletes(lines[1:], country.flag),
                start_time=_as_datetime(dtstart.dt) if dtstart is not None else None,
                location=str(location) if location is not None else None,
            )
        )
    return events


def sort_by_start(events: List[CalendarEvent]) -> List[CalendarEvent]:
    """Chronological order; events without a start go last."""
    return sorted(
        events, key=lambda e: (e.start_time is None, e.start_time.timestamp() if e.start_time else 0.0)
    )
