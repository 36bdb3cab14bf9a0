"""Project the schedule into normalized relational rows.

Produces the disciplines / events / phases / event_units / competitors /
results tables of the queryable record. Disciplines, events and phases are
deduplicated by code (first unit wins); competitor ids are
``<unit id>-<index>`` and result ids ``<competitor id>-result``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Sequence, TypeVar

from domain.codes import canonicalize
from domain.models import EventUnit, Schedule
from services.phase_matcher import PhaseNotFoundError, best_phase_match

_log = logging.getLogger(__name__)

T = TypeVar("T")

Row = Dict[str, Any]


@dataclass(slots=True)
class ScheduleTables:
    disciplines: List[Row] = field(default_factory=list)
    events: List[Row] = field(default_factory=list)
    phases: List[Row] = field(default_factory=list)
    event_units: List[Row] = field(default_factory=list)
    competitors: List[Row] = field(default_factory=list)
    results: List[Row] = field(default_factory=list)

    def counts(self) -> Dict[str, int]:
        return {
            "disciplines": len(self.disciplines),
            "events": len(self.events),
            "phases": len(self.phases),
            "event_units": len(self.event_units),
            "competitors": len(self.competitors),
            "results": len(self.results),
        }


@dataclass(slots=True)
class PhaseResolution:
    phase_codes: Dict[str, str] = field(default_factory=dict)  # unit id -> phase code
    errors: List[str] = field(default_factory=list)


def _discipline_row(unit: EventUnit) -> Row:
    attrs = unit.attributes
    return {
        "code": canonicalize(attrs.get("disciplineCode")) or unit.discipline_id,
        "name": attrs.get("disciplineName"),
        "order_num": attrs.get("disciplineOrder"),
    }


def _event_row(unit: EventUnit) -> Row:
    attrs = unit.attributes
    return {
        "code": unit.event_id,
        "name": attrs.get("eventName"),
        "gender_code": attrs.get("genderCode"),
        "event_order": attrs.get("eventOrder"),
        "discipline_code": canonicalize(attrs.get("disciplineCode")) or unit.discipline_id,
    }


def _phase_row(unit: EventUnit) -> Row:
    attrs = unit.attributes
    return {
        "code": unit.phase_id,
        "event_code": unit.event_id,
        "name": attrs.get("phaseName"),
        "phase_type": attrs.get("phaseType"),
        "phase_code": attrs.get("phaseCode"),
    }


def _unit_row(unit: EventUnit) -> Row:
    attrs = unit.attributes
    return {
        "code": unit.id,
        "event_code": unit.event_id,
        "phase_code": unit.phase_id or None,
        "name": unit.event_unit_name,
        "start_date": unit.start_text,
        "end_date": unit.end_text,
        "status": unit.status,
        "status_description": attrs.get("statusDescription"),
        "medal_flag": attrs.get("medalFlag"),
        "schedule_item_type": attrs.get("scheduleItemType"),
        "olympic_day": attrs.get("olympicDay"),
        "order_num": attrs.get("order"),
        "unit_num": attrs.get("unitNum"),
        "session_code": attrs.get("sessionCode"),
        "location": attrs.get("location"),
        "location_description": attrs.get("locationDescription"),
        "event_unit_type": attrs.get("eventUnitType"),
        "live_flag": attrs.get("liveFlag"),
    }


def build_tables(schedule: Schedule) -> ScheduleTables:
    tables = ScheduleTables()
    seen: Dict[str, set] = {"disciplines": set(), "events": set(), "phases": set(), "competitors": set()}
    for unit in schedule.units:
        for table, row in (
            ("disciplines", _discipline_row(unit)),
            ("events", _event_row(unit)),
            ("phases", _phase_row(unit)),
        ):
            if row["code"] and row["code"] not in seen[table]:
                seen[table].add(row["code"])
                getattr(tables, table).append(row)
        tables.event_units.append(_unit_row(unit))
        for idx, competitor in enumerate(unit.competitors):
            competitor_id = f"{unit.id}-{idx}"
            if competitor_id in seen["competitors"]:
                continue
            seen["competitors"].add(competitor_id)
            tables.competitors.append(
                {
                    "id": competitor_id,
                    "code": competitor.code,
                    "name": competitor.name,
                    "event_unit_code": unit.id,
                    "country_code": competitor.noc,
                    "order_num": competitor.order,
                }
            )
            if competitor.results is not None:
                r = competitor.results
                tables.results.append(
                    {
                        "id": f"{competitor_id}-result",
                        "competitor_id": competitor_id,
                        "event_unit_code": unit.id,
                        "position": r.position,
                        "mark": r.mark,
                        "medal_type": r.medal_type,
                        "irm": r.irm,
                        "winner_loser_tie": r.winner_loser_tie,
                    }
                )
    return tables


def resolve_unit_phases(units: Iterable[EventUnit], phases: Sequence[Mapping[str, Any]]) -> PhaseResolution:
    """Map each unit to the nearest known phase of its own event.

    ``phases`` rows need ``code`` and ``event_code``. Units of an event with
    no phases are reported, not guessed.
    """
    by_event: Dict[str, List[Mapping[str, Any]]] = {}
    for row in phases:
        by_event.setdefault(canonicalize(row.get("event_code")), []).append(row)

    resolution = PhaseResolution()
    for unit in units:
        try:
            match = best_phase_match(unit.phase_id, by_event.get(unit.event_id, []), code=lambda r: r["code"])
        except PhaseNotFoundError:
            resolution.errors.append(f"No phases found for event {unit.event_id} (unit {unit.id})")
            continue
        resolution.phase_codes[unit.id] = match.code
    if resolution.errors:
        _log.warning("%d units left without a resolved phase", len(resolution.errors))
    return resolution


def chunked(items: Sequence[T], size: int) -> Iterator[Sequence[T]]:
    if size <= 0:
        raise ValueError("chunk size must be positive")
    for start in range(0, len(items), size):
        yield items[start : start + size]
