"""Order an event's phases by finality and start time.

Finished phases have already happened whatever their dates say. The rest are
ordered by start date; an undated phase cannot be presumed imminent nor
recent, so it sorts after every dated phase in both directions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Union

from domain.codes import canonicalize, same_code
from domain.models import (
    FINISHED_PHASE,
    TBD,
    UNSCHEDULED_PHASE,
    Competitor,
    EventDetails,
    EventUnit,
    Phase,
)
from services.phase_matcher import best_phase_match

MEDAL_KEYWORDS = ("final", "medal")


class TimelineState(str, Enum):
    UNSCHEDULED = UNSCHEDULED_PHASE
    FINISHED = FINISHED_PHASE


def _ascending_key(phase: Phase) -> tuple:
    return (phase.start_date is None, phase.start_date.timestamp() if phase.start_date else 0.0)


def _merge_competitors(target: List[Competitor], extra: Iterable[Competitor]) -> None:
    seen = {(c.name, c.noc) for c in target}
    for competitor in extra:
        if (competitor.name, competitor.noc) not in seen:
            seen.add((competitor.name, competitor.noc))
            target.append(competitor)


def _phase_key(phase: Phase) -> tuple:
    return (phase.description.lower(), phase.start_text)


def _label(text: Optional[str]) -> str:
    return canonicalize(text).lower().strip()


def _owning_phase(unit: EventUnit, phases: List[Phase]) -> Optional[Phase]:
    """The embedded phase a session unit stands for, or None.

    A unit declaring a single phase stands for it. Otherwise the unit's
    ``phaseId`` is matched against phase codes, then a phase description
    (singular stem, longest wins) is looked up inside ``eventUnitName``, then
    the closest spelling of the whole name is accepted if near enough.
    """
    if len(unit.phases) == 1:
        own = _phase_key(unit.phases[0])
        return next(p for p in phases if _phase_key(p) == own)
    if unit.phase_id:
        for phase in phases:
            if phase.code and same_code(phase.code, unit.phase_id):
                return phase
    name = _label(unit.event_unit_name)
    if not name:
        return None
    best: Optional[Phase] = None
    best_len = 0
    for phase in phases:
        stem = _label(phase.description).rstrip("s")
        if stem and stem in name and len(stem) > best_len:
            best, best_len = phase, len(stem)
    if best is not None:
        return best
    match = best_phase_match(name, phases, code=lambda p: _label(p.description))
    if match.distance <= len(match.code) // 3:
        return match.candidate
    return None


def _unit_phase(unit: EventUnit) -> Phase:
    return Phase(
        description=unit.event_unit_name,
        status=unit.status,
        start_text=unit.start_text,
        start_date=unit.start_date,
        code=unit.phase_id or None,
        competitors=list(unit.competitors),
    )


def event_phases(units: Iterable[EventUnit]) -> List[Phase]:
    """Phase collection of one event from its schedule units.

    Embedded ``phases`` lists win when any unit has them; repeats across units
    (same description and start) are merged. Each session unit is the roster
    of one embedded phase only: the phase it declares alone, or the one its
    ``phaseId`` or name points at. A phase listing its own competitors keeps
    them. A unit with competitors that points at no embedded phase stays a
    phase of its own. Without embedded phases every unit stands for one phase.
    """
    units = list(units)
    if not any(u.phases for u in units):
        return [_unit_phase(u) for u in units]

    merged: dict[tuple, Phase] = {}
    declared: set[tuple] = set()
    for unit in units:
        for phase in unit.phases:
            key = _phase_key(phase)
            if phase.competitors:
                declared.add(key)
            if key not in merged:
                merged[key] = Phase(
                    description=phase.description,
                    status=phase.status,
                    start_text=phase.start_text,
                    start_date=phase.start_date,
                    code=phase.code,
                    competitors=list(phase.competitors),
                )
            else:
                _merge_competitors(merged[key].competitors, phase.competitors)

    phases = list(merged.values())
    standalone: List[Phase] = []
    for unit in units:
        if not unit.competitors:
            continue
        owner = _owning_phase(unit, phases)
        if owner is None:
            standalone.append(_unit_phase(unit))
        elif _phase_key(owner) not in declared:
            _merge_competitors(owner.competitors, unit.competitors)
    return phases + standalone


@dataclass(slots=True)
class PhaseTimeline:
    phases: List[Phase]
    finished: List[Phase] = field(init=False)
    pending: List[Phase] = field(init=False)

    def __post_init__(self) -> None:
        self.finished = [p for p in self.phases if p.is_finished]
        self.pending = sorted((p for p in self.phases if not p.is_finished), key=_ascending_key)

    def current(self) -> Union[Phase, TimelineState]:
        """Earliest not-finished phase, else FINISHED, else UNSCHEDULED for no phases."""
        if self.pending:
            return self.pending[0]
        if self.finished:
            return TimelineState.FINISHED
        return TimelineState.UNSCHEDULED

    def latest_not_finished(self) -> Optional[Phase]:
        """Most recent not-finished phase (latest start date first)."""
        dated = [p for p in self.pending if p.start_date is not None]
        if dated:
            return sorted(dated, key=lambda p: p.start_date.timestamp(), reverse=True)[0]
        return self.pending[0] if self.pending else None

    @property
    def has_medal_round(self) -> bool:
        return any(
            keyword in phase.description.lower() for phase in self.phases for keyword in MEDAL_KEYWORDS
        )

    def event_details(self) -> EventDetails:
        current = self.current()
        if isinstance(current, TimelineState):
            return EventDetails(phase=current.value, next_date=TBD)
        return EventDetails(phase=current.description, next_date=current.start_text or TBD)


def build_timeline(phases: Iterable[Phase]) -> PhaseTimeline:
    return PhaseTimeline(phases=list(phases))
