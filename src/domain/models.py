"""Domain models for the Olympics schedule / entries reconciliation pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

FINISHED = "FINISHED"

# Event details sentinels
UNSCHEDULED_PHASE = "Unscheduled"
FINISHED_PHASE = "Finished"
TBD = "TBD"


@dataclass(slots=True)
class CompetitorResult:
    position: Optional[str] = None
    mark: Optional[str] = None
    medal_type: Optional[str] = None
    irm: Optional[str] = None
    winner_loser_tie: Optional[str] = None


@dataclass(slots=True)
class Competitor:
    name: str
    code: str = ""
    noc: Optional[str] = None
    order: Optional[int] = None
    results: Optional[CompetitorResult] = None


@dataclass(slots=True)
class Phase:
    description: str
    status: str
    start_text: Optional[str] = None
    start_date: Optional[datetime] = None
    code: Optional[str] = None
    competitors: List[Competitor] = field(default_factory=list)

    @property
    def is_finished(self) -> bool:
        return self.status == FINISHED


@dataclass(slots=True)
class EventUnit:
    """One scheduled session of an event (a row of the schedule feed)."""

    id: str
    event_id: str
    phase_id: str
    discipline_id: str
    event_unit_name: str
    status: str
    start_text: Optional[str] = None
    start_date: Optional[datetime] = None
    end_text: Optional[str] = None
    phases: List[Phase] = field(default_factory=list)
    competitors: List[Competitor] = field(default_factory=list)
    # remaining feed attributes (names, flags, location...) kept for table projection
    attributes: Dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class Schedule:
    units: List[EventUnit] = field(default_factory=list)
    _by_event: Dict[str, List[EventUnit]] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        for unit in self.units:
            self._by_event.setdefault(unit.event_id, []).append(unit)

    def units_for_event(self, event_code: str) -> List[EventUnit]:
        """Units of one event in document order; ``event_code`` must be canonical."""
        return list(self._by_event.get(event_code, []))

    def has_event(self, event_code: str) -> bool:
        return event_code in self._by_event


@dataclass(slots=True)
class RegisteredEvent:
    code: str
    description: str


@dataclass(slots=True)
class AthleteEntry:
    name: str
    organisation_code: str
    registered_events: List[RegisteredEvent] = field(default_factory=list)


@dataclass(slots=True)
class Entries:
    persons: List[AthleteEntry] = field(default_factory=list)

    def for_organisation(self, code: str) -> List[AthleteEntry]:
        return [p for p in self.persons if p.organisation_code == code]


@dataclass(frozen=True, slots=True)
class AthleteStatus:
    """Derived verdict for one (athlete, event) pair. Never persisted."""

    is_active: bool
    reason: str
    current_phase: Optional[str] = None
    next_event: Optional[str] = None
    next_date: Optional[str] = None


@dataclass(frozen=True, slots=True)
class EventDetails:
    phase: str
    next_date: str = TBD


@dataclass(slots=True)
class AthleteEventRecord:
    athlete_name: str
    event_name: str
    event_code: str
    is_active: bool
    phase: str
    next_date: str
    reason: str

    def active_view(self) -> Dict[str, Any]:
        return {
            "athlete_name": self.athlete_name,
            "event_name": self.event_name,
            "event_code": self.event_code,
            "current_phase": self.phase,
            "next_event_date": self.next_date,
        }

    def inactive_view(self) -> Dict[str, Any]:
        return {
            "athlete_name": self.athlete_name,
            "event_name": self.event_name,
            "event_code": self.event_code,
            "last_phase": self.phase,
            "reason": self.reason,
        }


@dataclass(slots=True)
class CountryAggregate:
    country: str
    active: List[AthleteEventRecord] = field(default_factory=list)
    inactive: List[AthleteEventRecord] = field(default_factory=list)

    @property
    def active_count(self) -> int:
        return len(self.active)

    @property
    def inactive_count(self) -> int:
        return len(self.inactive)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "active_athletes": [r.active_view() for r in self.active],
            "inactive_athletes": [r.inactive_view() for r in self.inactive],
        }

    def summary(self) -> Dict[str, Any]:
        return {
            "country": self.country,
            "active_athletes_count": self.active_count,
            "inactive_athletes_count": self.inactive_count,
        }


@dataclass(slots=True)
class CalendarEvent:
    country: str
    sport: str
    event: str
    phase: str
    cannot_win_medal: bool
    athletes: List[str] = field(default_factory=list)
    start_time: Optional[datetime] = None
    location: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "country": self.country,
            "sport": self.sport,
            "event": self.event,
            "phase": self.phase,
            "cannotWinMedal": self.cannot_win_medal,
            "athletes": list(self.athletes),
            "startTime": self.start_time.isoformat() if self.start_time else None,
            "location": self.location,
        }
