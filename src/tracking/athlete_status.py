"""Derive whether an athlete is still competing in an event.

Rules, first match wins:
  1. event absent from the schedule      -> active, "Event not yet scheduled"
  2. pick the most recent not-finished phase (none left: go to 4)
  3. athlete on that phase's roster      -> active, medal / still-in-competition
  4. athlete on a unit starting after now -> active, "Upcoming event found"
  5. otherwise                            -> inactive, "No more scheduled events"

Missing data never eliminates an athlete (rule 1). Rule 3 only looks at the
current phase's own roster, since an athlete knocked out earlier is absent
from it while the event goes on.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from domain.codes import canonicalize
from domain.models import AthleteStatus, EventDetails, Schedule, TBD, UNSCHEDULED_PHASE
from services.name_matcher import NameMatcher, default_matcher
from tracking.phase_timeline import PhaseTimeline, build_timeline, event_phases
from utils.date_utils import utc_now

_log = logging.getLogger(__name__)

REASON_NOT_SCHEDULED = "Event not yet scheduled"
REASON_MEDAL_CONTENTION = "In contention for medal"
REASON_STILL_COMPETING = "Still in competition"
REASON_UPCOMING = "Upcoming event found"
REASON_NO_MORE_EVENTS = "No more scheduled events"


class AthleteStatusResolver:
    """Pure function of (schedule, matcher): repeated calls give equal results."""

    def __init__(self, schedule: Schedule, matcher: Optional[NameMatcher] = None) -> None:
        self.schedule = schedule
        self.matcher = matcher or default_matcher()

    def timeline(self, event_code: str) -> Optional[PhaseTimeline]:
        code = canonicalize(event_code)
        if not self.schedule.has_event(code):
            return None
        return build_timeline(event_phases(self.schedule.units_for_event(code)))

    def event_details(self, event_code: str) -> EventDetails:
        """Soonest not-finished phase and its start, or Unscheduled / Finished with TBD."""
        timeline = self.timeline(event_code)
        if timeline is None:
            return EventDetails(phase=UNSCHEDULED_PHASE, next_date=TBD)
        return timeline.event_details()

    def resolve(self, athlete_name: str, event_code: str, now: Optional[datetime] = None) -> AthleteStatus:
        code = canonicalize(event_code)
        now = now or utc_now()
        timeline = self.timeline(code)
        if timeline is None:
            return AthleteStatus(is_active=True, reason=REASON_NOT_SCHEDULED)

        current = timeline.latest_not_finished()
        if current is not None and self.matcher.contains(athlete_name, current.competitors):
            reason = REASON_MEDAL_CONTENTION if timeline.has_medal_round else REASON_STILL_COMPETING
            _log.debug("%s active in %s (%s)", athlete_name, code, current.description)
            return AthleteStatus(
                is_active=True,
                reason=reason,
                current_phase=current.description,
                next_date=current.start_text,
            )

        upcoming = [
            u
            for u in self.schedule.units_for_event(code)
            if u.start_date is not None and u.start_date > now
        ]
        upcoming.sort(key=lambda u: u.start_date)
        for unit in upcoming:
            if self.matcher.contains(athlete_name, unit.competitors):
                return AthleteStatus(
                    is_active=True,
                    reason=REASON_UPCOMING,
                    next_event=unit.event_unit_name,
                    next_date=unit.start_text,
                )

        _log.debug("%s has no remaining phase in %s", athlete_name, code)
        return AthleteStatus(is_active=False, reason=REASON_NO_MORE_EVENTS)


def resolve_status(
    schedule: Schedule,
    athlete_name: str,
    event_code: str,
    now: Optional[datetime] = None,
    matcher: Optional[NameMatcher] = None,
) -> AthleteStatus:
    return AthleteStatusResolver(schedule, matcher).resolve(athlete_name, event_code, now)


def get_event_details(schedule: Schedule, event_code: str) -> EventDetails:
    return AthleteStatusResolver(schedule).event_details(event_code)
