"""Join the schedule against athlete entries, per country.

Every (athlete, registered event) pair of a country becomes one flat record;
records are split into active / inactive in entry order.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Sequence

from config.countries import DEFAULT_COUNTRIES, CountryConfig
from domain.codes import canonicalize
from domain.models import AthleteEventRecord, CountryAggregate, Entries, Schedule
from services.name_matcher import NameMatcher
from tracking.athlete_status import AthleteStatusResolver
from utils.date_utils import utc_now

_log = logging.getLogger(__name__)


class Reconciler:
    def __init__(
        self,
        schedule: Schedule,
        entries: Entries,
        countries: Sequence[CountryConfig] = DEFAULT_COUNTRIES,
        matcher: Optional[NameMatcher] = None,
    ) -> None:
        self.entries = entries
        self.countries = list(countries)
        self.resolver = AthleteStatusResolver(schedule, matcher)

    def athlete_records(self, country_code: str, now: Optional[datetime] = None) -> List[AthleteEventRecord]:
        now = now or utc_now()
        records: List[AthleteEventRecord] = []
        for person in self.entries.for_organisation(country_code):
            for registered in person.registered_events:
                code = canonicalize(registered.code)
                status = self.resolver.resolve(person.name, code, now)
                details = self.resolver.event_details(code)
                records.append(
                    AthleteEventRecord(
                        athlete_name=person.name,
                        event_name=registered.description,
                        event_code=code,
                        is_active=status.is_active,
                        phase=details.phase,
                        next_date=details.next_date,
                        reason=status.reason,
                    )
                )
        return records

    def process_country(self, country: CountryConfig, now: Optional[datetime] = None) -> CountryAggregate:
        records = self.athlete_records(country.code, now)
        aggregate = partition(country.name, records)
        _log.info(
            "%s: %d active, %d inactive",
            country.display_name,
            aggregate.active_count,
            aggregate.inactive_count,
        )
        return aggregate

    def process_all(self, now: Optional[datetime] = None) -> Dict[str, CountryAggregate]:
        now = now or utc_now()
        return {c.name: self.process_country(c, now) for c in self.countries}


def partition(country: str, records: Iterable[AthleteEventRecord]) -> CountryAggregate:
    """Stable split by ``is_active``."""
    aggregate = CountryAggregate(country=country)
    for record in records:
        (aggregate.active if record.is_active else aggregate.inactive).append(record)
    return aggregate


def summarize(aggregates: Dict[str, CountryAggregate]) -> List[dict]:
    return [aggregate.summary() for aggregate in aggregates.values()]
