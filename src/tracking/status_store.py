"""Persist per-country athlete status and the cross-country summary as JSON."""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Iterable, List

from config.countries import CountryConfig
from core import filesystem
from domain.models import CalendarEvent, CountryAggregate
from utils import naming

_log = logging.getLogger(__name__)

CALENDAR_EVENTS_FILENAME = "olympicsSchedule.json"


def _base(base: str | None) -> str:
    return base or naming.results_dir()


def save_country(aggregate: CountryAggregate, country: CountryConfig, base: str | None = None) -> str:
    path = os.path.join(_base(base), naming.country_status_filename(country))
    filesystem.write_json(path, aggregate.to_dict())
    _log.info("Results for %s written to %s", country.display_name, path)
    return path


def save_summary(aggregates: Iterable[CountryAggregate], base: str | None = None) -> str:
    path = os.path.join(_base(base), naming.summary_filename())
    summary: List[Dict[str, Any]] = [a.summary() for a in aggregates]
    filesystem.write_json(path, summary)
    _log.info("Summary written to %s", path)
    return path


def save_calendar_events(events: Iterable[CalendarEvent], base: str) -> str:
    path = os.path.join(base, CALENDAR_EVENTS_FILENAME)
    filesystem.write_json(path, [e.to_dict() for e in events])
    return path
