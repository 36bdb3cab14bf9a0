"""Per-country iCalendar download and parsing."""

from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

import httpx

from config import settings
from config.countries import CountryConfig
from core import async_http, filesystem
from domain.models import CalendarEvent
from parsing import calendar_parser
from parsing.errors import CalendarParseError
from utils import naming

_log = logging.getLogger(__name__)


@dataclass(slots=True)
class CalendarScrapeResult:
    events: List[CalendarEvent] = field(default_factory=list)
    counts: Dict[str, int] = field(default_factory=dict)
    failures: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "events_total": len(self.events),
            "events_per_country": dict(self.counts),
            "failed_countries": dict(self.failures),
        }


def calendar_url(country: CountryConfig) -> str:
    return settings.CALENDAR_URL_TEMPLATE.format(code=country.code)


async def download_calendars(
    countries: Sequence[CountryConfig],
    out_dir: str,
    *,
    client: Optional[httpx.AsyncClient] = None,
    **fetch_kwargs,
) -> Dict[str, str | Exception]:
    """Fetch every country's ICS concurrently and store the successful ones.

    Returns country code -> saved path, or the exception for that country.
    """
    urls = {c.code: calendar_url(c) for c in countries}
    bodies = await async_http.fetch_many(urls, client=client, **fetch_kwargs)
    saved: Dict[str, str | Exception] = {}
    for code, body in bodies.items():
        if isinstance(body, BaseException):
            saved[code] = body
            continue
        path = os.path.join(out_dir, naming.calendar_filename(code))
        filesystem.write_text(path, body)
        saved[code] = path
    return saved


def parse_saved_calendars(
    countries: Sequence[CountryConfig], saved: Dict[str, str | Exception]
) -> CalendarScrapeResult:
    result = CalendarScrapeResult()
    for country in countries:
        outcome = saved.get(country.code)
        if outcome is None:
            continue
        if isinstance(outcome, BaseException):
            _log.warning("Calendar download failed for %s: %s", country.display_name, outcome)
            result.failures[country.name] = str(outcome)
            continue
        try:
            events = calendar_parser.parse_calendar(filesystem.read_text(outcome), country)
        except CalendarParseError as e:
            _log.warning("Calendar for %s could not be parsed: %s", country.display_name, e)
            result.failures[country.name] = str(e)
            continue
        _log.info("Processed %d events for %s", len(events), country.display_name)
        result.counts[country.name] = len(events)
        result.events.extend(events)
    result.events = calendar_parser.sort_by_start(result.events)
    return result


def scrape_calendars(
    countries: Sequence[CountryConfig],
    out_dir: str | None = None,
    *,
    client: Optional[httpx.AsyncClient] = None,
    **fetch_kwargs,
) -> CalendarScrapeResult:
    out_dir = out_dir or settings.CALENDARS_DIR
    filesystem.ensure_dir(out_dir)
    saved = asyncio.run(download_calendars(countries, out_dir, client=client, **fetch_kwargs))
    return parse_saved_calendars(countries, saved)
