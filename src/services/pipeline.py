"""High-level orchestration: load feeds, reconcile, write outputs."""

from __future__ import annotations

import json
import logging
import os
import sqlite3
from datetime import datetime
from typing import Optional, Sequence

import httpx

from config import settings
from config.countries import DEFAULT_COUNTRIES, CountryConfig
from config.errors import ConfigurationError
from core import filesystem, http_client
from db import apply_schema, ingest_schedule
from domain.codes import clean_schedule
from domain.models import Entries, Schedule
from parsing.entries_parser import load_entries, parse_entries
from parsing.errors import MalformedDocumentError
from parsing.schedule_parser import load_schedule, parse_schedule
from scraping import calendar_scraper
from services.name_matcher import NameMatcher
from services.reconciler import Reconciler, summarize
from tracking import status_store

_log = logging.getLogger(__name__)


def schedule_path(data_dir: str) -> str:
    """Prefer the cleaned schedule; fall back to the raw feed (cleaned on load)."""
    cleaned = os.path.join(data_dir, settings.SCHEDULE_FILENAME)
    if os.path.exists(cleaned):
        return cleaned
    return os.path.join(data_dir, settings.RAW_SCHEDULE_FILENAME)


def load_inputs(data_dir: str) -> tuple[Schedule, Entries]:
    """Load both documents completely before any reconciliation starts."""
    schedule = load_schedule(schedule_path(data_dir))
    entries = load_entries(os.path.join(data_dir, settings.ENTRIES_FILENAME))
    _log.info("Loaded %d schedule units and %d persons", len(schedule.units), len(entries.persons))
    return schedule, entries


def fetch_feeds(
    data_dir: str | None = None,
    schedule_url: str | None = None,
    entries_url: str | None = None,
    *,
    client: Optional[httpx.Client] = None,
    **fetch_kwargs,
) -> dict:
    """Download both feed documents into ``data_dir``.

    Each document is validated before anything is written, so a bad feed never
    replaces a good local copy.
    """
    data_dir = data_dir or settings.DATA_DIR
    schedule_url = schedule_url or settings.SCHEDULE_URL
    entries_url = entries_url or settings.ENTRIES_URL
    if not schedule_url or not entries_url:
        raise ConfigurationError("Both a schedule URL and an entries URL are required")

    schedule_doc = http_client.fetch_json(schedule_url, client=client, **fetch_kwargs)
    entries_doc = http_client.fetch_json(entries_url, client=client, **fetch_kwargs)
    schedule = parse_schedule(schedule_doc)
    entries = parse_entries(entries_doc)

    schedule_out = os.path.join(data_dir, settings.RAW_SCHEDULE_FILENAME)
    entries_out = os.path.join(data_dir, settings.ENTRIES_FILENAME)
    filesystem.write_json(schedule_out, schedule_doc)
    filesystem.write_json(entries_out, entries_doc)
    _log.info("Fetched %d schedule units and %d persons into %s", len(schedule.units), len(entries.persons), data_dir)
    return {
        "schedule": schedule_out,
        "entries": entries_out,
        "units": len(schedule.units),
        "persons": len(entries.persons),
    }


def write_cleaned_schedule(data_dir: str | None = None) -> str:
    """Write ``cleaned_schedule.json`` next to the raw schedule feed."""
    data_dir = data_dir or settings.DATA_DIR
    raw_path = os.path.join(data_dir, settings.RAW_SCHEDULE_FILENAME)
    try:
        document = json.loads(filesystem.read_text(raw_path))
    except ValueError as e:
        raise MalformedDocumentError(f"schedule document is not valid JSON: {e}", context={"path": raw_path}) from e
    out = os.path.join(data_dir, settings.SCHEDULE_FILENAME)
    filesystem.write_json(out, clean_schedule(document))
    _log.info("Cleaned schedule has been written to %s", out)
    return out


def run_reconcile(
    data_dir: str | None = None,
    out_dir: str | None = None,
    countries: Sequence[CountryConfig] = DEFAULT_COUNTRIES,
    now: Optional[datetime] = None,
    matcher: Optional[NameMatcher] = None,
) -> dict:
    data_dir = data_dir or settings.DATA_DIR
    out_dir = out_dir or settings.RESULTS_DIR
    schedule, entries = load_inputs(data_dir)
    reconciler = Reconciler(schedule, entries, countries, matcher)
    aggregates = reconciler.process_all(now)

    failed: dict[str, str] = {}
    written = []
    for country in countries:
        try:
            status_store.save_country(aggregates[country.name], country, out_dir)
            written.append(aggregates[country.name])
        except OSError as e:
            _log.warning("Could not write results for %s: %s", country.display_name, e)
            failed[country.name] = str(e)
    status_store.save_summary(written, out_dir)

    return {
        "countries_processed": len(written),
        "countries_failed": failed,
        "active_total": sum(a.active_count for a in aggregates.values()),
        "inactive_total": sum(a.inactive_count for a in aggregates.values()),
        "summary": summarize(aggregates),
        "output_dir": out_dir,
    }


def run_calendars(
    out_dir: str | None = None,
    countries: Sequence[CountryConfig] = DEFAULT_COUNTRIES,
    **fetch_kwargs,
) -> dict:
    out_dir = out_dir or settings.CALENDARS_DIR
    result = calendar_scraper.scrape_calendars(countries, out_dir, **fetch_kwargs)
    path = status_store.save_calendar_events(result.events, out_dir)
    return {**result.to_dict(), "output_file": path}


def run_export_db(db_path: str, data_dir: str | None = None) -> dict:
    data_dir = data_dir or settings.DATA_DIR
    schedule = load_schedule(schedule_path(data_dir))
    conn = sqlite3.connect(db_path)
    try:
        conn.execute("PRAGMA foreign_keys=ON")
        apply_schema(conn)
        report = ingest_schedule(conn, schedule)
    finally:
        conn.close()
    _log.info("Exported %d rows into %s", report.total_rows, db_path)
    return {"db": db_path, "rows": report.rows, "total_rows": report.total_rows, "phase_errors": report.phase_errors}
