"""Global configuration and constants for the reconciliation pipeline."""

from __future__ import annotations

import os
from typing import Final

DATA_DIR: Final = os.environ.get("OLYMPICS_DATA_DIR", "opp-data")
RESULTS_DIR: Final = os.environ.get("OLYMPICS_RESULTS_DIR", os.path.join(DATA_DIR, "results"))
CALENDARS_DIR: Final = os.environ.get("OLYMPICS_CALENDARS_DIR", "calendars")

RAW_SCHEDULE_FILENAME: Final = "full-schedule.json"
SCHEDULE_FILENAME: Final = "cleaned_schedule.json"
ENTRIES_FILENAME: Final = "all-entries.json"
SUMMARY_FILENAME: Final = "all_countries_summary.json"

CALENDAR_URL_TEMPLATE: Final = "https://fabrice404.github.io/olympics-calendar/general/{code}.ics"

USER_AGENT_EMAIL: Final = os.environ.get("OLYMPICS_USER_AGENT_EMAIL", "")
DEFAULT_USER_AGENT: Final = f"OlympicEventScraper/1.0 ({USER_AGENT_EMAIL})"
DEFAULT_TIMEOUT: Final = 15  # seconds
MAX_RETRIES: Final = 3
INITIAL_BACKOFF: Final = 1.0  # seconds, doubled per attempt

# Similarity ratio (0..1) at which two athlete names are considered the same person
NAME_MATCH_THRESHOLD: Final = float(os.environ.get("OLYMPICS_NAME_MATCH_THRESHOLD", "0.7"))

DB_CHUNK_SIZE: Final = 1000

# Feed endpoints for `fetch`; empty means the documents are provided locally
SCHEDULE_URL: Final = os.environ.get("OLYMPICS_SCHEDULE_URL", "")
ENTRIES_URL: Final = os.environ.get("OLYMPICS_ENTRIES_URL", "")
