"""Centralized output filename utilities."""

from __future__ import annotations

import re

from config import settings
from config.countries import CountryConfig

_SANITIZE_PATTERN = re.compile(r"[^\w\s-]")
_WS_PATTERN = re.compile(r"[-\s]+")


def sanitize(value: str) -> str:
    value = _SANITIZE_PATTERN.sub("", value).strip()
    return _WS_PATTERN.sub("_", value)


def country_status_filename(country: CountryConfig) -> str:
    return f"{sanitize(country.file_stem)}_athletes_status.json"


def summary_filename() -> str:
    return settings.SUMMARY_FILENAME


def calendar_filename(country_code: str) -> str:
    return f"{sanitize(country_code)}.ics"


def results_dir() -> str:
    return settings.RESULTS_DIR
