"""Structured errors raised at the feed ingestion boundary."""

from __future__ import annotations
from typing import Any


class ParsingError(Exception):
    """Base class for feed parsing issues."""

    def __init__(self, message: str, *, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.context = context or {}


class MalformedDocumentError(ParsingError):
    """Raised when a feed document is not JSON or lacks its top-level collection."""


class MissingFieldError(ParsingError):
    """Raised when a record lacks a field required to join it (code, name...)."""


class CalendarParseError(ParsingError):
    """Raised when an iCalendar payload cannot be read."""
