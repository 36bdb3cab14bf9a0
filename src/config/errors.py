"""Errors for invalid run configuration (unknown countries, missing feed URLs)."""

from __future__ import annotations


class ConfigurationError(Exception):
    """Raised when the requested run cannot be configured from the given options."""
