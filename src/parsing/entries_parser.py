"""Parsing of the athlete entries feed (``{"persons": [...]}``)."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

from domain.codes import canonicalize
from domain.models import AthleteEntry, Entries, RegisteredEvent
from parsing.errors import MalformedDocumentError, MissingFieldError
from parsing.schedule_parser import load_document


def parse_registered_event(raw: Mapping[str, Any], *, person: str) -> RegisteredEvent:
    event = raw.get("event") or {}
    code = canonicalize(event.get("code"))
    if not code:
        raise MissingFieldError("Registered event without code", context={"person": person})
    return RegisteredEvent(code=code, description=str(event.get("description") or "").strip())


def parse_person(raw: Mapping[str, Any], *, index: int = 0) -> AthleteEntry:
    name = str(raw.get("name") or "").strip()
    if not name:
        raise MissingFieldError(f"Person #{index} lacks 'name'", context={"index": index})
    organisation = raw.get("organisation") or {}
    org_code = str(organisation.get("code") or "").strip()
    if not org_code:
        raise MissingFieldError(
            f"Person '{name}' lacks 'organisation.code'", context={"index": index, "person": name}
        )
    events = [parse_registered_event(e, person=name) for e in raw.get("registeredEvents") or []]
    return AthleteEntry(name=name, organisation_code=org_code, registered_events=events)


def parse_entries(source: str | bytes | Mapping[str, Any]) -> Entries:
    document = load_document(source, feed="entries")
    persons = document.get("persons")
    if not isinstance(persons, list):
        raise MalformedDocumentError("entries document has no 'persons' list", context={"feed": "entries"})
    return Entries(persons=[parse_person(p, index=i) for i, p in enumerate(persons)])


def load_entries(path: str | Path) -> Entries:
    return parse_entries(Path(path).read_text(encoding="utf-8"))
