"""Resolve a raw phase code / label to the closest canonical phase of an event."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Generic, Iterable, TypeVar

from domain.codes import canonicalize

_log = logging.getLogger(__name__)

T = TypeVar("T")


class PhaseNotFoundError(LookupError):
    """Raised when there is no canonical phase to match against."""


@dataclass(frozen=True)
class PhaseMatch(Generic[T]):
    candidate: T
    code: str
    distance: int


def levenshtein(a: str, b: str) -> int:
    """Classic edit distance (insert / delete / substitute, unit cost)."""
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)
    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            cost = 0 if ca == cb else 1
            current.append(min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + cost))
        previous = current
    return previous[-1]


def best_phase_match(
    label: str, candidates: Iterable[T], code: Callable[[T], str] = lambda p: p.code  # type: ignore[attr-defined]
) -> PhaseMatch[T]:
    """Pick the candidate whose canonical code is nearest to ``label``.

    Both sides are canonicalized first. Equal distances resolve to the
    lexicographically smallest canonical code, then to candidate order.
    Raises PhaseNotFoundError when ``candidates`` is empty.
    """
    wanted = canonicalize(label)
    best: PhaseMatch[T] | None = None
    for candidate in candidates:
        candidate_code = canonicalize(code(candidate))
        distance = levenshtein(wanted, candidate_code)
        if (
            best is None
            or distance < best.distance
            or (distance == best.distance and candidate_code < best.code)
        ):
            best = PhaseMatch(candidate=candidate, code=candidate_code, distance=distance)
    if best is None:
        raise PhaseNotFoundError(f"No canonical phases to match '{label}' against")
    _log.debug("Phase '%s' matched '%s' (distance %d)", wanted, best.code, best.distance)
    return best
