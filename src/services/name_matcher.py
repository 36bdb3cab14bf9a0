"""Approximate athlete / team name matching.

Feeds spell the same person differently: ``"J. Doe"``, ``"DOE John"``,
``"John Michael Doe"``, ``"Jöhn Doe"``. Names are folded to lower-case ASCII
tokens. When both names have at least two tokens, each token of the shorter
name is paired with a distinct token of the longer one (an initial pairs with
any token starting with it) and the weakest pairing is the similarity, so
"A. Doe" and "B. Doe" stay apart. Otherwise the similarity is the best of the
whole-string and sorted-token ratios. A candidate matches when its similarity
reaches the threshold.

``NameMatcher`` is the capability the resolver depends on, so the strategy can
be swapped (e.g. a Jaro-Winkler implementation) without touching callers.
"""

from __future__ import annotations

import difflib
import re
import unicodedata
from typing import Callable, Iterable, List, Protocol, Sequence, TypeVar, runtime_checkable

from config import settings

T = TypeVar("T")

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")


@runtime_checkable
class NameMatcher(Protocol):
    threshold: float

    def similarity(self, a: str, b: str) -> float: ...

    def match(self, query: str, candidates: Iterable[T], key: Callable[[T], str] = ...) -> List[T]: ...


def fold_tokens(name: str) -> List[str]:
    """Lower-case ASCII tokens with diacritics removed."""
    decomposed = unicodedata.normalize("NFKD", name or "")
    ascii_only = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return [t for t in _NON_ALNUM_RE.split(ascii_only.lower()) if t]


def _ratio(a: str, b: str) -> float:
    return difflib.SequenceMatcher(None, a, b).ratio()


def _token_similarity(a: str, b: str) -> float:
    if len(a) == 1 or len(b) == 1:
        # initial against a full token
        return 1.0 if a[0] == b[0] else 0.0
    return _ratio(a, b)


def _subset_score(shorter: Sequence[str], longer: Sequence[str]) -> float:
    """Weakest pairing of each shorter-name token with a distinct longer-name token.

    Full tokens are paired before initials.
    """
    remaining = list(longer)
    weakest = 1.0
    for token in sorted(shorter, key=len, reverse=True):
        best_idx, best = -1, 0.0
        for idx, other in enumerate(remaining):
            score = _token_similarity(token, other)
            if score > best:
                best_idx, best = idx, score
        if best_idx < 0:
            return 0.0
        remaining.pop(best_idx)
        weakest = min(weakest, best)
    return weakest


class SequenceMatcherNameMatcher:
    """``NameMatcher`` backed by ``difflib.SequenceMatcher`` ratios."""

    def __init__(self, threshold: float | None = None) -> None:
        self.threshold = settings.NAME_MATCH_THRESHOLD if threshold is None else threshold

    def similarity(self, a: str, b: str) -> float:
        ta, tb = fold_tokens(a), fold_tokens(b)
        if not ta or not tb:
            return 0.0
        whole = _ratio(" ".join(ta), " ".join(tb))
        if whole == 1.0:
            return whole
        shorter, longer = (ta, tb) if len(ta) <= len(tb) else (tb, ta)
        if len(shorter) >= 2:
            # every token has to agree; a shared surname alone is not the same person
            return _subset_score(shorter, longer)
        return max(whole, _ratio(" ".join(sorted(ta)), " ".join(sorted(tb))))

    def match(
        self, query: str, candidates: Iterable[T], key: Callable[[T], str] = lambda c: c.name  # type: ignore[attr-defined]
    ) -> List[T]:
        """Return candidates scoring at or above the threshold, best first.

        An empty list means no match; equal scores keep candidate order.
        """
        scored = []
        for idx, candidate in enumerate(candidates):
            score = self.similarity(query, key(candidate))
            if score >= self.threshold:
                scored.append((-score, idx, candidate))
        scored.sort(key=lambda item: (item[0], item[1]))
        return [candidate for _, _, candidate in scored]

    def contains(
        self, query: str, candidates: Iterable[T], key: Callable[[T], str] = lambda c: c.name  # type: ignore[attr-defined]
    ) -> bool:
        return bool(self.match(query, candidates, key))


def default_matcher() -> SequenceMatcherNameMatcher:
    return SequenceMatcherNameMatcher()
