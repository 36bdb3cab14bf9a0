from domain.models import Competitor
from services.name_matcher import NameMatcher, SequenceMatcherNameMatcher, default_matcher, fold_tokens


def test_fold_tokens_removes_diacritics_and_punctuation():
    assert fold_tokens("Jöhn  DOE-Smith") == ["john", "doe", "smith"]
    assert fold_tokens("J. Doe") == ["j", "doe"]
    assert fold_tokens("") == []


def test_spelling_variants_match():
    m = SequenceMatcherNameMatcher(threshold=0.7)
    for variant in ("John Doe", "Jöhn Doe", "DOE John", "J. Doe", "John Michael Doe"):
        assert m.similarity(variant, "John Doe") >= 0.7, variant


def test_unrelated_names_do_not_match():
    m = SequenceMatcherNameMatcher(threshold=0.7)
    assert m.match("Ann Lee", [Competitor("Peter Kowalski")]) == []
    assert not m.contains("Ann Lee", [Competitor("Peter Kowalski")])


def test_empty_name_never_matches():
    m = SequenceMatcherNameMatcher()
    assert m.similarity("", "John Doe") == 0.0


def test_threshold_is_inclusive():
    probe = SequenceMatcherNameMatcher()
    score = probe.similarity("Jon Doe", "John Doe")
    assert 0 < score < 1
    m = SequenceMatcherNameMatcher(threshold=score)
    assert m.contains("Jon Doe", [Competitor("John Doe")])


def test_match_orders_best_first_and_is_stable():
    m = SequenceMatcherNameMatcher(threshold=0.7)
    near = Competitor("Jon Doe", noc="USA")
    exact = Competitor("John Doe", noc="KEN")
    exact_twin = Competitor("John Doe", noc="SWE")
    assert m.match("John Doe", [near, exact, exact_twin]) == [exact, exact_twin, near]


def test_match_with_custom_key():
    m = SequenceMatcherNameMatcher(threshold=0.7)
    rows = [{"athlete": "Ann Lee"}, {"athlete": "John Doe"}]
    assert m.match("DOE John", rows, key=lambda r: r["athlete"]) == [{"athlete": "John Doe"}]


def test_default_matcher_uses_configured_threshold(monkeypatch):
    monkeypatch.setattr("config.settings.NAME_MATCH_THRESHOLD", 0.9)
    matcher = default_matcher()
    assert matcher.threshold == 0.9
    assert isinstance(matcher, NameMatcher)


def test_shared_surname_with_different_first_name_does_not_match():
    m = SequenceMatcherNameMatcher(threshold=0.7)
    for a, b in (("A. Doe", "B. Doe"), ("John Doe", "Jane Doe"), ("Ann Lee", "Dan Lee")):
        assert m.similarity(a, b) < 0.7, (a, b)
    dan, ann = Competitor("Dan Lee"), Competitor("Ann Lee")
    assert m.match("Ann Lee", [dan, ann]) == [ann]
    assert not m.contains("A. Doe", [Competitor("B. Doe")])


def test_initial_pairs_with_the_first_name_in_any_order():
    m = SequenceMatcherNameMatcher(threshold=0.7)
    assert m.similarity("D. Doe", "Doe Dan") == 1.0
    assert m.similarity("DOE J.", "John Doe") == 1.0
