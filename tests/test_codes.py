from domain.codes import canonicalize, clean_schedule, clean_unit, same_code


def test_canonicalize_strips_separators():
    assert canonicalize("ATHM100M----------FNL-000100--") == "ATHM100MFNL000100"
    assert canonicalize("SWMW4X100MMED------------") == "SWMW4X100MMED"


def test_canonicalize_is_idempotent():
    for raw in ("A-B--C", "ABC", "", "--", "X-1-"):
        once = canonicalize(raw)
        assert canonicalize(once) == once


def test_canonicalize_missing_code():
    assert canonicalize(None) == ""
    assert canonicalize("") == ""


def test_same_code_ignores_formatting():
    assert same_code("ARC-M-IND--", "ARCMIND")
    assert not same_code("ARCMIND", "ARCWIND")


def test_clean_unit_canonicalizes_join_keys_only():
    raw = {
        "id": "ATH-M-100M-FNL-01",
        "eventId": "ATH-M-100M",
        "phaseId": "ATH-M-100M-FNL",
        "disciplineId": "ATH-",
        "eventUnitName": "Men's 100m - Final",
        "competitors": [{"name": "Ann Lee", "code": "1-234-5"}],
    }
    cleaned = clean_unit(raw)
    assert cleaned["id"] == "ATHM100MFNL01"
    assert cleaned["eventId"] == "ATHM100M"
    assert cleaned["phaseId"] == "ATHM100MFNL"
    assert cleaned["disciplineId"] == "ATH"
    assert cleaned["eventUnitName"] == "Men's 100m - Final"
    assert cleaned["competitors"][0]["code"] == "12345"
    # input untouched
    assert raw["id"] == "ATH-M-100M-FNL-01"


def test_clean_schedule_keeps_other_top_level_keys():
    doc = {"units": [{"id": "A-1", "eventId": "A-"}], "generated": "2024-07-01"}
    cleaned = clean_schedule(doc)
    assert cleaned["generated"] == "2024-07-01"
    assert cleaned["units"] == [{"id": "A1", "eventId": "A"}]
