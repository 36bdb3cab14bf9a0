import pytest

from domain.models import FINISHED
from parsing.errors import MalformedDocumentError, MissingFieldError, ParsingError
from parsing.schedule_parser import load_schedule, parse_schedule

from factories import competitor, make_schedule, phase, unit


def test_parse_schedule_builds_typed_units():
    schedule = make_schedule(
        unit(
            "ATH-M-100M-FNL",
            "ATH-M-100M---",
            "Men's 100m Final",
            status=FINISHED,
            start="2024-08-04T19:50:00Z",
            competitors=[competitor("Ann Lee", code="12-3", results={"position": "1", "medalType": "ME_GOLD"})],
            phase_id="ATH-M-100M-FNL",
            venue="Stade de France",
        )
    )
    (u,) = schedule.units
    assert u.id == "ATHM100MFNL"
    assert u.event_id == "ATHM100M"
    assert u.status == FINISHED
    assert u.start_date is not None and u.start_date.hour == 19
    assert u.attributes["venue"] == "Stade de France"
    assert "competitors" not in u.attributes
    c = u.competitors[0]
    assert c.code == "123"
    assert c.results is not None and c.results.medal_type == "ME_GOLD"


def test_schedule_is_indexed_by_canonical_event_code():
    schedule = make_schedule(unit("A1", "SWM-100", "Heat 1"), unit("A2", "SWM100", "Heat 2"), unit("B1", "ATH", "x"))
    assert [u.id for u in schedule.units_for_event("SWM100")] == ["A1", "A2"]
    assert schedule.has_event("ATH")
    assert not schedule.has_event("SWM-100")


def test_embedded_phases_parsed():
    schedule = make_schedule(
        unit("A1", "E1", "Session", phases=[phase("Semifinal", competitors=[competitor("Ann Lee")])])
    )
    (p,) = schedule.units[0].phases
    assert p.description == "Semifinal"
    assert p.competitors[0].name == "Ann Lee"


def test_tbd_start_is_unknown():
    schedule = make_schedule(unit("A1", "E1", "Final", start="TBD"))
    assert schedule.units[0].start_date is None
    assert schedule.units[0].start_text == "TBD"


def test_invalid_json_is_malformed():
    with pytest.raises(MalformedDocumentError):
        parse_schedule("{not json")


def test_missing_units_list_is_malformed():
    with pytest.raises(MalformedDocumentError):
        parse_schedule('{"items": []}')
    with pytest.raises(MalformedDocumentError):
        parse_schedule("[]")


def test_unit_without_event_id_is_rejected():
    with pytest.raises(MissingFieldError) as exc:
        parse_schedule({"units": [{"id": "X1", "eventUnitName": "Final"}]})
    assert exc.value.context["field"] == "eventId"


def test_competitor_without_name_is_rejected():
    with pytest.raises(ParsingError):
        parse_schedule({"units": [unit("A1", "E1", "Final", competitors=[{"noc": "KEN"}])]})


def test_load_schedule_from_file(tmp_path):
    path = tmp_path / "full-schedule.json"
    path.write_text('{"units": [{"id": "A-1", "eventId": "E-1", "eventUnitName": "Final"}]}', encoding="utf-8")
    schedule = load_schedule(path)
    assert schedule.units[0].event_id == "E1"
