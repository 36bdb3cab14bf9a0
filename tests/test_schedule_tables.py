import pytest

from services.schedule_tables import build_tables, chunked, resolve_unit_phases

from factories import make_schedule, tables_schedule, unit


def test_build_tables_deduplicates_by_code():
    tables = build_tables(tables_schedule())
    assert tables.counts() == {
        "disciplines": 2,
        "events": 2,
        "phases": 2,
        "event_units": 3,
        "competitors": 3,
        "results": 1,
    }
    assert tables.events[0] == {
        "code": "SWMW100MFR",
        "name": "Women's 100m Freestyle",
        "gender_code": None,
        "event_order": None,
        "discipline_code": "SWM",
    }
    assert tables.phases[0]["code"] == "SWMW100MFRHEAT"
    assert tables.phases[0]["event_code"] == "SWMW100MFR"


def test_competitor_and_result_ids():
    tables = build_tables(tables_schedule())
    assert [c["id"] for c in tables.competitors] == ["SWM1-0", "SWM1-1", "SWM2-0"]
    assert tables.competitors[0]["code"] == "12"
    assert tables.results == [
        {
            "id": "SWM1-0-result",
            "competitor_id": "SWM1-0",
            "event_unit_code": "SWM1",
            "position": "1",
            "mark": "53.10",
            "medal_type": None,
            "irm": None,
            "winner_loser_tie": None,
        }
    ]


def test_resolve_unit_phases_reports_events_without_phases():
    schedule = tables_schedule()
    resolution = resolve_unit_phases(schedule.units, [{"code": "SWMW100MFR-HEAT", "event_code": "SWMW100MFR"}])
    assert resolution.phase_codes == {"SWM1": "SWMW100MFRHEAT", "SWM2": "SWMW100MFRHEAT"}
    assert resolution.errors == ["No phases found for event ATHM100M (unit ATH1)"]


def test_resolve_unit_phases_picks_nearest_phase_of_same_event():
    schedule = make_schedule(unit("U-1", "E1", "Heat 1", phase_id="E1-HEAT-01"))
    phases = [
        {"code": "E1FNL", "event_code": "E1"},
        {"code": "E1HEAT", "event_code": "E1"},
        {"code": "E1HEAT01", "event_code": "E2"},
    ]
    assert resolve_unit_phases(schedule.units, phases).phase_codes == {"U1": "E1HEAT"}


def test_chunked():
    assert [list(c) for c in chunked([1, 2, 3, 4, 5], 2)] == [[1, 2], [3, 4], [5]]
    assert list(chunked([], 3)) == []
    with pytest.raises(ValueError):
        list(chunked([1], 0))
