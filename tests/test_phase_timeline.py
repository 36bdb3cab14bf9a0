from domain.models import FINISHED, Phase
from tracking.phase_timeline import TimelineState, build_timeline, event_phases
from utils.date_utils import parse_timestamp

from factories import FUTURE, PAST, competitor, make_schedule, phase, unit


def _phase(description, start=None, status="SCHEDULED"):
    return Phase(description=description, status=status, start_text=start, start_date=parse_timestamp(start))


def test_finished_phases_are_skipped_even_if_dated_later():
    qualification = _phase("Qualification", "2024-08-01T09:00:00Z", FINISHED)
    semifinal = _phase("Semifinal", "2024-08-02T09:00:00Z")
    late_finished = _phase("Exhibition", "2024-08-09T09:00:00Z", FINISHED)
    timeline = build_timeline([late_finished, semifinal, qualification])
    assert timeline.current() is semifinal
    assert timeline.event_details().phase == "Semifinal"
    assert timeline.event_details().next_date == "2024-08-02T09:00:00Z"


def test_current_is_earliest_pending_phase():
    heats = _phase("Heats", "2024-08-02T09:00:00Z")
    final = _phase("Final", "2024-08-04T20:00:00Z")
    timeline = build_timeline([final, heats])
    assert timeline.current() is heats
    assert timeline.latest_not_finished() is final


def test_undated_phases_sort_last_in_both_directions():
    undated = _phase("Repechage")
    dated = _phase("Semifinal", "2024-08-02T09:00:00Z")
    timeline = build_timeline([undated, dated])
    assert timeline.current() is dated
    assert timeline.latest_not_finished() is dated
    assert timeline.pending == [dated, undated]


def test_only_undated_pending_phases():
    first = _phase("Round 1", "TBD")
    second = _phase("Round 2")
    timeline = build_timeline([first, second])
    assert timeline.latest_not_finished() is first
    assert timeline.event_details().next_date == "TBD"


def test_sentinels():
    empty = build_timeline([])
    assert empty.current() is TimelineState.UNSCHEDULED
    assert empty.latest_not_finished() is None
    assert empty.event_details().phase == "Unscheduled"
    assert empty.event_details().next_date == "TBD"

    done = build_timeline([_phase("Final", "2024-08-01T09:00:00Z", FINISHED)])
    assert done.current() is TimelineState.FINISHED
    assert done.event_details().phase == "Finished"
    assert done.event_details().next_date == "TBD"


def test_medal_round_detection():
    assert build_timeline([_phase("Heats"), _phase("Gold Medal Match")]).has_medal_round
    assert build_timeline([_phase("Semi-final")]).has_medal_round
    assert not build_timeline([_phase("Heats"), _phase("Repechage")]).has_medal_round


def test_units_stand_for_phases_without_embedded_phases():
    schedule = make_schedule(
        unit("U1", "E1", "Heat 1", competitors=[competitor("Ann Lee")], phase_id="E1-HEAT"),
        unit("U2", "E1", "Final", start="2024-08-05T10:00:00Z"),
    )
    phases = event_phases(schedule.units_for_event("E1"))
    assert [p.description for p in phases] == ["Heat 1", "Final"]
    assert phases[0].code == "E1HEAT"
    assert [c.name for c in phases[0].competitors] == ["Ann Lee"]
    assert phases[1].code is None


def test_embedded_phases_take_rosters_from_their_own_units():
    schedule = make_schedule(
        unit("U1", "E1", "Session 1", competitors=[competitor("Ann Lee")], phases=[phase("Semifinal")]),
        unit(
            "U2",
            "E1",
            "Semifinal 2",
            competitors=[competitor("Bob Ray", noc="SWE"), competitor("Ann Lee")],
            phases=[phase("semifinal"), phase("Final", competitors=[competitor("Cy Dunn", noc="BEL")])],
        ),
    )
    phases = event_phases(schedule.units_for_event("E1"))
    assert [p.description for p in phases] == ["Semifinal", "Final"]
    assert [c.name for c in phases[0].competitors] == ["Ann Lee", "Bob Ray"]
    assert [c.name for c in phases[1].competitors] == ["Cy Dunn"]


def _shared_phases():
    return [phase("Heats", status=FINISHED, start=PAST), phase("Final", start=FUTURE)]


def test_session_units_sharing_a_phase_list_keep_separate_rosters():
    schedule = make_schedule(
        unit("U1", "E1", "Heats", status=FINISHED, start=PAST,
             competitors=[competitor("Ann Lee"), competitor("Bob Ray")], phases=_shared_phases()),
        unit("U2", "E1", "Final", competitors=[competitor("Bob Ray")], phases=_shared_phases()),
    )
    heats, final = event_phases(schedule.units_for_event("E1"))
    assert [c.name for c in heats.competitors] == ["Ann Lee", "Bob Ray"]
    assert [c.name for c in final.competitors] == ["Bob Ray"]


def test_unit_phase_id_selects_the_embedded_phase():
    phases = [{**phase("Heats", status=FINISHED, start=PAST), "code": "E1-HT"}, {**phase("Final"), "code": "E1-FNL"}]
    schedule = make_schedule(
        unit("U1", "E1", "Session 7", phase_id="E1-FNL", competitors=[competitor("Bob Ray")], phases=phases),
    )
    heats, final = event_phases(schedule.units_for_event("E1"))
    assert heats.competitors == []
    assert [c.name for c in final.competitors] == ["Bob Ray"]


def test_unit_matching_no_embedded_phase_stands_alone():
    schedule = make_schedule(
        unit("U1", "E1", "Medal Ceremony", competitors=[competitor("Bob Ray")], phases=_shared_phases()),
    )
    phases = event_phases(schedule.units_for_event("E1"))
    assert [p.description for p in phases] == ["Heats", "Final", "Medal Ceremony"]
    assert [c.name for c in phases[2].competitors] == ["Bob Ray"]
    assert phases[1].competitors == []
