from datetime import datetime, timezone

import pytest

from parsing.calendar_parser import parse_calendar, parse_event_and_phase, sort_by_start
from parsing.errors import CalendarParseError

from factories import ICS, KENYA, NEW_ZEALAND


@pytest.mark.parametrize(
    "details, expected",
    [
        ("Men's Individual 1/32 Elimination Round", ("Men's Individual", "1/32 Elimination Round", False)),
        ("Women's Team Placing 5-8", ("Women's Team", "Placing 5-8", True)),
        ("Men's Singles Quarterfinal", ("Men's Singles", "Quarterfinal", False)),
        ("Women's 100m Semifinal", ("Women's 100m", "Semifinal", False)),
        ("Men's Preliminary Round - Group B", ("Men's - Group B", "Preliminary Round", False)),
        ("Women's Individual Ranking Round", ("Women's Individual", "Ranking Round", True)),
        ("Opening Ceremony", ("Opening Ceremony", "N/A", False)),
    ],
)
def test_parse_event_and_phase(details, expected):
    assert parse_event_and_phase(details) == expected


def test_parse_calendar_events():
    events = parse_calendar(ICS, KENYA)
    assert len(events) == 2
    archery = events[0]
    assert archery.country == "Kenya"
    assert archery.sport == "Archery"
    assert archery.event == "Men's Individual"
    assert archery.phase == "1/32 Elimination Round"
    assert archery.athletes == ["DOE John"]
    assert archery.location == "Invalides"
    assert archery.start_time == datetime(2024, 7, 30, 9, 0, tzinfo=timezone.utc)
    hockey = events[1]
    assert hockey.cannot_win_medal
    assert hockey.athletes == []


def test_country_name_renders_with_spaces():
    events = parse_calendar(ICS, NEW_ZEALAND)
    assert {e.country for e in events} == {"New Zealand"}
    assert events[0].athletes == []


def test_sort_by_start_is_chronological():
    events = sort_by_start(parse_calendar(ICS, KENYA))
    assert [e.sport for e in events] == ["Hockey", "Archery"]
    assert events[0].to_dict()["startTime"] == "2024-07-27T07:30:00+00:00"
    assert events[0].to_dict()["cannotWinMedal"] is True


def test_invalid_payload_raises():
    with pytest.raises(CalendarParseError):
        parse_calendar("not a calendar", KENYA)
