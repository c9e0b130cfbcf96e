from datetime import datetime, timedelta

import pytest

from modules.input.time_constraint_parser import format_time_constraint, parse_time_constraint
from schemas.trip import ConstraintKind, Flexibility, TimeConstraint


@pytest.mark.parametrize("n", [1, 2, 3, 12])
def test_hours_duration(base_time, n):
    c = parse_time_constraint(f"get it done in {n} hours", base_time)
    assert c.kind == ConstraintKind.DURATION
    assert c.value == n * 60
    assert c.source_text == f"in {n} hours"
    assert c.flexibility == Flexibility.HARD


@pytest.mark.parametrize("n", [1, 15, 45, 90])
def test_minutes_duration(base_time, n):
    c = parse_time_constraint(f"get there in {n} minutes", base_time)
    assert c.kind == ConstraintKind.DURATION
    assert c.value == n


@pytest.mark.parametrize("phrase,expected", [
    ("in 2 hrs", 120),
    ("in 1 hr", 60),
    ("in 30 mins", 30),
    ("in 5 min", 5),
    ("within 20 minutes", 20),
])
def test_duration_unit_spellings(base_time, phrase, expected):
    assert parse_time_constraint(phrase, base_time).value == expected


def test_by_5pm_same_day(base_time):
    c = parse_time_constraint("arrive by 5pm", base_time)
    assert c.kind == ConstraintKind.DEADLINE
    assert c.value == datetime(2024, 1, 15, 17, 0)


def test_by_5pm_after_five_rolls_to_tomorrow():
    now = datetime(2024, 1, 15, 18, 0)
    c = parse_time_constraint("by 5pm", now)
    assert c.value == datetime(2024, 1, 16, 17, 0)


def test_deadline_with_minutes(base_time):
    c = parse_time_constraint("be there by 5:30pm", base_time)
    assert c.kind == ConstraintKind.DEADLINE
    assert (c.value.hour, c.value.minute) == (17, 30)


def test_before_keyword(base_time):
    c = parse_time_constraint("need to arrive before 6pm", base_time)
    assert c.kind == ConstraintKind.DEADLINE
    assert c.value.hour == 18


def test_24_hour_literal(base_time):
    c = parse_time_constraint("arrive by 17:30", base_time)
    assert c.value == datetime(2024, 1, 15, 17, 30)


def test_arrival_takes_priority_over_deadline(base_time):
    c = parse_time_constraint("arrive at home by 5:30pm", base_time)
    assert c.kind == ConstraintKind.ARRIVAL_AT_DESTINATION
    assert c.value == datetime(2024, 1, 15, 17, 30)
    assert c.destination == "home"


def test_arrival_with_multiword_location(base_time):
    c = parse_time_constraint("I have to be at the dentist office by 4pm", base_time)
    assert c.kind == ConstraintKind.ARRIVAL_AT_DESTINATION
    assert c.destination == "the dentist office"
    assert c.value.hour == 16


def test_duration_beats_deadline(base_time):
    c = parse_time_constraint("by 5pm or in 2 hours", base_time)
    assert c.kind == ConstraintKind.DURATION
    assert c.value == 120


def test_bare_hour_inferred_as_pm(base_time):
    c = parse_time_constraint("home by 5", base_time)
    assert c.value == datetime(2024, 1, 15, 17, 0)


def test_bare_hour_kept_am_before_that_hour():
    now = datetime(2024, 1, 15, 3, 0)
    c = parse_time_constraint("by 5", now)
    assert c.value == datetime(2024, 1, 15, 5, 0)


def test_bare_hour_without_inference_rolls_forward(base_time):
    c = parse_time_constraint("by 5", base_time, infer_meridiem=False)
    assert c.value == datetime(2024, 1, 16, 5, 0)


def test_zero_padded_hour_is_literal(base_time):
    c = parse_time_constraint("by 09:30", base_time)
    assert c.value == datetime(2024, 1, 16, 9, 30)


def test_twelve_am_is_midnight(base_time):
    c = parse_time_constraint("by 12am", base_time)
    assert c.value == datetime(2024, 1, 16, 0, 0)


def test_twelve_pm_is_noon():
    now = datetime(2024, 1, 15, 9, 0)
    c = parse_time_constraint("by 12pm", now)
    assert c.value == datetime(2024, 1, 15, 12, 0)


def test_never_in_the_past(base_time):
    for phrase in ("by 1pm", "by 14:59", "before 9am", "by 3pm"):
        c = parse_time_constraint(phrase, base_time)
        assert c.value >= base_time
        assert c.value - base_time < timedelta(days=1)


def test_no_constraint(base_time):
    assert parse_time_constraint("pick up groceries", base_time) is None


def test_numbers_that_are_not_times(base_time):
    assert parse_time_constraint("stop by 500 main street", base_time) is None
    assert parse_time_constraint("by 27", base_time) is None


def test_uppercase_meridiem(base_time):
    c = parse_time_constraint("BY 6 PM", base_time)
    assert c.value.hour == 18


def test_format_durations():
    def dur(v):
        return TimeConstraint(kind=ConstraintKind.DURATION, value=v, source_text="")

    assert format_time_constraint(dur(120)) == "2 hours"
    assert format_time_constraint(dur(60)) == "1 hour"
    assert format_time_constraint(dur(90)) == "1h 30m"
    assert format_time_constraint(dur(45)) == "45 minutes"
    assert format_time_constraint(dur(1)) == "1 minute"


def test_format_deadline():
    c = TimeConstraint(
        kind=ConstraintKind.DEADLINE,
        value=datetime(2024, 1, 15, 17, 0),
        source_text="by 5pm",
    )
    assert format_time_constraint(c) == "05:00 PM"


def test_hour_zero_never_inferred_as_pm(base_time):
    c = parse_time_constraint("by 0:30", base_time)
    assert c.value == datetime(2024, 1, 16, 0, 30)
