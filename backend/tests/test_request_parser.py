from datetime import datetime

from modules.input.request_parser import parse_request
from schemas.trip import ConstraintKind, TaskCategory


def test_full_request(base_time):
    parsed = parse_request("pick up the kids and pick up groceries for the house in 2 hrs", base_time)
    assert parsed.has_time_constraint
    assert parsed.time_constraint.kind == ConstraintKind.DURATION
    assert parsed.time_constraint.value == 120
    assert [t.category for t in parsed.tasks] == [TaskCategory.SCHOOL, TaskCategory.GROCERY]
    assert parsed.original_message.startswith("pick up the kids")


def test_destination_from_arrival_constraint(base_time):
    parsed = parse_request("get coffee and be at the gym by 6pm", base_time)
    assert parsed.time_constraint.kind == ConstraintKind.ARRIVAL_AT_DESTINATION
    assert parsed.time_constraint.value == datetime(2024, 1, 15, 18, 0)
    assert parsed.destination == "the gym"


def test_home_hint_wins_over_constraint(base_time):
    parsed = parse_request("arrive at home by 5:30pm", base_time)
    assert parsed.destination == "home"


def test_no_constraint(base_time):
    parsed = parse_request("stop at the bakery", base_time)
    assert not parsed.has_time_constraint
    assert parsed.time_constraint is None
    assert len(parsed.tasks) == 1


def test_to_dict_is_serialisable(base_time):
    d = parse_request("by 5pm get gas", base_time).to_dict()
    assert d["time_constraint"]["kind"] == "deadline"
    assert d["tasks"][0]["category"] == "gas"
