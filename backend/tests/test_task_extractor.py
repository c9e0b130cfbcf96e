import pytest

from modules.input.task_extractor import TASK_RULES, extract_tasks
from schemas.trip import Priority, TaskCategory


def categories(text):
    return [t.category for t in extract_tasks(text)]


def test_kids_and_groceries_in_message_order():
    tasks = extract_tasks("pick up the kids and pick up groceries for the house in 2 hrs")
    assert [t.category for t in tasks] == [TaskCategory.SCHOOL, TaskCategory.GROCERY]
    assert tasks[0].priority == Priority.HIGH
    assert tasks[0].estimated_duration_minutes == 5
    assert tasks[1].estimated_duration_minutes == 20


def test_order_follows_message_not_rule_table():
    tasks = extract_tasks("grab coffee, then pick up my daughter")
    assert [t.category for t in tasks] == [TaskCategory.COFFEE, TaskCategory.SCHOOL]


def test_cuisine_restaurant_is_a_single_task():
    tasks = extract_tasks("take me to a chinese restaurant")
    assert len(tasks) == 1
    assert tasks[0].category == TaskCategory.RESTAURANT
    assert tasks[0].description == "Chinese restaurant"


def test_bare_restaurant():
    tasks = extract_tasks("somewhere for dinner")
    assert len(tasks) == 1
    assert tasks[0].description == "Restaurant"


def test_groceries_claims_food():
    assert categories("grab some food on the way") == [TaskCategory.GROCERY]


def test_supermarket_phrasing():
    tasks = extract_tasks("route me to the supermarket")
    assert len(tasks) == 1
    assert tasks[0].category == TaskCategory.GROCERY


def test_repeated_phrase_deduplicated():
    assert categories("get coffee and get coffee") == [TaskCategory.COFFEE]


@pytest.mark.parametrize("text,category,minutes", [
    ("drop at the post office", TaskCategory.POST_OFFICE, 10),
    ("swing by the pharmacy", TaskCategory.PHARMACY, 10),
    ("need to get gas", TaskCategory.GAS, 5),
    ("hit the atm", TaskCategory.BANK, 15),
    ("quick workout", TaskCategory.GYM, 60),
])
def test_service_rules(text, category, minutes):
    tasks = extract_tasks(text)
    assert len(tasks) == 1
    assert tasks[0].category == category
    assert tasks[0].estimated_duration_minutes == minutes


def test_pharmacy_is_high_priority():
    assert extract_tasks("pick up my medicine")[0].priority == Priority.HIGH


def test_generic_stop():
    tasks = extract_tasks("stop at the dry cleaner and get gas")
    assert [t.category for t in tasks] == [TaskCategory.GENERIC, TaskCategory.GAS]
    generic = tasks[0]
    assert generic.description == "dry cleaner"
    assert generic.location == "dry cleaner"
    assert generic.estimated_duration_minutes == 10


def test_generic_skipped_when_specific_rule_covers_it():
    tasks = extract_tasks("go to the supermarket")
    assert len(tasks) == 1
    assert tasks[0].category == TaskCategory.GROCERY


def test_home_is_not_a_stop():
    assert extract_tasks("stop at home") == []


def test_no_tasks():
    assert extract_tasks("just drive") == []


def test_matched_keywords_record_source_text():
    task = extract_tasks("Please Pick Up The Kids")[0]
    assert task.matched_keywords == ("Pick Up The Kids",)


def test_rule_names_unique():
    names = [r.name for r in TASK_RULES]
    assert len(names) == len(set(names))


def test_generic_stop_survives_a_claimed_keyword_after_it():
    tasks = extract_tasks("stop at the library for dinner")
    assert [(t.category, t.description) for t in tasks] == [
        (TaskCategory.GENERIC, "library"),
        (TaskCategory.RESTAURANT, "Restaurant"),
    ]
    assert tasks[0].matched_keywords == ("stop at the library",)


def test_generic_phrase_cut_at_claimed_keyword():
    tasks = extract_tasks("stop at the school to pick up the kids")
    assert [(t.category, t.description) for t in tasks] == [
        (TaskCategory.GENERIC, "school"),
        (TaskCategory.SCHOOL, "Pick up kids"),
    ]
