from datetime import datetime

import pytest

import config
from modules.tool_usage.clock import FixedClock
from schemas.trip import LatLng, Priority, RouteLeg, Task, TaskCategory


def make_leg(minutes: float, miles: float = 1.0, start=(0.0, 0.0), end=(0.0, 0.0)) -> RouteLeg:
    return RouteLeg(
        distance_meters=miles * config.METERS_PER_MILE,
        duration_seconds=minutes * 60,
        start_location=LatLng(*start),
        end_location=LatLng(*end),
    )


def make_task(category: TaskCategory, minutes: int, description: str = "") -> Task:
    return Task(
        description=description or category.value,
        category=category,
        priority=Priority.MEDIUM,
        estimated_duration_minutes=minutes,
        matched_keywords=(description or category.value,),
    )


@pytest.fixture
def base_time():
    return datetime(2024, 1, 15, 15, 0)  # 3:00 PM


@pytest.fixture
def clock(base_time):
    return FixedClock(base_time)
