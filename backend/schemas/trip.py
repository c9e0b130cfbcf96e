"""
schemas/trip.py
---------------
Value objects for an errand trip: what the user asked for, the route the
directions service returned, and what the planner made of it.

All dataclasses are frozen and built fresh per request.

Units: minutes for time, miles for planner-side distance.  RouteLeg keeps
the directions service's meters/seconds and exposes converted properties.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Mapping, Optional, Union

import config


# ─────────────────────────────────────────────────────────────────────────────
# Enums
# ─────────────────────────────────────────────────────────────────────────────

class ConstraintKind(str, Enum):
    DURATION = "duration"
    DEADLINE = "deadline"
    ARRIVAL_AT_DESTINATION = "arrival_time"


class Flexibility(str, Enum):
    HARD = "hard"
    SOFT = "soft"   # reserved; the parser only emits HARD


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class TaskCategory(str, Enum):
    SCHOOL = "school"
    GROCERY = "grocery"
    RESTAURANT = "restaurant"
    COFFEE = "coffee"
    POST_OFFICE = "post_office"
    PHARMACY = "pharmacy"
    GAS = "gas"
    BANK = "bank"
    GYM = "gym"
    GENERIC = "generic"


class StepKind(str, Enum):
    DRIVE = "drive"
    STOP = "stop"


class Feasibility(str, Enum):
    FEASIBLE = "feasible"
    TIGHT = "tight"
    IMPOSSIBLE = "impossible"


# ─────────────────────────────────────────────────────────────────────────────
# Parsed request
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class TimeConstraint:
    """
    The single time constraint recovered from a request.

    value is whole minutes for DURATION and an absolute instant for DEADLINE
    and ARRIVAL_AT_DESTINATION.  Instants are never earlier than the clock
    reading used to parse them.
    """
    kind: ConstraintKind
    value: Union[int, datetime]
    source_text: str
    flexibility: Flexibility = Flexibility.HARD
    destination: Optional[str] = None     # ARRIVAL_AT_DESTINATION only

    @property
    def is_absolute(self) -> bool:
        return self.kind is not ConstraintKind.DURATION

    def to_dict(self) -> dict:
        value = self.value.isoformat() if isinstance(self.value, datetime) else self.value
        return {
            "kind": self.kind.value,
            "value": value,
            "source_text": self.source_text,
            "flexibility": self.flexibility.value,
            "destination": self.destination,
        }


@dataclass(frozen=True)
class Task:
    """A required stop, as recognised from the request text."""
    description: str
    category: TaskCategory
    priority: Priority
    estimated_duration_minutes: int
    matched_keywords: tuple[str, ...] = ()
    location: Optional[str] = None        # GENERIC only ("stop at the library")

    def to_dict(self) -> dict:
        return {
            "description": self.description,
            "category": self.category.value,
            "priority": self.priority.value,
            "estimated_duration_minutes": self.estimated_duration_minutes,
            "matched_keywords": list(self.matched_keywords),
            "location": self.location,
        }


@dataclass(frozen=True)
class LocationHints:
    origin: Optional[str] = None
    destination: Optional[str] = None


@dataclass(frozen=True)
class ParsedRequest:
    original_message: str
    tasks: tuple[Task, ...] = ()
    time_constraint: Optional[TimeConstraint] = None
    origin: Optional[str] = None
    destination: Optional[str] = None

    @property
    def has_time_constraint(self) -> bool:
        return self.time_constraint is not None

    def to_dict(self) -> dict:
        return {
            "original_message": self.original_message,
            "tasks": [t.to_dict() for t in self.tasks],
            "time_constraint": self.time_constraint.to_dict() if self.time_constraint else None,
            "has_time_constraint": self.has_time_constraint,
            "origin": self.origin,
            "destination": self.destination,
        }


# ─────────────────────────────────────────────────────────────────────────────
# Route (consumed read-only from the directions service)
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class LatLng:
    lat: float
    lng: float

    def to_dict(self) -> dict:
        return {"lat": self.lat, "lng": self.lng}


@dataclass(frozen=True)
class RouteLeg:
    """One origin-to-waypoint driving segment."""
    distance_meters: float
    duration_seconds: float
    start_location: LatLng
    end_location: LatLng

    @property
    def duration_minutes(self) -> float:
        return self.duration_seconds / 60.0

    @property
    def distance_miles(self) -> float:
        return self.distance_meters / config.METERS_PER_MILE


# ─────────────────────────────────────────────────────────────────────────────
# Budget / allocation
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class DwellAllocation:
    """
    Per-task dwell minutes keyed by task key.

    ratio is the unscaled dwell / typical ratio; compressed is set when it
    fell below config.COMPRESSION_WARN_RATIO.
    """
    minutes: Mapping[str, int] = field(default_factory=dict)
    ratio: float = 1.0
    compressed: bool = False

    @property
    def total(self) -> int:
        return sum(self.minutes.values())


@dataclass(frozen=True)
class TimeBudget:
    """
    total_available = driving + buffer + dwell.

    dwell may be negative; that is the infeasibility signal, not an error.
    """
    total_available_minutes: float
    driving_minutes: float
    buffer_minutes: float
    dwell_minutes: float
    allocations: Mapping[str, int] = field(default_factory=dict)
    compressed: bool = False

    @property
    def underflow(self) -> bool:
        return self.dwell_minutes < 0

    @property
    def allocated_dwell_minutes(self) -> int:
        return sum(self.allocations.values())

    def to_dict(self) -> dict:
        return {
            "total_available_minutes": round(self.total_available_minutes, 2),
            "driving_minutes": round(self.driving_minutes, 2),
            "buffer_minutes": round(self.buffer_minutes, 2),
            "dwell_minutes": round(self.dwell_minutes, 2),
            "allocations": dict(self.allocations),
            "compressed": self.compressed,
            "underflow": self.underflow,
        }


@dataclass(frozen=True)
class BudgetUnavailable:
    """No budget could be formed (no constraint, or deadline already reached)."""
    reason: str
    total_available_minutes: Optional[float] = None

    def to_dict(self) -> dict:
        return {"reason": self.reason, "total_available_minutes": self.total_available_minutes}


# ─────────────────────────────────────────────────────────────────────────────
# Timeline
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class TimelineStep:
    kind: StepKind
    label: str
    start: datetime
    end: datetime
    duration_minutes: float

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "label": self.label,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "duration_minutes": round(self.duration_minutes, 2),
        }


@dataclass(frozen=True)
class Timeline:
    """Ordered, non-empty sequence of steps from "now" to arrival."""
    steps: tuple[TimelineStep, ...]

    def __post_init__(self) -> None:
        if not self.steps:
            raise ValueError("Timeline requires at least one step")

    @property
    def start(self) -> datetime:
        return self.steps[0].start

    @property
    def arrival(self) -> datetime:
        return self.steps[-1].end

    @property
    def total_minutes(self) -> float:
        return sum(s.duration_minutes for s in self.steps)

    @property
    def driving_minutes(self) -> float:
        return sum(s.duration_minutes for s in self.steps if s.kind is StepKind.DRIVE)

    @property
    def dwell_minutes(self) -> float:
        return sum(s.duration_minutes for s in self.steps if s.kind is StepKind.STOP)

    def to_dict(self) -> dict:
        return {
            "start": self.start.isoformat(),
            "arrival": self.arrival.isoformat(),
            "total_minutes": round(self.total_minutes, 2),
            "steps": [s.to_dict() for s in self.steps],
        }


# ─────────────────────────────────────────────────────────────────────────────
# Fuel
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class GasStop:
    cumulative_distance_miles: float
    location: LatLng

    def to_dict(self) -> dict:
        return {
            "cumulative_distance_miles": round(self.cumulative_distance_miles, 2),
            "location": self.location.to_dict(),
        }


# ─────────────────────────────────────────────────────────────────────────────
# Pipeline result
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ItineraryPlan:
    """Everything run_pipeline() learned about one request."""
    request: ParsedRequest
    budget: Union[TimeBudget, BudgetUnavailable, None]
    timeline: Timeline
    feasibility: Feasibility
    warnings: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "request": self.request.to_dict(),
            "budget": self.budget.to_dict() if self.budget is not None else None,
            "timeline": self.timeline.to_dict(),
            "feasibility": self.feasibility.value,
            "warnings": list(self.warnings),
        }
