"""
modules/planning/budget_planner.py
------------------------------------
Deterministic time-budget engine for an errand trip.

Given a resolved route and the request's time constraint:

  driving   = Σ leg.duration_seconds / 60
  total     = constraint minutes (DURATION)  |  constraint.value − now (DEADLINE / ARRIVAL)
  buffer    = BUFFER_RATIO × total           (10 %, never negative)
  dwell     = total − driving − buffer       (may be negative → underflow)

Invariant: total == driving + buffer + dwell.

A constraint that leaves no time at all (total ≤ 0), or no constraint,
yields BudgetUnavailable rather than an exception.  An empty route is the
only hard failure (NoRouteError).
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Sequence, Union

import config
from modules.planning.dwell_allocator import allocate_dwell
from modules.tool_usage.distance_tool import total_drive_minutes
from modules.validation import require_route
from schemas.trip import (
    BudgetUnavailable,
    ConstraintKind,
    RouteLeg,
    Task,
    TimeBudget,
    TimeConstraint,
)

logger = logging.getLogger(__name__)


def available_minutes(constraint: TimeConstraint, now: datetime) -> float:
    """Minutes the constraint grants, measured from `now`."""
    if constraint.kind is ConstraintKind.DURATION:
        return float(constraint.value)
    return (constraint.value - now).total_seconds() / 60.0


def compute_budget(
    route: Sequence[RouteLeg],
    constraint: Optional[TimeConstraint],
    now: datetime,
    tasks: Sequence[Task] = (),
) -> Union[TimeBudget, BudgetUnavailable]:
    """
    Build the TimeBudget for `route` under `constraint`.

    Args:
        route:       Driving legs, in order (non-empty).
        constraint:  Parsed time constraint; None → BudgetUnavailable.
        now:         Clock reading the trip starts at.
        tasks:       Stops to allocate dwell time across (may be empty).
    """
    require_route(route)

    if constraint is None:
        return BudgetUnavailable(reason="no time constraint")

    total = available_minutes(constraint, now)
    if total <= 0:
        logger.info("no budget: constraint %r leaves %.1f min", constraint.source_text, total)
        return BudgetUnavailable(
            reason=f"time constraint {constraint.source_text!r} leaves no time",
            total_available_minutes=total,
        )

    driving = total_drive_minutes(route)
    buffer = max(0.0, config.BUFFER_RATIO * total)
    dwell = total - driving - buffer

    allocation = allocate_dwell(tasks, dwell)

    budget = TimeBudget(
        total_available_minutes=total,
        driving_minutes=driving,
        buffer_minutes=buffer,
        dwell_minutes=dwell,
        allocations=allocation.minutes,
        compressed=allocation.compressed,
    )
    if budget.underflow:
        logger.warning(
            "budget underflow: driving %.1f + buffer %.1f exceeds %.1f available",
            driving, buffer, total,
        )
    return budget
