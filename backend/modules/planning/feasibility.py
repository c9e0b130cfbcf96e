"""
modules/planning/feasibility.py
--------------------------------
Labels a Timeline against the request's time constraint.

  IMPOSSIBLE  arrival after the deadline, or total timeline minutes > duration
  TIGHT       on time, but realized buffer ≤ TIGHT_BUFFER_RATIO × total available
  FEASIBLE    otherwise

Realized buffer = total available − (driving + allocated dwell), i.e. the
slack the finished timeline actually leaves.
"""

from __future__ import annotations

import logging
from typing import Optional

import config
from schemas.trip import ConstraintKind, Feasibility, TimeConstraint, Timeline

logger = logging.getLogger(__name__)


def realized_buffer_minutes(timeline: Timeline, constraint: TimeConstraint) -> float:
    """Slack left between the timeline's end and the constraint."""
    return _total_available(timeline, constraint) - timeline.total_minutes


def _total_available(timeline: Timeline, constraint: TimeConstraint) -> float:
    if constraint.kind is ConstraintKind.DURATION:
        return float(constraint.value)
    return (constraint.value - timeline.start).total_seconds() / 60.0


def classify_feasibility(
    timeline: Timeline,
    constraint: Optional[TimeConstraint],
) -> Feasibility:
    if constraint is None:
        return Feasibility.FEASIBLE

    if constraint.kind is ConstraintKind.DURATION:
        late = timeline.total_minutes > constraint.value
    else:
        late = timeline.arrival > constraint.value
    if late:
        return Feasibility.IMPOSSIBLE

    total = _total_available(timeline, constraint)
    slack = realized_buffer_minutes(timeline, constraint)
    if slack <= config.TIGHT_BUFFER_RATIO * total:
        logger.info("tight timeline: %.1f min slack of %.1f available", slack, total)
        return Feasibility.TIGHT
    return Feasibility.FEASIBLE
