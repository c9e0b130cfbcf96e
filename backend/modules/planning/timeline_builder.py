"""
modules/planning/timeline_builder.py
-------------------------------------
Interleaves drive legs and stop dwell intervals into a timestamped Timeline.

Leg i ends at the stop for task i (tasks and intermediate legs are already in
the same order; matching stops to legs is the route service's job).  The
last leg ends at the destination and gets no stop.

  t_cur = now
  for leg i:
      DRIVE  [t_cur, t_cur + leg.duration]
      STOP   [t_cur, t_cur + dwell_i]      (i < len(legs) − 1 and i < len(tasks))

Dwell per stop comes from budget.allocations when a budget exists, else from
the task's typical duration.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Optional, Sequence

from modules.planning.dwell_allocator import task_key
from modules.validation import require_route
from schemas.trip import RouteLeg, StepKind, Task, TimeBudget, Timeline, TimelineStep

logger = logging.getLogger(__name__)


def _dwell_for(index: int, task: Task, budget: Optional[TimeBudget]) -> int:
    if budget is not None:
        minutes = budget.allocations.get(task_key(index, task))
        if minutes is not None:
            return minutes
    return task.estimated_duration_minutes


def build_timeline(
    route: Sequence[RouteLeg],
    budget: Optional[TimeBudget],
    tasks: Sequence[Task],
    now: datetime,
    destination: Optional[str] = None,
) -> Timeline:
    require_route(route)

    intermediate = len(route) - 1
    if len(tasks) > intermediate:
        logger.warning(
            "%d task(s) but only %d intermediate stop(s); extra tasks left off the timeline",
            len(tasks), intermediate,
        )

    steps: list[TimelineStep] = []
    t_cur = now
    final_label = f"Drive to {destination}" if destination else "Drive to destination"

    for i, leg in enumerate(route):
        stop_task = tasks[i] if i < intermediate and i < len(tasks) else None

        if i == len(route) - 1:
            drive_label = final_label
        elif stop_task is not None:
            drive_label = f"Drive to {stop_task.description}"
        else:
            drive_label = f"Drive to waypoint {i + 1}"

        drive_end = t_cur + timedelta(seconds=leg.duration_seconds)
        steps.append(TimelineStep(
            kind=StepKind.DRIVE,
            label=drive_label,
            start=t_cur,
            end=drive_end,
            duration_minutes=leg.duration_minutes,
        ))
        t_cur = drive_end

        if stop_task is not None:
            dwell = _dwell_for(i, stop_task, budget)
            stop_end = t_cur + timedelta(minutes=dwell)
            steps.append(TimelineStep(
                kind=StepKind.STOP,
                label=stop_task.description,
                start=t_cur,
                end=stop_end,
                duration_minutes=float(dwell),
            ))
            t_cur = stop_end

    return Timeline(steps=tuple(steps))
