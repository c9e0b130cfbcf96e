"""
modules/planning/dwell_allocator.py
------------------------------------
Splits the dwell minutes of a TimeBudget across the requested stops.

  totalTypical = Σ task.estimated_duration_minutes
  ratio        = dwell / totalTypical
  allocated_i  = max(MIN_DWELL_MINUTES, floor(default_i × min(ratio, DWELL_SCALE_CAP)))

The 5-minute floor is applied even when it pushes the sum of allocations
above `dwell`; the timeline then comes out late and is classified
impossible.  That overshoot is intentional and is not corrected here.

ratio < COMPRESSION_WARN_RATIO sets `compressed` on the result.
"""

from __future__ import annotations

import logging
import math
from typing import Optional, Sequence

import config
from schemas.trip import DwellAllocation, Task

logger = logging.getLogger(__name__)


def task_key(index: int, task: Task) -> str:
    """Allocation key for the task at `index` in the request's task list."""
    return f"{index}:{task.category.value}"


def allocate_dwell(
    tasks: Sequence[Task],
    dwell_minutes: float,
    scale_cap: Optional[float] = None,
) -> DwellAllocation:
    if scale_cap is None:
        scale_cap = config.DWELL_SCALE_CAP

    total_typical = sum(t.estimated_duration_minutes for t in tasks)
    if not tasks or total_typical == 0:
        return DwellAllocation(
            minutes={task_key(i, t): config.MIN_DWELL_MINUTES for i, t in enumerate(tasks)},
        )

    dwell = max(dwell_minutes, 0.0)
    ratio = dwell / total_typical

    minutes: dict[str, int] = {}
    for i, task in enumerate(tasks):
        default = task.estimated_duration_minutes
        if ratio < scale_cap:
            scaled = default * dwell / total_typical
        else:
            scaled = default * scale_cap
        minutes[task_key(i, task)] = max(config.MIN_DWELL_MINUTES, math.floor(scaled))

    compressed = ratio < config.COMPRESSION_WARN_RATIO
    if compressed:
        logger.warning(
            "dwell compressed: %.1f min available for %d min of typical stops (ratio %.3f)",
            dwell, total_typical, ratio,
        )
    return DwellAllocation(minutes=minutes, ratio=ratio, compressed=compressed)
