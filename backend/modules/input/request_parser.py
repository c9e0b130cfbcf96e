"""
modules/input/request_parser.py
--------------------------------
Single entry point for turning an errand message into a ParsedRequest.

Composes the three extractors:
  time_constraint_parser → TimeConstraint | None
  task_extractor         → tasks
  location_extractor     → origin / destination hints

The arrival-at-location phrase also names a destination ("arrive at the
office by 9"); it is used when the location extractor found none.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from modules.input.location_extractor import extract_locations
from modules.input.task_extractor import extract_tasks
from modules.input.time_constraint_parser import parse_time_constraint
from schemas.trip import ParsedRequest

logger = logging.getLogger(__name__)


def parse_request(
    message: str,
    now: datetime,
    infer_meridiem: Optional[bool] = None,
) -> ParsedRequest:
    constraint = parse_time_constraint(message, now, infer_meridiem=infer_meridiem)
    tasks = extract_tasks(message)
    hints = extract_locations(message)

    destination = hints.destination
    if destination is None and constraint is not None and constraint.destination:
        destination = constraint.destination

    parsed = ParsedRequest(
        original_message=message,
        tasks=tuple(tasks),
        time_constraint=constraint,
        origin=hints.origin,
        destination=destination,
    )
    logger.info(
        "parsed request: %d task(s), constraint=%s, origin=%r, destination=%r",
        len(parsed.tasks),
        constraint.kind.value if constraint else None,
        parsed.origin,
        parsed.destination,
    )
    return parsed
