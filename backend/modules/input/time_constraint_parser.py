"""
modules/input/time_constraint_parser.py
----------------------------------------
Recovers the single time constraint in an errand request.

Phrasings understood (tried in this order; the first hit wins):

  1. Duration  - "in 2 hours", "in 45 mins", "within 2 hrs"
  2. Arrival   - "arrive at home by 5:30pm", "be at the gym by 6", "get to work by 17:00"
  3. Deadline  - "by 5pm", "before 6:30"

Arrival is tried before the plain deadline because "arrive at home by 5"
also contains "by 5"; the arrival reading carries the destination.

Time literals: H[:MM] with optional am/pm, or 24-hour HH:MM.  A bare hour
below 12 is read as PM once the clock is already past that hour
(see config.INFER_MERIDIEM).  Resolved instants earlier than `now` roll
forward one calendar day.

Returning None is the normal "no constraint" outcome.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional

import config
from schemas.trip import ConstraintKind, Flexibility, TimeConstraint

logger = logging.getLogger(__name__)

# ─────────────────────────────────────────────────────────────────────────────
# Patterns
# ─────────────────────────────────────────────────────────────────────────────

_TIME_LITERAL = r"(?P<hour>\d{1,2})(?::(?P<minute>\d{2}))?(?!\d)\s*(?P<meridiem>[ap]\.?m\.?)?(?![a-z])"

_DURATION_RE = re.compile(
    r"\b(?:with)?in\s+(?P<amount>\d+)\s*(?P<unit>hours?|hrs?|minutes?|mins?)\b",
    re.IGNORECASE,
)
_ARRIVAL_RE = re.compile(
    r"\b(?:arrive\s+at|be\s+at|get\s+to)\s+(?P<location>.+?)\s+by\s+" + _TIME_LITERAL,
    re.IGNORECASE,
)
_DEADLINE_RE = re.compile(
    r"\b(?:by|before)\s+" + _TIME_LITERAL,
    re.IGNORECASE,
)


@dataclass(frozen=True)
class _ConstraintRule:
    name: str
    pattern: re.Pattern
    build: Callable[[re.Match, datetime, bool], Optional[TimeConstraint]]


# ─────────────────────────────────────────────────────────────────────────────
# Time literal resolution
# ─────────────────────────────────────────────────────────────────────────────

def _resolve_clock_time(match: re.Match, now: datetime, infer_meridiem: bool) -> Optional[datetime]:
    """
    Turn the hour/minute/meridiem groups into an absolute instant >= now.

    Returns None for impossible literals ("by 27", "by 5:75", "13pm").
    """
    raw_hour = match.group("hour")
    hour = int(raw_hour)
    minute = int(match.group("minute") or 0)
    meridiem = (match.group("meridiem") or "").replace(".", "").lower()

    if minute > 59:
        return None
    if meridiem:
        if not 1 <= hour <= 12:
            return None
        if meridiem == "pm" and hour != 12:
            hour += 12
        elif meridiem == "am" and hour == 12:
            hour = 0
    else:
        if hour > 23:
            return None
        # "09:30" and "0:30" are explicit 24-hour literals; only bare "9" / "9:30" is ambiguous.
        is_24h_literal = len(raw_hour) == 2 and raw_hour.startswith("0")
        if infer_meridiem and 0 < hour < 12 and not is_24h_literal and now.hour >= hour:
            hour += 12

    instant = now.replace(hour=hour, minute=minute, second=0, microsecond=0)
    if instant < now:
        instant += timedelta(days=1)
    return instant


# ─────────────────────────────────────────────────────────────────────────────
# Rule builders
# ─────────────────────────────────────────────────────────────────────────────

def _build_duration(match: re.Match, now: datetime, infer_meridiem: bool) -> TimeConstraint:
    amount = int(match.group("amount"))
    unit = match.group("unit").lower()
    minutes = amount * 60 if unit.startswith(("hour", "hr")) else amount
    return TimeConstraint(
        kind=ConstraintKind.DURATION,
        value=minutes,
        source_text=match.group(0),
    )


def _build_arrival(match: re.Match, now: datetime, infer_meridiem: bool) -> Optional[TimeConstraint]:
    instant = _resolve_clock_time(match, now, infer_meridiem)
    if instant is None:
        return None
    return TimeConstraint(
        kind=ConstraintKind.ARRIVAL_AT_DESTINATION,
        value=instant,
        source_text=match.group(0).strip(),
        destination=match.group("location").strip(),
    )


def _build_deadline(match: re.Match, now: datetime, infer_meridiem: bool) -> Optional[TimeConstraint]:
    instant = _resolve_clock_time(match, now, infer_meridiem)
    if instant is None:
        return None
    return TimeConstraint(
        kind=ConstraintKind.DEADLINE,
        value=instant,
        source_text=match.group(0).strip(),
    )


# Evaluation order matters; see module docstring.
CONSTRAINT_RULES: tuple[_ConstraintRule, ...] = (
    _ConstraintRule("duration", _DURATION_RE, _build_duration),
    _ConstraintRule("arrival",  _ARRIVAL_RE,  _build_arrival),
    _ConstraintRule("deadline", _DEADLINE_RE, _build_deadline),
)


# ─────────────────────────────────────────────────────────────────────────────
# Public API
# ─────────────────────────────────────────────────────────────────────────────

def parse_time_constraint(
    text: str,
    now: datetime,
    infer_meridiem: Optional[bool] = None,
) -> Optional[TimeConstraint]:
    """
    Extract one time constraint from `text`, or None.

    Args:
        text:            Free-text request.
        now:             Clock reading used for "today" and roll-over.
        infer_meridiem:  Override config.INFER_MERIDIEM for this call.
    """
    if infer_meridiem is None:
        infer_meridiem = config.INFER_MERIDIEM

    for rule in CONSTRAINT_RULES:
        for match in rule.pattern.finditer(text):
            constraint = rule.build(match, now, infer_meridiem)
            if constraint is not None:
                logger.debug("time constraint via %s rule: %r", rule.name, constraint.source_text)
                return constraint
    return None


def format_time_constraint(constraint: TimeConstraint) -> str:
    """Short human-readable form: "2 hours", "1h 30m", "45 minutes", "05:00 PM"."""
    if constraint.kind is ConstraintKind.DURATION:
        total = int(constraint.value)
        hours, minutes = divmod(total, 60)
        if hours and minutes:
            return f"{hours}h {minutes}m"
        if hours:
            return f"{hours} hour{'s' if hours > 1 else ''}"
        return f"{minutes} minute{'s' if minutes != 1 else ''}"
    return constraint.value.strftime("%I:%M %p")
