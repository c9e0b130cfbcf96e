"""
modules/tool_usage/clock.py
---------------------------
Clock sources injected into every planner entry point.

Nothing in the engine calls datetime.now() directly; the caller hands in a
clock (or a plain `now` instant) so parsing "by 5pm" and building a
timeline are deterministic under test.
"""

from __future__ import annotations

from datetime import datetime, timedelta, tzinfo
from typing import Optional


class SystemClock:
    """Wall-clock time, optionally in a fixed timezone."""

    def __init__(self, tz: Optional[tzinfo] = None) -> None:
        self.tz = tz

    def now(self) -> datetime:
        return datetime.now(self.tz)


class FixedClock:
    """A clock frozen at one instant; advance() moves it forward."""

    def __init__(self, instant: datetime) -> None:
        self._instant = instant

    def now(self) -> datetime:
        return self._instant

    def advance(self, minutes: float) -> datetime:
        self._instant = self._instant + timedelta(minutes=minutes)
        return self._instant
