"""
modules/input/location_extractor.py
------------------------------------
Explicit origin / destination phrases in an errand request.

Either field may be absent; callers fall back to the device location for
the origin and to whatever destination they already know.
"""

from __future__ import annotations

import re

from schemas.trip import LocationHints

_HOME_RE = re.compile(r"\b(?:arrive\s+at|get|back|go|head)\s+home\b", re.IGNORECASE)
_ARRIVE_RE = re.compile(
    r"\barrive\s+at\s+(?P<place>(?:the\s+)?[a-z][a-z'\s]*?)(?=\s+(?:by|in)\b|\s*[,.;!?]|\s*$)",
    re.IGNORECASE,
)
_FROM_RE = re.compile(
    r"\bfrom\s+(?:my\s+)?(?P<place>[a-z][a-z'\s]*?)(?=\s+(?:to|and)\b|\s*[,.;!?]|\s*$)",
    re.IGNORECASE,
)


def extract_destination(text: str) -> str | None:
    if _HOME_RE.search(text):
        return "home"
    match = _ARRIVE_RE.search(text)
    if match:
        return match.group("place").strip()
    return None


def extract_origin(text: str) -> str | None:
    match = _FROM_RE.search(text)
    if match:
        return match.group("place").strip()
    return None


def extract_locations(text: str) -> LocationHints:
    return LocationHints(origin=extract_origin(text), destination=extract_destination(text))
