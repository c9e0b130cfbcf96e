"""
modules/tool_usage/distance_tool.py
-------------------------------------
Route-leg geometry helpers: unit conversion and positions along a leg.
No external HTTP calls are made; legs arrive already resolved.

Config knob (config.py):
  METERS_PER_MILE -- conversion factor used for every leg distance (1609.34)
"""

from __future__ import annotations

import math
from typing import Sequence

import config
from schemas.trip import LatLng, RouteLeg

_EARTH_RADIUS_MILES = 3958.8

# ---------------------------------------------------------------------------
# Pure maths
# ---------------------------------------------------------------------------


def meters_to_miles(meters: float) -> float:
    return meters / config.METERS_PER_MILE


def haversine_miles(a: LatLng, b: LatLng) -> float:
    """Great-circle distance between two points (Haversine formula) in miles."""
    phi1, phi2 = math.radians(a.lat), math.radians(b.lat)
    d_phi = math.radians(b.lat - a.lat)
    d_lam = math.radians(b.lng - a.lng)
    h = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lam / 2) ** 2
    )
    return 2 * _EARTH_RADIUS_MILES * math.asin(math.sqrt(h))


def interpolate(start: LatLng, end: LatLng, fraction: float) -> LatLng:
    """Linear lat/lng interpolation; fraction is clamped to [0, 1]."""
    f = max(0.0, min(1.0, fraction))
    return LatLng(
        lat=start.lat + (end.lat - start.lat) * f,
        lng=start.lng + (end.lng - start.lng) * f,
    )


# ---------------------------------------------------------------------------
# Route-level helpers
# ---------------------------------------------------------------------------


def point_along_leg(leg: RouteLeg, miles_into_leg: float) -> LatLng:
    """Position `miles_into_leg` miles after the leg's start (by distance fraction)."""
    leg_miles = leg.distance_miles
    if leg_miles <= 0:
        return leg.start_location
    return interpolate(leg.start_location, leg.end_location, miles_into_leg / leg_miles)


def leg_from_dict(raw: dict) -> RouteLeg:
    """
    Build a RouteLeg from either shape a directions payload comes in:

      Google Directions:  {"distance": {"value": m}, "duration": {"value": s},
                           "start_location": {"lat", "lng"}, "end_location": {...}}
      Flat:               {"distance_meters", "duration_seconds", "start_location", "end_location"}
    """
    if "distance" in raw:
        distance = float((raw.get("distance") or {}).get("value", 0))
        duration = float((raw.get("duration") or {}).get("value", 0))
    else:
        distance = float(raw.get("distance_meters", 0))
        duration = float(raw.get("duration_seconds", 0))
    start = raw.get("start_location") or {}
    end = raw.get("end_location") or {}
    return RouteLeg(
        distance_meters=distance,
        duration_seconds=duration,
        start_location=LatLng(float(start.get("lat", 0.0)), float(start.get("lng", 0.0))),
        end_location=LatLng(float(end.get("lat", 0.0)), float(end.get("lng", 0.0))),
    )


def legs_from_directions(payload: dict | list) -> list[RouteLeg]:
    """Accept a bare leg list, a route {"legs": [...]}, or a response {"routes": [{...}]}."""
    if isinstance(payload, dict):
        if "routes" in payload:
            routes = payload["routes"] or [{}]
            payload = routes[0]
        payload = payload.get("legs", [])
    return [leg_from_dict(raw) for raw in payload]


def total_miles(route: Sequence[RouteLeg]) -> float:
    return sum(leg.distance_miles for leg in route)


def total_drive_minutes(route: Sequence[RouteLeg]) -> float:
    return sum(leg.duration_seconds for leg in route) / 60.0


def straight_line_ratio(leg: RouteLeg) -> float:
    """
    Driven distance over great-circle distance for one leg.

    Used by the route validator to flag legs whose endpoints cannot
    plausibly be joined by the reported distance (ratio < 1).
    Returns inf for a zero-length straight line.
    """
    crow = haversine_miles(leg.start_location, leg.end_location)
    if crow == 0:
        return math.inf
    return leg.distance_miles / crow
