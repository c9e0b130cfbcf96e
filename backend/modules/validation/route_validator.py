"""
modules/validation/route_validator.py
--------------------------------------
Input guards applied before a route or vehicle state reaches the planner.

  Route:
    ✓ At least one leg                       (hard: NoRouteError)
    ✓ distance_meters, duration_seconds finite and >= 0
    ✓ Latitude in [-90, 90], longitude in [-180, 180]
    · Driven distance not shorter than the straight line (warning only)

  Vehicle state:
    ✓ fuel_level in [0, 1]
    ✓ vehicle_range_miles finite and > 0
    ✓ min_fuel_threshold in [0, 1)

Usage:
    from modules.validation import require_route, validate_route

    result = validate_route(legs)
    if not result.valid:
        print(result.errors)

    legs = require_route(legs)   # raises on failure
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Sequence

from modules.tool_usage.distance_tool import straight_line_ratio
from schemas.errors import InvalidRouteError, InvalidVehicleStateError, NoRouteError
from schemas.trip import LatLng, RouteLeg

logger = logging.getLogger(__name__)

# Geodesic vs. lat/lng rounding slack before a short leg is reported.
_MIN_STRAIGHT_LINE_RATIO = 0.95


# ── Result dataclass ───────────────────────────────────────────────────────────

@dataclass
class ValidationResult:
    """
    Outcome of a single validation run.

    Attributes:
        valid:    True iff there are zero errors.
        errors:   Human-readable list of failure reasons.
        warnings: Suspicious but usable input.
    """
    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.valid


# ── Route validation ───────────────────────────────────────────────────────────

def _check_point(label: str, point: LatLng, errors: list[str]) -> None:
    if not (-90.0 <= point.lat <= 90.0):
        errors.append(f"{label}.lat={point.lat} is outside valid range [-90, 90]")
    if not (-180.0 <= point.lng <= 180.0):
        errors.append(f"{label}.lng={point.lng} is outside valid range [-180, 180]")


def validate_route(route: Sequence[RouteLeg]) -> ValidationResult:
    """Check every leg of a route; an empty route is itself an error."""
    errors: list[str] = []
    warnings: list[str] = []

    if not route:
        return ValidationResult(valid=False, errors=["route has no legs"])

    for i, leg in enumerate(route):
        before = len(errors)
        if not math.isfinite(leg.distance_meters) or leg.distance_meters < 0:
            errors.append(f"leg[{i}].distance_meters={leg.distance_meters} must be finite and >= 0")
        if not math.isfinite(leg.duration_seconds) or leg.duration_seconds < 0:
            errors.append(f"leg[{i}].duration_seconds={leg.duration_seconds} must be finite and >= 0")
        _check_point(f"leg[{i}].start_location", leg.start_location, errors)
        _check_point(f"leg[{i}].end_location", leg.end_location, errors)

        # Geometry check only makes sense on an otherwise well-formed leg.
        if len(errors) == before and leg.distance_meters > 0:
            ratio = straight_line_ratio(leg)
            if ratio < _MIN_STRAIGHT_LINE_RATIO:
                warnings.append(
                    f"leg[{i}] reports {leg.distance_miles:.2f} mi but its endpoints "
                    f"are {leg.distance_miles / ratio:.2f} mi apart"
                )

    return ValidationResult(valid=len(errors) == 0, errors=errors, warnings=warnings)


def require_route(route: Sequence[RouteLeg]) -> Sequence[RouteLeg]:
    """
    Return `route` unchanged if usable.

    Raises NoRouteError for an empty route and InvalidRouteError for
    malformed legs.  Warnings are logged, not raised.
    """
    if not route:
        raise NoRouteError()
    result = validate_route(route)
    if not result.valid:
        raise InvalidRouteError(result.errors)
    for w in result.warnings:
        logger.warning("route: %s", w)
    return route


# ── Vehicle state validation ───────────────────────────────────────────────────

def validate_vehicle_state(
    fuel_level: float,
    vehicle_range_miles: float,
    min_fuel_threshold: float,
) -> ValidationResult:
    errors: list[str] = []

    if not math.isfinite(fuel_level) or not (0.0 <= fuel_level <= 1.0):
        errors.append(f"fuel_level={fuel_level} must be in [0, 1]")
    if not math.isfinite(vehicle_range_miles) or vehicle_range_miles <= 0:
        errors.append(f"vehicle_range_miles={vehicle_range_miles} must be a finite number > 0")
    if not math.isfinite(min_fuel_threshold) or not (0.0 <= min_fuel_threshold < 1.0):
        errors.append(f"min_fuel_threshold={min_fuel_threshold} must be in [0, 1)")

    return ValidationResult(valid=len(errors) == 0, errors=errors)


def require_vehicle_state(
    fuel_level: float,
    vehicle_range_miles: float,
    min_fuel_threshold: float,
) -> None:
    result = validate_vehicle_state(fuel_level, vehicle_range_miles, min_fuel_threshold)
    if not result.valid:
        raise InvalidVehicleStateError(result.errors)
