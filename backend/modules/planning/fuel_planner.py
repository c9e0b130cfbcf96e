"""
modules/planning/fuel_planner.py
---------------------------------
Where along a route the vehicle has to refuel.

  fuel     = fuel_level × range            (miles of driving left)
  reserve  = min_fuel_threshold × range    (never planned below this)

Legs are walked in order.  While the remaining part of a leg is longer than
(fuel − reserve), a GasStop is emitted where the reserve would be crossed,
the tank is refilled to the full range, and the rest of the leg is carried
on.  A single leg may need several stops.

Stop positions are interpolated linearly between the leg's endpoints by the
fraction of the leg's distance already driven.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

import config
from modules.tool_usage.distance_tool import point_along_leg
from modules.validation import require_route, require_vehicle_state
from schemas.errors import PlanningError
from schemas.trip import GasStop, RouteLeg

logger = logging.getLogger(__name__)

# Float slack when deciding a leg is exhausted.
_EPSILON_MILES = 1e-9


def simulate_fuel_stops(
    route: Sequence[RouteLeg],
    fuel_level: float,
    vehicle_range_miles: float,
    min_fuel_threshold: Optional[float] = None,
) -> list[GasStop]:
    """
    Return refuel points for `route`, ordered by cumulative distance.

    Args:
        route:                Driving legs (non-empty).
        fuel_level:           Current tank fill in [0, 1].
        vehicle_range_miles:  Miles on a full tank (> 0).
        min_fuel_threshold:   Reserve share of the tank, default config.MIN_FUEL_THRESHOLD.

    Raises:
        NoRouteError, InvalidRouteError, InvalidVehicleStateError.
        PlanningError (ERROR_FUEL_NO_PROGRESS) when a refuel cannot shorten a leg.
    """
    if min_fuel_threshold is None:
        min_fuel_threshold = config.MIN_FUEL_THRESHOLD

    require_route(route)
    require_vehicle_state(fuel_level, vehicle_range_miles, min_fuel_threshold)

    fuel = fuel_level * vehicle_range_miles
    reserve = min_fuel_threshold * vehicle_range_miles
    covered = 0.0
    stops: list[GasStop] = []
    refuelled = False

    for leg in route:
        leg_miles = leg.distance_miles
        remaining = leg_miles

        while remaining > _EPSILON_MILES:
            # Already at or under the reserve: refuel before going any further.
            drivable = max(0.0, fuel - reserve)

            if remaining <= drivable:
                fuel -= remaining
                covered += remaining
                remaining = 0.0
                refuelled = False
                continue

            # After a refuel every pass has to shorten the leg.
            if refuelled and remaining - drivable >= remaining:
                raise PlanningError(
                    f"ERROR_FUEL_NO_PROGRESS: {drivable} mi per tank cannot cover a {leg_miles} mi leg"
                )

            covered += drivable
            remaining -= drivable
            into_leg = leg_miles - remaining
            stops.append(GasStop(
                cumulative_distance_miles=covered,
                location=point_along_leg(leg, into_leg),
            ))
            fuel = vehicle_range_miles
            refuelled = True

    if stops:
        logger.info(
            "%d refuel stop(s) over %.1f mi (range %.0f mi, start %.0f%%)",
            len(stops), covered, vehicle_range_miles, fuel_level * 100,
        )
    return stops
