"""
schemas/errors.py
-----------------
Typed failures raised by the planning engine.

Only genuine precondition violations are exceptions.  "No match" results,
budget underflow and dwell compression are reported as values on the
returned objects instead.
"""

from __future__ import annotations


class PlanningError(ValueError):
    """Base class for every planning-engine failure."""


class NoRouteError(PlanningError):
    """The route has no legs; nothing downstream can be computed."""

    def __init__(self, detail: str = "route must contain at least one leg") -> None:
        super().__init__(f"ERROR_NO_ROUTE: {detail}")


class InvalidRouteError(PlanningError):
    """A leg carries negative distance/duration or out-of-range coordinates."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__("ERROR_INVALID_ROUTE: " + "; ".join(self.errors))


class InvalidVehicleStateError(PlanningError):
    """Fuel level, range or reserve threshold is outside its valid domain."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__("ERROR_INVALID_VEHICLE_STATE: " + "; ".join(self.errors))
