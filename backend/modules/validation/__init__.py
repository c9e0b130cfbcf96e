"""
modules/validation package: input guards before a route or vehicle state is planned.
"""
from modules.validation.route_validator import (
    ValidationResult,
    require_route,
    require_vehicle_state,
    validate_route,
    validate_vehicle_state,
)

__all__ = [
    "ValidationResult",
    "require_route",
    "require_vehicle_state",
    "validate_route",
    "validate_vehicle_state",
]
