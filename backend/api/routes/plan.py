"""
api/routes/plan.py
-------------------
POST /v1/plan/parse       free text → tasks, time constraint, origin/destination
POST /v1/plan/itinerary   free text + route legs → budget, timeline, feasibility
POST /v1/plan/fuel-stops  route legs + fuel level + range → refuel points

Route legs arrive already resolved by the directions service; nothing here
calls out to maps or place search.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

import config
from main import plan_fuel_stops, run_pipeline
from modules.input.request_parser import parse_request
from modules.tool_usage.clock import SystemClock
from schemas.errors import PlanningError
from schemas.trip import LatLng, RouteLeg

router = APIRouter()


# ── Request schemas ────────────────────────────────────────────────────────────

class LatLngIn(BaseModel):
    lat: float
    lng: float


class LegIn(BaseModel):
    distance_meters: float = Field(..., description="Leg distance in meters")
    duration_seconds: float = Field(..., description="Leg driving time in seconds")
    start_location: LatLngIn
    end_location: LatLngIn

    def to_leg(self) -> RouteLeg:
        return RouteLeg(
            distance_meters=self.distance_meters,
            duration_seconds=self.duration_seconds,
            start_location=LatLng(self.start_location.lat, self.start_location.lng),
            end_location=LatLng(self.end_location.lat, self.end_location.lng),
        )


class ParseRequest(BaseModel):
    message: str
    now: Optional[datetime] = Field(None, description="Clock reading; server time if omitted")


class ItineraryRequest(BaseModel):
    message: str
    legs: list[LegIn] = Field(default_factory=list)
    now: Optional[datetime] = None


class FuelStopsRequest(BaseModel):
    legs: list[LegIn] = Field(default_factory=list)
    fuel_level: float = Field(..., description="Tank fill in [0, 1]")
    vehicle_range_miles: float = Field(..., description="Miles on a full tank")
    min_fuel_threshold: float = Field(config.MIN_FUEL_THRESHOLD, description="Reserve share of the tank")


def _now(requested: Optional[datetime]) -> datetime:
    return requested if requested is not None else SystemClock().now()


# ── Endpoints ──────────────────────────────────────────────────────────────────

@router.post("/parse", summary="Extract tasks and time constraint from a message")
def parse(req: ParseRequest) -> dict:
    return parse_request(req.message, _now(req.now)).to_dict()


@router.post("/itinerary", summary="Budget, timeline and feasibility for a routed request")
def itinerary(req: ItineraryRequest) -> dict:
    try:
        plan = run_pipeline(req.message, [leg.to_leg() for leg in req.legs], now=_now(req.now))
    except PlanningError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return plan.to_dict()


@router.post("/fuel-stops", summary="Where along the route to refuel")
def fuel_stops(req: FuelStopsRequest) -> dict:
    try:
        stops = plan_fuel_stops(
            [leg.to_leg() for leg in req.legs],
            req.fuel_level,
            req.vehicle_range_miles,
            req.min_fuel_threshold,
        )
    except PlanningError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return {"gas_stops": [s.to_dict() for s in stops]}
