"""
main.py
--------
Errand route planner entry point.
Runs one request through every planning stage:
  Stage 1: Request parsing        (time constraint, tasks, origin/destination)
  Stage 2: Time budget            (driving / buffer / dwell, per-stop allocation)
  Stage 3: Timeline               (drive + stop steps with timestamps)
  Stage 4: Feasibility            (feasible / tight / impossible)

Fuel stops are planned separately (plan_fuel_stops) whenever the fuel level
and vehicle range are known; they do not depend on any time constraint.

Run:
  python main.py "pick up the kids and get groceries in 2 hours" --route route.json
  python main.py "..." --route route.json --fuel 0.4 --range 320

route.json holds a Google Directions response, a single route, or a bare
list of legs (see modules/tool_usage/distance_tool.legs_from_directions).
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import uuid
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence

import config
from modules.input.request_parser import parse_request
from modules.input.time_constraint_parser import format_time_constraint
from modules.observability.logger import StructuredLogger
from modules.planning.budget_planner import compute_budget
from modules.planning.feasibility import classify_feasibility
from modules.planning.fuel_planner import simulate_fuel_stops
from modules.planning.timeline_builder import build_timeline
from modules.tool_usage.clock import SystemClock
from modules.tool_usage.distance_tool import legs_from_directions, total_miles
from modules.validation import require_route
from schemas.trip import (
    BudgetUnavailable,
    Feasibility,
    GasStop,
    ItineraryPlan,
    RouteLeg,
    TimeBudget,
)

logger = logging.getLogger(__name__)


def _event_logger() -> Optional[StructuredLogger]:
    return StructuredLogger() if config.EVENT_LOG_ENABLED else None


# ─────────────────────────────────────────────────────────────────────────────
# Pipeline
# ─────────────────────────────────────────────────────────────────────────────

def run_pipeline(
    message: str,
    route: Sequence[RouteLeg],
    now: Optional[datetime] = None,
    clock=None,
    events: Optional[StructuredLogger] = None,
    request_id: Optional[str] = None,
) -> ItineraryPlan:
    """
    Plan one errand request against an already-resolved route.

    Args:
        message:     Free-text request.
        route:       Driving legs in stop order (non-empty).
        now:         Start instant; defaults to clock.now().
        clock:       Clock source (SystemClock when omitted).
        events:      JSONL event log; defaults to one when EVENT_LOG_ENABLED.
        request_id:  Event-log file key; generated when omitted.

    Raises:
        NoRouteError / InvalidRouteError for an unusable route.  Every other
        outcome (no constraint, no budget, compression, lateness) is reported
        on the returned ItineraryPlan.
    """
    require_route(route)
    if now is None:
        now = (clock or SystemClock()).now()
    events = events if events is not None else _event_logger()
    request_id = request_id or f"req_{uuid.uuid4().hex[:12]}"
    warnings: list[str] = []

    try:
        # ── Stage 1: parse ───────────────────────────────────────────────────
        request = parse_request(message, now)
        if events:
            events.log(request_id, "request_parsed", request.to_dict())

        intermediate = len(route) - 1
        if len(request.tasks) > intermediate:
            warnings.append(
                f"{len(request.tasks)} stop(s) requested but the route has "
                f"{intermediate} intermediate waypoint(s); extra stops are not scheduled"
            )

        # ── Stage 2: budget ──────────────────────────────────────────────────
        budget = None
        if request.time_constraint is not None:
            budget = compute_budget(route, request.time_constraint, now, request.tasks)
            if isinstance(budget, BudgetUnavailable):
                warnings.append(f"no time budget: {budget.reason}")
            else:
                if budget.underflow:
                    warnings.append(
                        f"driving alone ({budget.driving_minutes:.0f} min) leaves no dwell time "
                        f"within {format_time_constraint(request.time_constraint)}"
                    )
                if budget.compressed:
                    warnings.append(
                        "typical stop times do not fit; dwell compressed to the "
                        f"{config.MIN_DWELL_MINUTES}-minute floor where needed"
                    )
            if events:
                events.log(request_id, "budget_computed", budget.to_dict())

        # ── Stage 3: timeline ────────────────────────────────────────────────
        timeline = build_timeline(
            route,
            budget if isinstance(budget, TimeBudget) else None,
            request.tasks,
            now,
            destination=request.destination,
        )

        # ── Stage 4: feasibility ─────────────────────────────────────────────
        if isinstance(budget, BudgetUnavailable):
            feasibility = Feasibility.IMPOSSIBLE
        else:
            feasibility = classify_feasibility(timeline, request.time_constraint)

        plan = ItineraryPlan(
            request=request,
            budget=budget,
            timeline=timeline,
            feasibility=feasibility,
            warnings=tuple(warnings),
        )
        if events:
            events.log(request_id, "plan_ready", {
                "feasibility": feasibility.value,
                "arrival": timeline.arrival.isoformat(),
                "warnings": list(warnings),
            })
    finally:
        # One file per request; release its handle once the plan is logged.
        if events:
            events.close(request_id)

    logger.info("plan %s: %s, arrival %s", request_id, feasibility.value, timeline.arrival.isoformat())
    return plan


def plan_fuel_stops(
    route: Sequence[RouteLeg],
    fuel_level: float,
    vehicle_range_miles: float,
    min_fuel_threshold: Optional[float] = None,
) -> list[GasStop]:
    """Refuel points for `route`; independent of any time constraint."""
    return simulate_fuel_stops(route, fuel_level, vehicle_range_miles, min_fuel_threshold)


# ─────────────────────────────────────────────────────────────────────────────
# CLI
# ─────────────────────────────────────────────────────────────────────────────

def _print_plan(plan: ItineraryPlan) -> None:
    """Print a human-readable minute-by-minute schedule."""
    width = 56
    print()
    print("═" * width)
    print(f"  ERRAND PLAN  -  {plan.feasibility.value.upper()}")
    print("═" * width)

    constraint = plan.request.time_constraint
    if constraint is not None:
        print(f"  Constraint : {constraint.kind.value} ({format_time_constraint(constraint)})")
    if isinstance(plan.budget, TimeBudget):
        b = plan.budget
        print(
            f"  Budget     : {b.total_available_minutes:.0f} min = drive {b.driving_minutes:.0f}"
            f" + buffer {b.buffer_minutes:.0f} + dwell {b.dwell_minutes:.0f}"
        )
    print("  " + "─" * (width - 2))

    for step in plan.timeline.steps:
        block = f"{step.start.strftime('%H:%M')} – {step.end.strftime('%H:%M')}"
        print(f"    {block}   {step.label[:30].ljust(30)}  ({step.duration_minutes:.0f} min)")

    print("  " + "─" * (width - 2))
    print(f"  Arrival    : {plan.timeline.arrival.strftime('%H:%M')}")
    for w in plan.warnings:
        print(f"  ⚠  {w}")
    print("═" * width)
    print()


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Plan a time-budgeted errand trip.")
    parser.add_argument("message", help="Free-text request, e.g. 'get groceries in 1 hour'")
    parser.add_argument("--route", required=True, type=Path, help="Directions JSON file")
    parser.add_argument("--now", help="Start instant (ISO-8601); defaults to the system clock")
    parser.add_argument("--fuel", type=float, help="Fuel level in [0, 1]")
    parser.add_argument("--range", dest="vehicle_range", type=float, help="Miles on a full tank")
    parser.add_argument("--json", action="store_true", help="Print JSON instead of a schedule")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _build_arg_parser().parse_args(argv)
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    route = legs_from_directions(json.loads(args.route.read_text(encoding="utf-8")))
    now = datetime.fromisoformat(args.now) if args.now else None
    plan = run_pipeline(args.message, route, now=now)

    gas_stops: list[GasStop] = []
    if args.fuel is not None and args.vehicle_range is not None:
        gas_stops = plan_fuel_stops(route, args.fuel, args.vehicle_range)

    if args.json:
        out = plan.to_dict()
        out["gas_stops"] = [g.to_dict() for g in gas_stops]
        print(json.dumps(out, indent=2))
        return 0

    _print_plan(plan)
    if args.fuel is not None and args.vehicle_range is not None:
        print(f"  Route length: {total_miles(route):.1f} mi")
        if not gas_stops:
            print("  No refuel needed.")
        for g in gas_stops:
            print(
                f"  ⛽  refuel at mile {g.cumulative_distance_miles:.1f} "
                f"({g.location.lat:.5f}, {g.location.lng:.5f})"
            )
        print()
    return 0


if __name__ == "__main__":
    sys.exit(main())
