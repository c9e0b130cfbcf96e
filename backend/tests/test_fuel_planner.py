import pytest

from conftest import make_leg
from modules.planning.fuel_planner import simulate_fuel_stops
from schemas.errors import InvalidRouteError, InvalidVehicleStateError, NoRouteError, PlanningError


@pytest.fixture
def long_leg():
    # 500 driven miles over ~276 straight-line miles due north
    return make_leg(480, miles=500, start=(40.0, -120.0), end=(44.0, -120.0))


def test_two_stops_on_one_leg(long_leg):
    stops = simulate_fuel_stops([long_leg], fuel_level=1.0, vehicle_range_miles=300, min_fuel_threshold=0.2)
    assert [s.cumulative_distance_miles for s in stops] == pytest.approx([240, 480])
    assert stops[0].location.lat == pytest.approx(41.92)
    assert stops[1].location.lat == pytest.approx(43.84)
    assert stops[0].location.lng == pytest.approx(-120.0)


def test_stop_lands_in_later_leg():
    route = [make_leg(90, miles=100), make_leg(180, miles=200)]
    stops = simulate_fuel_stops(route, 1.0, 300, 0.2)
    assert len(stops) == 1
    assert stops[0].cumulative_distance_miles == pytest.approx(240)


def test_no_stop_needed():
    assert simulate_fuel_stops([make_leg(45, miles=50)], 1.0, 300) == []


def test_below_reserve_refuels_at_start():
    stops = simulate_fuel_stops([make_leg(90, miles=100, start=(40.0, -120.0), end=(41.0, -120.0))], 0.1, 300, 0.2)
    assert len(stops) == 1
    assert stops[0].cumulative_distance_miles == 0
    assert stops[0].location.lat == pytest.approx(40.0)


def test_stops_ordered_and_within_route(long_leg):
    stops = simulate_fuel_stops([long_leg, long_leg], 0.5, 250, 0.1)
    distances = [s.cumulative_distance_miles for s in stops]
    assert distances == sorted(distances)
    assert all(0 <= d <= 1000 for d in distances)


def test_default_threshold_from_config(monkeypatch):
    import config
    monkeypatch.setattr(config, "MIN_FUEL_THRESHOLD", 0.5)
    stops = simulate_fuel_stops([make_leg(200, miles=200)], 1.0, 300)
    assert [s.cumulative_distance_miles for s in stops] == pytest.approx([150])


@pytest.mark.parametrize("fuel,rng,threshold", [
    (1.5, 300, 0.2),
    (-0.1, 300, 0.2),
    (float("nan"), 300, 0.2),
    (1.0, float("inf"), 0.2),
    (1.0, float("nan"), 0.2),
    (float("inf"), 300, 0.2),
    (1.0, 300, float("nan")),
    (0.5, 0, 0.2),
    (0.5, 300, 1.0),
])
def test_invalid_vehicle_state(fuel, rng, threshold):
    with pytest.raises(InvalidVehicleStateError, match="ERROR_INVALID_VEHICLE_STATE"):
        simulate_fuel_stops([make_leg(10)], fuel, rng, threshold)


def test_empty_route():
    with pytest.raises(NoRouteError):
        simulate_fuel_stops([], 1.0, 300)


def test_infinite_leg_rejected():
    with pytest.raises(InvalidRouteError, match="must be finite"):
        simulate_fuel_stops([make_leg(10, miles=float("inf"))], 1.0, 300)


def test_leg_a_tank_cannot_shorten_raises():
    # 240 mi per tank vanishes against 1e300 mi in float arithmetic
    with pytest.raises(PlanningError, match="ERROR_FUEL_NO_PROGRESS"):
        simulate_fuel_stops([make_leg(10, miles=1e300)], 1.0, 300, 0.2)
