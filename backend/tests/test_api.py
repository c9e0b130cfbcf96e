import pytest
from fastapi.testclient import TestClient

from api.server import app


@pytest.fixture
def client():
    return TestClient(app)


def leg(minutes, miles=1.0):
    return {
        "distance_meters": miles * 1609.34,
        "duration_seconds": minutes * 60,
        "start_location": {"lat": 0, "lng": 0},
        "end_location": {"lat": 0, "lng": 0},
    }


def test_health(client):
    r = client.get("/v1/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_parse(client):
    r = client.post("/v1/plan/parse", json={
        "message": "pick up the kids by 5pm",
        "now": "2024-01-15T15:00:00",
    })
    assert r.status_code == 200
    body = r.json()
    assert body["time_constraint"]["kind"] == "deadline"
    assert body["time_constraint"]["value"] == "2024-01-15T17:00:00"
    assert body["tasks"][0]["category"] == "school"


def test_itinerary(client):
    r = client.post("/v1/plan/itinerary", json={
        "message": "pick up the kids and pick up groceries for the house in 2 hrs",
        "legs": [leg(20), leg(20), leg(20)],
        "now": "2024-01-15T15:00:00",
    })
    assert r.status_code == 200
    body = r.json()
    assert body["feasibility"] == "feasible"
    assert body["budget"]["allocations"] == {"0:school": 5, "1:grocery": 20}
    assert len(body["timeline"]["steps"]) == 5


def test_itinerary_without_legs_is_422(client):
    r = client.post("/v1/plan/itinerary", json={"message": "get gas in 1 hour", "legs": []})
    assert r.status_code == 422
    assert "ERROR_NO_ROUTE" in r.json()["detail"]


def test_fuel_stops(client):
    r = client.post("/v1/plan/fuel-stops", json={
        "legs": [leg(480, miles=500)],
        "fuel_level": 1.0,
        "vehicle_range_miles": 300,
    })
    assert r.status_code == 200
    miles = [s["cumulative_distance_miles"] for s in r.json()["gas_stops"]]
    assert miles == [240.0, 480.0]


def test_fuel_stops_bad_vehicle_state(client):
    r = client.post("/v1/plan/fuel-stops", json={
        "legs": [leg(10)],
        "fuel_level": 3.0,
        "vehicle_range_miles": 300,
    })
    assert r.status_code == 422
    assert "ERROR_INVALID_VEHICLE_STATE" in r.json()["detail"]
