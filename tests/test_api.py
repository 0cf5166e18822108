from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from drivlet.entrypoints.fastapi_app import create_app


@pytest.fixture
def client():
    return TestClient(create_app())


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_rank_endpoint_orders_featured_first(client):
    body = [
        {
            "garage_id": "local",
            "garage_name": "Local Motors",
            "average_rating": 4.9,
            "total_reviews": 60,
            "response_time_hours": 1,
            "completion_rate": 0.98,
            "total_bookings_completed": 40,
        },
        {
            "garage_id": "premium",
            "garage_name": "Premium Auto",
            "subscription_tier": "premium",
        },
    ]
    r = client.post("/garages/rank", json=body)
    assert r.status_code == 200

    data = r.json()
    assert [g["garage_id"] for g in data] == ["premium", "local"]
    assert data[0]["is_featured"] is True
    assert {b["key"] for b in data[1]["badges"]} >= {"top_rated", "trusted", "reliable"}
    assert data[0]["badges"][0] == {"key": "premium", "label": "Premium Partner", "icon": "crown"}
    assert set(data[0]["breakdown"]) == {
        "tier_score",
        "rating_score",
        "trust_score",
        "response_score",
        "completion_score",
        "distance_score",
        "availability_score",
        "activity_score",
    }


def test_rank_endpoint_validates_input(client):
    r = client.post("/garages/rank", json=[{"garage_id": "x", "garage_name": "X", "average_rating": 7}])
    assert r.status_code == 422


def test_search_endpoint(client):
    body = {
        "lat": -33.8688,
        "lng": 151.2093,
        "garages": [
            {"garage_id": "bondi", "garage_name": "Bondi", "lat": -33.8915, "lon": 151.2767},
            {"garage_id": "newcastle", "garage_name": "Newcastle", "lat": -32.9283, "lon": 151.7817},
        ],
    }
    r = client.post("/garages/search", json=body)
    assert r.status_code == 200

    data = r.json()
    assert data["total"] == 1
    hit = data["garages"][0]
    assert hit["garage_id"] == "bondi"
    assert hit["response_time"] == "> 1 day"
    assert hit["badges"] == ["new"]
    assert 5 < hit["distance_km"] < 8


def test_search_endpoint_rejects_bad_coordinates(client):
    r = client.post("/garages/search", json={"lat": 120, "lng": 10, "garages": []})
    assert r.status_code == 400
    assert "Invalid coordinates" in r.json()["detail"]


def test_cancellation_quote_endpoint(client):
    pickup = (datetime.now(timezone.utc) + timedelta(days=3)).isoformat()
    r = client.post(
        "/bookings/cancellation-quote",
        json={"pickup_time": pickup, "payment_amount": 15000, "status": "confirmed"},
    )
    assert r.status_code == 200

    data = r.json()
    assert data["allowed"] is True
    assert data["refund"]["percentage"] == 100
    assert data["refund_amount_formatted"] == "$150.00"
    assert data["policy_message"] == "You have plenty of time for a free cancellation."


def test_cancellation_quote_endpoint_blocked_stage(client):
    pickup = (datetime.now(timezone.utc) + timedelta(hours=2)).isoformat()
    r = client.post(
        "/bookings/cancellation-quote",
        json={"pickup_time": pickup, "payment_amount": 9999, "status": "pending", "stage": "at_garage"},
    )
    data = r.json()
    assert data["allowed"] is False
    assert data["refund"]["can_cancel"] is False
    assert data["refund"]["free_until"] is None


def test_search_endpoint_rejects_duplicate_ids(client):
    body = {
        "garages": [
            {"garage_id": "a", "garage_name": "A", "average_rating": 4.5},
            {"garage_id": "a", "garage_name": "B", "average_rating": 3.0},
        ]
    }
    r = client.post("/garages/search", json=body)
    assert r.status_code == 400
    assert "Duplicate garage_id" in r.json()["detail"]
