"""Integration tests for routes API."""

from fastapi.testclient import TestClient

ROUTE = {"origin_lat": 0.0, "origin_lng": 0.0, "dest_lat": 1.08, "dest_lng": 0.0}


def test_analyze_route(client: TestClient):
    """Test a route analysis with default travel mode."""
    response = client.get("/api/v1/routes/analyze", params=ROUTE)

    assert response.status_code == 200
    assert "X-Analysis-Degraded" not in response.headers

    data = response.json()
    assert data["travel_feasible"] is True
    assert data["overall_risk_level"] == "LOW"
    assert data["risk_score"] == 0
    assert len(data["route_segments"]) == 4
    assert data["route_segments"][0]["position"] == {"lat": 0.0, "lng": 0.0}
    assert data["recommended_route"]["recommended_mode"] == "driving"
    assert data["estimated_travel_time"]["hours"] == 2
    assert len(data["weather_forecast"]) == 4
    assert data["error"] is None


def test_analyze_route_walking(client: TestClient):
    """Test travel mode changes the travel time."""
    response = client.get("/api/v1/routes/analyze", params={**ROUTE, "travel_mode": "walking"})

    assert response.status_code == 200
    assert response.json()["estimated_travel_time"]["hours"] == 24


def test_analyze_route_invalid_mode(client: TestClient):
    """Test unknown travel modes are rejected."""
    response = client.get("/api/v1/routes/analyze", params={**ROUTE, "travel_mode": "flying"})
    assert response.status_code == 422


def test_analyze_route_invalid_coordinates(client: TestClient):
    """Test out of range coordinates are rejected."""
    response = client.get("/api/v1/routes/analyze", params={**ROUTE, "dest_lat": -95})
    assert response.status_code == 422


def test_analyze_route_with_failing_source(client: TestClient, fake_weather):
    """Test fallback endpoints and segments mark the response as degraded."""
    fake_weather.fail = True

    response = client.get("/api/v1/routes/analyze", params=ROUTE)

    assert response.status_code == 200
    assert response.headers["X-Analysis-Degraded"] == "true"

    data = response.json()
    assert data["error"] is None
    assert data["overall_risk_level"] == "LOW"
    assert data["origin_conditions"]["error"] == "Partial data due to service unavailability"
    assert data["destination_conditions"]["error"] == "Partial data due to service unavailability"
    assert data["weather_forecast"] == []
    assert all(segment["error"] for segment in data["route_segments"])


def test_quick_check(client: TestClient):
    """Test quick check for a single location."""
    response = client.get("/api/v1/routes/quick-check", params={"lat": 45.0, "lng": 7.0})

    assert response.status_code == 200

    data = response.json()
    assert data["location"] == {"lat": 45.0, "lng": 7.0}
    assert data["safety_rating"] == "HIGH"
    assert data["health_score"] == 74.25
    assert data["travel_feasible"] is True
    assert data["risk_level"] == "LOW"
    assert data["recommendations"]
    assert data["error"] is None
    assert "X-Analysis-Degraded" not in response.headers


def test_quick_check_with_failing_source(client: TestClient, fake_weather):
    """Test quick check flags a location analysed from fallback values."""
    fake_weather.fail = True

    response = client.get("/api/v1/routes/quick-check", params={"lat": 45.0, "lng": 7.0})

    assert response.status_code == 200
    assert response.headers["X-Analysis-Degraded"] == "true"

    data = response.json()
    assert data["health_score"] == 50.0
    assert data["error"] == "Partial data due to service unavailability"
