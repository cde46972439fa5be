"""Integration tests for the raw data source endpoints."""

from fastapi.testclient import TestClient


def test_get_weather(client: TestClient, fake_weather):
    """Test current weather passthrough."""
    response = client.get("/api/v1/conditions/weather", params={"lat": 45.0, "lng": 7.0})

    assert response.status_code == 200
    assert response.json()["temperature"] == 18.0
    assert fake_weather.calls == [(45.0, 7.0)]


def test_get_weather_unavailable(client: TestClient, fake_weather):
    """Test provider failures are answered with 503."""
    fake_weather.fail = True

    response = client.get("/api/v1/conditions/weather", params={"lat": 45.0, "lng": 7.0})

    assert response.status_code == 503
    assert response.json() == {
        "error": "ExternalServiceError",
        "message": "Weather service unavailable",
        "path": "/api/v1/conditions/weather",
    }


def test_get_surface(client: TestClient):
    """Test surface indices with the default mode."""
    response = client.get("/api/v1/conditions/surface", params={"lat": 45.0, "lng": 7.0})

    assert response.status_code == 200

    data = response.json()
    assert data["mode"] == "all"
    assert data["metrics"] == {"vegetation_index": 0.75, "water_index": 0.1, "snow_index": 0.05}
    assert len(data["bbox"]) == 4


def test_get_surface_single_mode(client: TestClient):
    """Test a single index mode is passed to the provider."""
    response = client.get(
        "/api/v1/conditions/surface", params={"lat": 45.0, "lng": 7.0, "mode": "snow"}
    )

    assert response.status_code == 200
    assert response.json()["mode"] == "snow"


def test_get_surface_invalid_mode(client: TestClient):
    """Test modes without indices are rejected."""
    response = client.get(
        "/api/v1/conditions/surface", params={"lat": 45.0, "lng": 7.0, "mode": "true_color"}
    )
    assert response.status_code == 422


def test_get_positioning(client: TestClient):
    """Test positioning accuracy lookup."""
    response = client.get("/api/v1/conditions/positioning", params={"lat": 45.0, "lng": 7.0})

    assert response.status_code == 200

    data = response.json()
    assert data["accuracy"] == 2.0
    assert data["satellite_count"] == 10
