"""Pytest configuration and fixtures."""

import os
from typing import Generator, List, Optional, Tuple

import pytest
from fastapi.testclient import TestClient

# Set test environment
os.environ["APP_ENV"] = "test"
os.environ["CACHE_ENABLED"] = "false"  # No Redis in tests
os.environ["RATE_LIMIT_ENABLED"] = "false"  # Disable rate limiting in tests
os.environ["WEATHER_API_KEY"] = "test-weather-key"
os.environ["COPERNICUS_CLIENT_ID"] = "test-client-id"
os.environ["COPERNICUS_CLIENT_SECRET"] = "test-client-secret"

from travel_intel.core.exceptions import ExternalServiceError
from travel_intel.dependencies import (
    get_imagery_service,
    get_positioning_service,
    get_weather_service,
)
from travel_intel.main import app
from travel_intel.schemas.conditions import (
    PositionInfo,
    SurfaceAnalysis,
    SurfaceMetrics,
    WeatherSnapshot,
)
from travel_intel.utils.geometry import point_bbox


class FakePositioning:
    """Positioning source returning a fixed accuracy."""

    def __init__(self, accuracy: float = 2.0, fail: bool = False):
        self.accuracy = accuracy
        self.fail = fail
        self.calls: List[Tuple[float, float]] = []

    async def get_positioning_accuracy(self, lat: float, lng: float) -> PositionInfo:
        self.calls.append((lat, lng))
        if self.fail:
            raise ExternalServiceError("Positioning unavailable")
        return PositionInfo(
            latitude=lat,
            longitude=lng,
            altitude=275.0,
            accuracy=self.accuracy,
            satellite_count=10,
            hdop=self.accuracy / 2,
        )


class FakeImagery:
    """Imagery source returning fixed surface metrics."""

    def __init__(self, metrics: Optional[SurfaceMetrics] = None, fail: bool = False):
        self.metrics = metrics or SurfaceMetrics(
            vegetation_index=0.75, water_index=0.1, snow_index=0.05
        )
        self.fail = fail
        self.calls: List[Tuple[float, float]] = []

    async def get_surface_indices(self, lat: float, lng: float, mode: str = "all") -> SurfaceAnalysis:
        self.calls.append((lat, lng))
        if self.fail:
            raise ExternalServiceError("Imagery service unavailable")
        return SurfaceAnalysis(metrics=self.metrics, bbox=point_bbox(lat, lng), mode=mode)


class FakeWeather:
    """Weather source returning a fixed snapshot."""

    def __init__(self, snapshot: Optional[WeatherSnapshot] = None, fail: bool = False):
        self.snapshot = snapshot or WeatherSnapshot(
            temperature=18.0,
            condition="Partly cloudy",
            uv=4.0,
            precip_mm=0.0,
            humidity=60,
            visibility_km=10.0,
            is_day=1,
        )
        self.fail = fail
        self.calls: List[Tuple[float, float]] = []

    async def get_weather_data(self, lat: float, lng: float) -> WeatherSnapshot:
        self.calls.append((lat, lng))
        if self.fail:
            raise ExternalServiceError("Weather service unavailable")
        return self.snapshot


@pytest.fixture
def fake_positioning() -> FakePositioning:
    return FakePositioning()


@pytest.fixture
def fake_imagery() -> FakeImagery:
    return FakeImagery()


@pytest.fixture
def fake_weather() -> FakeWeather:
    return FakeWeather()


@pytest.fixture
def client(fake_positioning, fake_imagery, fake_weather) -> Generator[TestClient, None, None]:
    """Test client with every data source replaced by a fake."""
    app.dependency_overrides[get_positioning_service] = lambda: fake_positioning
    app.dependency_overrides[get_imagery_service] = lambda: fake_imagery
    app.dependency_overrides[get_weather_service] = lambda: fake_weather

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
