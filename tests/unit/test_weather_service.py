"""Unit tests for the weather client."""

from unittest.mock import AsyncMock, Mock, patch

import httpx
import pytest

from travel_intel.core.exceptions import ExternalServiceError
from travel_intel.services.weather_service import WeatherService

SAMPLE_RESPONSE = {
    "location": {
        "name": "Chamonix",
        "region": "Rhone-Alpes",
        "country": "France",
        "lat": 45.92,
        "lon": 6.87,
        "localtime": "2025-01-15 09:30",
    },
    "current": {
        "last_updated": "2025-01-15 09:15",
        "temp_c": -4.0,
        "is_day": 1,
        "condition": {"text": "Light snow"},
        "wind_kph": 12.2,
        "wind_dir": "NW",
        "precip_mm": 0.4,
        "humidity": 86,
        "cloud": 75,
        "vis_km": 6.0,
        "uv": 1.0,
        "air_quality": {"pm2_5": 12.5, "pm10": 18.1},
    },
}


def mock_response(status_code=200, payload=None):
    response = Mock()
    response.status_code = status_code
    response.json = Mock(return_value=payload)
    response.text = "error"
    return response


@pytest.mark.asyncio
async def test_get_weather_data_maps_fields():
    """Provider fields are mapped onto the snapshot."""
    service = WeatherService(api_key="key", base_url="https://weather.test/v1")

    with patch("httpx.AsyncClient.get", new_callable=AsyncMock) as mock_get:
        mock_get.return_value = mock_response(payload=SAMPLE_RESPONSE)

        snapshot = await service.get_weather_data(45.92, 6.87)

    mock_get.assert_called_once()
    args, kwargs = mock_get.call_args
    assert args[0] == "https://weather.test/v1/current.json"
    assert kwargs["params"] == {"key": "key", "q": "45.92,6.87", "aqi": "yes"}

    assert snapshot.temperature == -4.0
    assert snapshot.condition == "Light snow"
    assert snapshot.visibility_km == 6.0
    assert snapshot.cloud_cover == 75
    assert snapshot.is_day == 1
    assert snapshot.air_quality.pm2_5 == 12.5
    assert snapshot.location.name == "Chamonix"
    # PM2.5 is reported but not scored by default
    assert snapshot.air_quality_pm2_5 is None


def test_normalize_weather_scores_air_quality_when_enabled():
    """PM2.5 feeds the health score only when enabled."""
    service = WeatherService(api_key="key", score_air_quality=True)
    snapshot = service.normalize_weather(SAMPLE_RESPONSE)

    assert snapshot.air_quality_pm2_5 == 12.5


def test_normalize_weather_sparse_payload():
    """Missing sections leave fields as None."""
    snapshot = WeatherService(api_key="key").normalize_weather({"current": {"temp_c": 21}})

    assert snapshot.temperature == 21
    assert snapshot.uv is None
    assert snapshot.visibility_km is None
    assert snapshot.is_day is None


@pytest.mark.asyncio
async def test_missing_api_key():
    """No API key fails fast without a request."""
    service = WeatherService(api_key="")

    with patch("httpx.AsyncClient.get", new_callable=AsyncMock) as mock_get:
        with pytest.raises(ExternalServiceError):
            await service.get_weather_data(0, 0)

    mock_get.assert_not_called()


@pytest.mark.asyncio
async def test_provider_error_status():
    """Non-200 responses raise ExternalServiceError (503)."""
    service = WeatherService(api_key="key")

    with patch("httpx.AsyncClient.get", new_callable=AsyncMock) as mock_get:
        mock_get.return_value = mock_response(status_code=403)

        with pytest.raises(ExternalServiceError) as exc_info:
            await service.get_weather_data(0, 0)

    assert exc_info.value.status_code == 503


@pytest.mark.asyncio
async def test_timeout():
    """Timeouts are not retried."""
    service = WeatherService(api_key="key")

    with patch("httpx.AsyncClient.get", new_callable=AsyncMock) as mock_get:
        mock_get.side_effect = httpx.ReadTimeout("timed out")

        with pytest.raises(ExternalServiceError, match="timeout"):
            await service.get_weather_data(0, 0)

    assert mock_get.call_count == 1


@pytest.mark.asyncio
async def test_non_finite_values_rejected():
    """Infinity or NaN in the payload is a provider error."""
    service = WeatherService(api_key="key")
    payload = {"current": {"temp_c": 12.0, "vis_km": float("inf"), "precip_mm": float("nan")}}

    with patch("httpx.AsyncClient.get", new_callable=AsyncMock) as mock_get:
        mock_get.return_value = mock_response(payload=payload)

        with pytest.raises(ExternalServiceError, match="invalid data"):
            await service.get_weather_data(0, 0)
