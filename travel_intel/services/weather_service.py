"""WeatherAPI.com current conditions client."""

import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from travel_intel.config import get_settings
from travel_intel.core.exceptions import ExternalServiceError
from travel_intel.schemas.conditions import AirQuality, WeatherLocation, WeatherSnapshot

logger = logging.getLogger(__name__)
settings = get_settings()


class WeatherService:
    """Current weather client for api.weatherapi.com.

    No retries: a failed call raises ExternalServiceError straight away so
    the caller can fall back.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        score_air_quality: Optional[bool] = None,
    ):
        self.api_key = settings.WEATHER_API_KEY if api_key is None else api_key
        self.base_url = base_url or settings.WEATHER_API_URL
        self.timeout = settings.WEATHER_TIMEOUT_S if timeout is None else timeout
        self.score_air_quality = (
            settings.WEATHER_SCORE_AIR_QUALITY if score_air_quality is None else score_air_quality
        )

    async def get_weather_data(self, lat: float, lng: float) -> WeatherSnapshot:
        """Get current weather and air quality for a coordinate.

        Args:
            lat: Latitude
            lng: Longitude

        Returns:
            WeatherSnapshot; fields the provider omits are None

        Raises:
            ExternalServiceError: Provider unavailable, timed out or returned an error
        """
        if not self.api_key:
            raise ExternalServiceError("Weather API key not configured")

        url = f"{self.base_url}/current.json"
        params = {"key": self.api_key, "q": f"{lat},{lng}", "aqi": "yes"}

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(url, params=params)
        except httpx.TimeoutException:
            logger.error(f"Weather API timeout for ({lat}, {lng})")
            raise ExternalServiceError("Weather service timeout")
        except httpx.HTTPError as e:
            logger.error(f"Error fetching weather: {str(e)}")
            raise ExternalServiceError(f"Weather error: {str(e)}")

        if response.status_code != 200:
            logger.error(f"Weather API error {response.status_code}: {response.text}")
            raise ExternalServiceError("Weather service unavailable")

        try:
            payload = response.json()
        except ValueError:
            raise ExternalServiceError("Weather service returned invalid JSON")

        try:
            return self.normalize_weather(payload)
        except ValidationError as e:
            logger.error(f"Weather payload rejected for ({lat}, {lng}): {str(e)}")
            raise ExternalServiceError("Weather service returned invalid data")

    def normalize_weather(self, payload: Dict[str, Any]) -> WeatherSnapshot:
        """Map a current.json response onto a WeatherSnapshot.

        Args:
            payload: Raw provider response

        Returns:
            WeatherSnapshot with missing values left as None
        """
        location = payload.get("location") or {}
        current = payload.get("current") or {}
        condition = current.get("condition") or {}
        air_quality = current.get("air_quality") or {}

        pm2_5 = air_quality.get("pm2_5")

        return WeatherSnapshot(
            temperature=current.get("temp_c"),
            condition=condition.get("text"),
            uv=current.get("uv"),
            precip_mm=current.get("precip_mm"),
            humidity=current.get("humidity"),
            cloud_cover=current.get("cloud"),
            visibility_km=current.get("vis_km"),
            wind_kph=current.get("wind_kph"),
            wind_dir=current.get("wind_dir"),
            is_day=current.get("is_day"),
            air_quality_pm2_5=pm2_5 if self.score_air_quality else None,
            air_quality=AirQuality(pm2_5=pm2_5, pm10=air_quality.get("pm10")),
            location=WeatherLocation(
                name=location.get("name"),
                region=location.get("region"),
                country=location.get("country"),
                lat=location.get("lat"),
                lon=location.get("lon"),
                localtime=location.get("localtime"),
            ),
            last_updated=current.get("last_updated"),
        )
