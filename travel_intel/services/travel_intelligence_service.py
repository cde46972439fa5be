"""Destination analysis orchestration.

Combines positioning, surface imagery and weather for one coordinate into
a single travel intelligence record: health score, safety rating and
recommendations. A data source failure never propagates; the caller gets
a structurally complete fallback record instead.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from pydantic import ValidationError

from travel_intel.config import get_settings
from travel_intel.schemas.common import SafetyRating
from travel_intel.schemas.conditions import PositionInfo, SurfaceMetrics, WeatherSnapshot
from travel_intel.schemas.destination import DestinationAnalysis
from travel_intel.services.cache_service import CacheService
from travel_intel.services.data_sources import (
    PositioningSource,
    SurfaceImagerySource,
    WeatherSource,
)
from travel_intel.services.route_safety_service import RouteSafetyService
from travel_intel.services.scoring_service import HealthScoreCalculator
from travel_intel.utils.geometry import point_bbox
from travel_intel.utils.recommendations import (
    fallback_safety_recommendations,
    generate_safety_recommendations,
)

logger = logging.getLogger(__name__)
settings = get_settings()

FALLBACK_ERROR = "Partial data due to service unavailability"
FALLBACK_HEALTH_SCORE = 50.0
FALLBACK_HEALTH_COMPONENTS = {
    "vegetation_contribution": 25.0,
    "water_contribution": -3.0,
    "snow_contribution": -4.0,
    "precip_contribution": 0.0,
    "visibility_contribution": 0.0,
    "air_quality_contribution": 0.0,
    "uv_extreme_contribution": 0.0,
    "night_travel_contribution": 0.0,
}


class TravelIntelligenceService:
    """Unified destination analysis."""

    def __init__(
        self,
        positioning: PositioningSource,
        imagery: SurfaceImagerySource,
        weather: WeatherSource,
        route_safety: Optional[RouteSafetyService] = None,
        health_calculator: Optional[HealthScoreCalculator] = None,
        cache: Optional[CacheService] = None,
    ):
        self.positioning = positioning
        self.imagery = imagery
        self.weather = weather
        self.route_safety = route_safety or RouteSafetyService(positioning)
        self.health_calculator = health_calculator or HealthScoreCalculator()
        self.cache = cache

    async def analyze_destination(self, lat: float, lng: float) -> DestinationAnalysis:
        """Analyse a destination.

        Args:
            lat: Latitude
            lng: Longitude

        Returns:
            DestinationAnalysis valid for ANALYSIS_VALID_HOURS. When any data
            source fails the fallback record is returned, with ``error`` set.
        """
        cached = await self._get_cached(lat, lng)
        if cached:
            return cached

        try:
            logger.info(
                "Starting destination analysis",
                extra={"extra_fields": {"lat": lat, "lng": lng}},
            )

            position = await self.positioning.get_positioning_accuracy(lat, lng)
            logger.info(f"Positioning completed, accuracy {position.accuracy}m")

            surface = await self.imagery.get_surface_indices(lat, lng, "all")
            metrics = surface.metrics
            logger.info(
                "Surface analysis completed",
                extra={
                    "extra_fields": {
                        "vegetation": metrics.vegetation_index,
                        "water": metrics.water_index,
                        "snow": metrics.snow_index,
                    }
                },
            )

            weather = await self.weather.get_weather_data(lat, lng)
            logger.info(f"Weather data retrieved, temperature {weather.temperature}")

            health = self.health_calculator.compute(metrics, weather)
            logger.info(f"Health score calculated: {health.score}")

            safety_rating = await self.route_safety.analyze_route_safety(
                lat, lng, metrics, accuracy_m=position.accuracy
            )
            logger.info(f"Route safety analysis completed: {safety_rating.value}")

            now = datetime.now(timezone.utc)
            analysis = DestinationAnalysis(
                position_info=position,
                surface_indices=metrics,
                weather_snapshot=weather,
                destination_health_score=health.score,
                health_components=health.components,
                route_safety_rating=safety_rating,
                safety_recommendations=generate_safety_recommendations(
                    health, safety_rating, weather, metrics
                ),
                bbox=surface.bbox,
                timestamp=now,
                valid_until=now + timedelta(hours=settings.ANALYSIS_VALID_HOURS),
            )

        except Exception as e:
            logger.error(
                "Destination analysis failed",
                extra={"extra_fields": {"lat": lat, "lng": lng, "error": str(e)}},
                exc_info=True,
            )
            return self.get_fallback_analysis(lat, lng)

        if self.cache:
            await self.cache.set_analysis(lat, lng, analysis.model_dump(mode="json"))

        return analysis

    def get_fallback_analysis(self, lat: float, lng: float) -> DestinationAnalysis:
        """Neutral analysis used when data sources are unavailable."""
        now = datetime.now(timezone.utc)

        return DestinationAnalysis(
            position_info=PositionInfo(
                latitude=lat,
                longitude=lng,
                altitude=0.0,
                accuracy=10.0,
                satellite_count=4,
                hdop=5.0,
            ),
            surface_indices=SurfaceMetrics(vegetation_index=0.5, water_index=0.1, snow_index=0.05),
            weather_snapshot=WeatherSnapshot(),
            destination_health_score=FALLBACK_HEALTH_SCORE,
            health_components=dict(FALLBACK_HEALTH_COMPONENTS),
            route_safety_rating=SafetyRating.MEDIUM,
            safety_recommendations=fallback_safety_recommendations(),
            bbox=point_bbox(lat, lng, settings.IMAGERY_BBOX_SIZE_DEG),
            timestamp=now,
            valid_until=now + timedelta(hours=settings.ANALYSIS_VALID_HOURS),
            error=FALLBACK_ERROR,
        )

    async def _get_cached(self, lat: float, lng: float) -> Optional[DestinationAnalysis]:
        if not self.cache:
            return None

        data = await self.cache.get_analysis(lat, lng)
        if not data:
            return None

        try:
            analysis = DestinationAnalysis.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Discarding malformed cached analysis: {str(e)}")
            return None

        if analysis.valid_until <= datetime.now(timezone.utc):
            return None
        return analysis
