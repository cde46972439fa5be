"""FastAPI dependencies.

Each data source and service is built by a provider function so tests
can swap it through ``app.dependency_overrides``.
"""

from functools import lru_cache

from fastapi import Depends

from travel_intel.services.cache_service import CacheService
from travel_intel.services.copernicus_service import CopernicusService
from travel_intel.services.positioning_service import PositioningService
from travel_intel.services.route_planning_service import RoutePlanningService
from travel_intel.services.route_safety_service import RouteSafetyService
from travel_intel.services.route_segmenter import RouteSegmenter
from travel_intel.services.travel_intelligence_service import TravelIntelligenceService
from travel_intel.services.weather_service import WeatherService


@lru_cache()
def get_cache_service() -> CacheService:
    """Process-wide cache (one Redis connection pool)."""
    return CacheService()


def get_positioning_service() -> PositioningService:
    return PositioningService()


def get_imagery_service(cache: CacheService = Depends(get_cache_service)) -> CopernicusService:
    return CopernicusService(cache=cache)


def get_weather_service() -> WeatherService:
    return WeatherService()


def get_travel_intelligence_service(
    positioning: PositioningService = Depends(get_positioning_service),
    imagery: CopernicusService = Depends(get_imagery_service),
    weather: WeatherService = Depends(get_weather_service),
    cache: CacheService = Depends(get_cache_service),
) -> TravelIntelligenceService:
    """Destination analysis wired to the configured data sources."""
    return TravelIntelligenceService(
        positioning=positioning,
        imagery=imagery,
        weather=weather,
        route_safety=RouteSafetyService(positioning),
        cache=cache,
    )


def get_route_planning_service(
    intelligence: TravelIntelligenceService = Depends(get_travel_intelligence_service),
    weather: WeatherService = Depends(get_weather_service),
) -> RoutePlanningService:
    """Route analysis sharing the destination analysis service."""
    return RoutePlanningService(
        intelligence=intelligence,
        segmenter=RouteSegmenter(intelligence),
        weather=weather,
    )
