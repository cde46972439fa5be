"""Raw data source endpoints.

These expose a single provider each and do not fall back: a provider
failure is answered with 503.
"""

from fastapi import APIRouter, Depends, Query, Request

from travel_intel.core.rate_limit import limiter, rate_limit_conditions
from travel_intel.dependencies import (
    get_imagery_service,
    get_positioning_service,
    get_weather_service,
)
from travel_intel.schemas.conditions import PositionInfo, SurfaceAnalysis, WeatherSnapshot
from travel_intel.services.copernicus_service import CopernicusService
from travel_intel.services.positioning_service import PositioningService
from travel_intel.services.weather_service import WeatherService

router = APIRouter()

PROVIDER_ERRORS = {
    422: {"description": "Coordinates out of range"},
    429: {"description": "Rate limit exceeded"},
    503: {
        "description": "Data provider unavailable",
        "content": {
            "application/json": {
                "example": {
                    "error": "ExternalServiceError",
                    "message": "Weather service unavailable",
                    "path": "/api/v1/conditions/weather",
                }
            }
        },
    },
}


@router.get(
    "/weather",
    response_model=WeatherSnapshot,
    summary="Current weather and air quality",
    responses=PROVIDER_ERRORS,
)
@limiter.limit(rate_limit_conditions)
async def get_weather(
    request: Request,
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
    weather: WeatherService = Depends(get_weather_service),
):
    """Current weather at a coordinate."""
    return await weather.get_weather_data(lat, lng)


@router.get(
    "/surface",
    response_model=SurfaceAnalysis,
    summary="Sentinel-2 surface indices",
    description="""
    Mean vegetation (NDVI), water (NDWI) and snow (NDSI) indices, rescaled
    to [0, 1], over a small box around the coordinate. `mode` restricts
    the rendering to a single index; the others are then reported as 0.
    """,
    responses=PROVIDER_ERRORS,
)
@limiter.limit(rate_limit_conditions)
async def get_surface(
    request: Request,
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
    mode: str = Query("all", pattern="^(all|vegetation|water|snow)$"),
    imagery: CopernicusService = Depends(get_imagery_service),
):
    """Surface indices around a coordinate."""
    return await imagery.get_surface_indices(lat, lng, mode)


@router.get(
    "/positioning",
    response_model=PositionInfo,
    summary="Satellite positioning quality",
    responses=PROVIDER_ERRORS,
)
@limiter.limit(rate_limit_conditions)
async def get_positioning(
    request: Request,
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
    positioning: PositioningService = Depends(get_positioning_service),
):
    """Expected positioning accuracy at a coordinate."""
    return await positioning.get_positioning_accuracy(lat, lng)
