"""Destination analysis API endpoints."""

from fastapi import APIRouter, Depends, Query, Request, Response

from travel_intel.core.middleware import DEGRADED_HEADER
from travel_intel.core.rate_limit import limiter, rate_limit_analysis
from travel_intel.dependencies import get_travel_intelligence_service
from travel_intel.schemas.destination import DestinationAnalysis
from travel_intel.services.travel_intelligence_service import TravelIntelligenceService

router = APIRouter()


@router.get(
    "/health",
    response_model=DestinationAnalysis,
    summary="Analyse a travel destination",
    description="""
    Combines satellite positioning, Sentinel-2 surface indices and current
    weather for a coordinate into a single travel intelligence record.

    **Includes:**
    - Destination health score (0-100, higher = healthier) with per-factor contributions
    - Route safety rating (HIGH = safe, LOW = dangerous)
    - Safety recommendations, priority alerts, equipment and best travel times

    When a data source is unavailable the response still has the full
    shape, holds neutral fallback values, carries an `error` message and
    the `X-Analysis-Degraded: true` header.

    Results are cached for 48 hours per ~11m grid cell.
    """,
    responses={
        200: {"description": "Destination analysis (possibly degraded)"},
        422: {"description": "Coordinates out of range"},
        429: {"description": "Rate limit exceeded"},
    },
)
@limiter.limit(rate_limit_analysis)
async def get_destination_health(
    request: Request,
    response: Response,
    lat: float = Query(..., ge=-90, le=90, description="Latitude"),
    lng: float = Query(..., ge=-180, le=180, description="Longitude"),
    service: TravelIntelligenceService = Depends(get_travel_intelligence_service),
):
    """Analyse a destination."""
    analysis = await service.analyze_destination(lat, lng)

    if analysis.is_fallback:
        response.headers[DEGRADED_HEADER] = "true"

    return analysis
