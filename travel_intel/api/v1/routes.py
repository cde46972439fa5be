"""Route analysis API endpoints."""

from fastapi import APIRouter, Depends, Query, Request, Response

from travel_intel.core.middleware import DEGRADED_HEADER
from travel_intel.core.rate_limit import limiter, rate_limit_analysis
from travel_intel.dependencies import get_route_planning_service
from travel_intel.schemas.common import Coordinate, TravelMode
from travel_intel.schemas.route import QuickCheckResult, RouteAnalysis
from travel_intel.services.route_planning_service import RoutePlanningService

router = APIRouter()


@router.get(
    "/analyze",
    response_model=RouteAnalysis,
    summary="Analyse route feasibility and safety",
    description="""
    Analyses a trip between two coordinates.

    The straight route is split into 3-10 waypoints (one per ~50km), each
    analysed like a destination. Risk points from the origin, destination
    and waypoints decide the overall risk level:

    - `LOW` / `MEDIUM`: feasible
    - `HIGH`: feasible only when driving
    - `CRITICAL`: not recommended

    **Travel Modes:**
    - `driving` (60 km/h)
    - `cycling` (20 km/h)
    - `walking` (5 km/h)

    If the analysis cannot be completed the response has risk level
    `UNKNOWN` and an `error` message. When the origin, destination or a
    waypoint was analysed from fallback values, that part carries its own
    `error`. Either case sets the `X-Analysis-Degraded: true` header.
    """,
    responses={
        200: {"description": "Route analysis (possibly degraded)"},
        422: {"description": "Coordinates out of range or unknown travel mode"},
        429: {"description": "Rate limit exceeded"},
    },
)
@limiter.limit(rate_limit_analysis)
async def analyze_route(
    request: Request,
    response: Response,
    origin_lat: float = Query(..., ge=-90, le=90),
    origin_lng: float = Query(..., ge=-180, le=180),
    dest_lat: float = Query(..., ge=-90, le=90),
    dest_lng: float = Query(..., ge=-180, le=180),
    travel_mode: TravelMode = Query(TravelMode.DRIVING),
    service: RoutePlanningService = Depends(get_route_planning_service),
):
    """Analyse a route between two points."""
    analysis = await service.analyze_route(
        Coordinate(lat=origin_lat, lng=origin_lng),
        Coordinate(lat=dest_lat, lng=dest_lng),
        travel_mode,
    )

    if analysis.is_degraded:
        response.headers[DEGRADED_HEADER] = "true"

    return analysis


@router.get(
    "/quick-check",
    response_model=QuickCheckResult,
    summary="Quick safety check for one location",
)
@limiter.limit(rate_limit_analysis)
async def quick_check(
    request: Request,
    response: Response,
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
    service: RoutePlanningService = Depends(get_route_planning_service),
):
    """Safety rating, health score and advice for a single location."""
    result = await service.quick_check(lat, lng)

    if result.error is not None:
        response.headers[DEGRADED_HEADER] = "true"

    return result
