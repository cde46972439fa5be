"""Route planning service.

Analyses a trip between two coordinates: conditions at both ends, every
waypoint along the straight route, the trip-level feasibility verdict,
route options, advice, travel time and weather along the way.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import List

from travel_intel.schemas.common import Coordinate, RiskLevel, SafetyRating, TravelMode
from travel_intel.schemas.destination import DestinationAnalysis
from travel_intel.schemas.route import (
    QuickCheckResult,
    RouteAnalysis,
    RouteConditions,
    RouteSegment,
    RouteWeatherPoint,
)
from travel_intel.services.data_sources import WeatherSource
from travel_intel.services.route_segmenter import RouteSegmenter
from travel_intel.services.travel_intelligence_service import TravelIntelligenceService
from travel_intel.utils.geometry import haversine_km, route_bbox
from travel_intel.utils.route_risk import (
    assess_travel_feasibility,
    calculate_route_options,
    estimate_travel_time,
    generate_route_recommendations,
)

logger = logging.getLogger(__name__)

# Waypoints sampled for the weather forecast, counted from the origin
WEATHER_FORECAST_POINTS = 5

FALLBACK_ERROR = "Partial data - analysis services unavailable"
FALLBACK_RECOMMENDATIONS = [
    "Route analysis temporarily unavailable",
    "Use caution and check local conditions",
    "Consider using standard navigation services",
]
FALLBACK_ADVISORIES = ["System temporarily unavailable"]


def _conditions(analysis: DestinationAnalysis) -> RouteConditions:
    return RouteConditions(
        safety_rating=analysis.route_safety_rating,
        health_score=analysis.destination_health_score,
        weather=analysis.weather_snapshot,
        error=analysis.error,
    )


class RoutePlanningService:
    """Trip feasibility and safety analysis."""

    def __init__(
        self,
        intelligence: TravelIntelligenceService,
        segmenter: RouteSegmenter,
        weather: WeatherSource,
    ):
        self.intelligence = intelligence
        self.segmenter = segmenter
        self.weather = weather

    async def analyze_route(
        self,
        origin: Coordinate,
        destination: Coordinate,
        mode: TravelMode = TravelMode.DRIVING,
    ) -> RouteAnalysis:
        """Analyse a route from origin to destination.

        Args:
            origin: Start of the trip
            destination: End of the trip
            mode: Travel mode

        Returns:
            RouteAnalysis. On unexpected failure a fallback analysis with
            risk level UNKNOWN and ``error`` set.
        """
        try:
            logger.info(
                "Starting route analysis",
                extra={
                    "extra_fields": {
                        "origin": [origin.lat, origin.lng],
                        "destination": [destination.lat, destination.lng],
                        "mode": mode.value,
                    }
                },
            )

            origin_analysis, destination_analysis, segments = await asyncio.gather(
                self.intelligence.analyze_destination(origin.lat, origin.lng),
                self.intelligence.analyze_destination(destination.lat, destination.lng),
                self.segmenter.segment(origin, destination),
            )

            verdict = assess_travel_feasibility(
                origin_analysis, destination_analysis, segments, mode
            )
            recommendations = generate_route_recommendations(
                verdict, origin_analysis, destination_analysis, mode
            )
            options = calculate_route_options(segments, verdict, mode)
            total_distance = segments[-1].distance_from_origin_km if segments else 0.0

            return RouteAnalysis(
                travel_feasible=verdict.is_feasible,
                overall_risk_level=verdict.risk_level,
                risk_score=verdict.risk_score,
                risk_factors=verdict.risk_factors,
                origin_conditions=_conditions(origin_analysis),
                destination_conditions=_conditions(destination_analysis),
                route_segments=segments,
                recommended_route=options.best_route,
                alternative_routes=options.alternatives,
                safety_recommendations=recommendations,
                travel_advisories=verdict.advisories,
                estimated_travel_time=estimate_travel_time(total_distance, mode),
                weather_forecast=await self.get_route_weather_forecast(segments),
                bbox=route_bbox(origin.lat, origin.lng, destination.lat, destination.lng),
                timestamp=datetime.now(timezone.utc),
            )

        except Exception as e:
            logger.error(
                "Route analysis failed",
                extra={
                    "extra_fields": {
                        "error": str(e),
                        "origin": [origin.lat, origin.lng],
                        "destination": [destination.lat, destination.lng],
                    }
                },
                exc_info=True,
            )
            return self.get_fallback_route_analysis(origin, destination, mode)

    async def get_route_weather_forecast(
        self, segments: List[RouteSegment]
    ) -> List[RouteWeatherPoint]:
        """Current weather at the first few waypoints; failed points are skipped."""
        key_points = segments[:WEATHER_FORECAST_POINTS]

        results = await asyncio.gather(
            *(
                self.weather.get_weather_data(point.position.lat, point.position.lng)
                for point in key_points
            ),
            return_exceptions=True,
        )

        forecast: List[RouteWeatherPoint] = []
        for point, result in zip(key_points, results):
            if isinstance(result, Exception):
                logger.warning(f"Weather forecast failed for route point: {str(result)}")
                continue
            forecast.append(
                RouteWeatherPoint(
                    location=point.position,
                    weather=result,
                    segment_index=point.segment_index,
                )
            )

        return forecast

    def get_fallback_route_analysis(
        self, origin: Coordinate, destination: Coordinate, mode: TravelMode
    ) -> RouteAnalysis:
        """Minimal analysis used when the route could not be analysed."""
        distance = haversine_km(origin.lat, origin.lng, destination.lat, destination.lng)

        return RouteAnalysis(
            travel_feasible=None,
            overall_risk_level=RiskLevel.UNKNOWN,
            risk_score=None,
            origin_conditions=RouteConditions(error="Analysis unavailable"),
            destination_conditions=RouteConditions(error="Analysis unavailable"),
            safety_recommendations=list(FALLBACK_RECOMMENDATIONS),
            travel_advisories=list(FALLBACK_ADVISORIES),
            estimated_travel_time=estimate_travel_time(distance, mode),
            timestamp=datetime.now(timezone.utc),
            error=FALLBACK_ERROR,
        )

    async def quick_check(self, lat: float, lng: float) -> QuickCheckResult:
        """Safety summary for a single location.

        Runs a zero-length driving route on the location and reports the
        destination conditions. ``error`` is set when the route analysis
        or the location itself fell back to neutral values.
        """
        location = Coordinate(lat=lat, lng=lng)
        result = await self.analyze_route(location, location, TravelMode.DRIVING)
        conditions = result.destination_conditions

        return QuickCheckResult(
            location=location,
            safety_rating=conditions.safety_rating or SafetyRating.MEDIUM,
            health_score=50.0 if conditions.health_score is None else conditions.health_score,
            travel_feasible=result.travel_feasible,
            risk_level=result.overall_risk_level,
            recommendations=result.safety_recommendations,
            timestamp=result.timestamp,
            error=result.error or conditions.error,
        )
