"""Route segmentation service.

Splits a straight origin-destination route into waypoints and analyses
each waypoint as a destination of its own.
"""

import asyncio
import logging
from typing import List, Optional, Protocol

from travel_intel.config import get_settings
from travel_intel.schemas.common import Coordinate, SafetyRating
from travel_intel.schemas.destination import DestinationAnalysis
from travel_intel.schemas.route import RouteSegment
from travel_intel.utils.geometry import haversine_km
from travel_intel.utils.segmentation import Waypoint, count_route_segments, interpolate_waypoints

logger = logging.getLogger(__name__)

SEGMENT_FALLBACK_HEALTH_SCORE = 50.0
SEGMENT_FALLBACK_ERROR = "Analysis unavailable"


class DestinationAnalyzer(Protocol):
    async def analyze_destination(self, lat: float, lng: float) -> DestinationAnalysis: ...


class RouteSegmenter:
    """Analysed waypoints between two coordinates.

    Waypoint analyses run concurrently, bounded by ``concurrency``. A
    waypoint whose analysis raises keeps its slot with neutral values, so
    the result always holds ``segments + 1`` points in index order.
    """

    def __init__(
        self,
        analyzer: DestinationAnalyzer,
        segment_km: Optional[float] = None,
        min_segments: Optional[int] = None,
        max_segments: Optional[int] = None,
        concurrency: Optional[int] = None,
    ):
        settings = get_settings()
        self.analyzer = analyzer
        self.segment_km = settings.ROUTE_SEGMENT_KM if segment_km is None else segment_km
        self.min_segments = settings.ROUTE_MIN_SEGMENTS if min_segments is None else min_segments
        self.max_segments = settings.ROUTE_MAX_SEGMENTS if max_segments is None else max_segments
        self.concurrency = max(
            1, settings.SEGMENT_ANALYSIS_CONCURRENCY if concurrency is None else concurrency
        )

    def plan_waypoints(self, origin: Coordinate, destination: Coordinate) -> List[Waypoint]:
        """Waypoints for a route, origin and destination included."""
        distance_km = haversine_km(origin.lat, origin.lng, destination.lat, destination.lng)
        num_segments = count_route_segments(
            distance_km, self.segment_km, self.min_segments, self.max_segments
        )
        return interpolate_waypoints(
            origin.lat, origin.lng, destination.lat, destination.lng, num_segments
        )

    async def segment(self, origin: Coordinate, destination: Coordinate) -> List[RouteSegment]:
        """Analyse every waypoint of a route.

        Args:
            origin: Start of the route
            destination: End of the route

        Returns:
            RouteSegments ordered by segment_index; index 0 is the origin
            and the last index the destination
        """
        distance_km = haversine_km(origin.lat, origin.lng, destination.lat, destination.lng)
        waypoints = self.plan_waypoints(origin, destination)
        semaphore = asyncio.Semaphore(self.concurrency)

        logger.info(
            f"Analysing {len(waypoints)} waypoints over {distance_km:.1f}km "
            f"(concurrency {self.concurrency})"
        )

        async def analyse(waypoint: Waypoint) -> RouteSegment:
            async with semaphore:
                return await self._analyse_waypoint(waypoint, distance_km)

        segments = await asyncio.gather(*(analyse(waypoint) for waypoint in waypoints))
        return sorted(segments, key=lambda segment: segment.segment_index)

    async def _analyse_waypoint(self, waypoint: Waypoint, distance_km: float) -> RouteSegment:
        position = Coordinate(lat=waypoint.lat, lng=waypoint.lng)
        distance_from_origin = distance_km * waypoint.ratio

        try:
            analysis = await self.analyzer.analyze_destination(waypoint.lat, waypoint.lng)
        except Exception as e:
            logger.warning(
                "Segment analysis failed",
                extra={"extra_fields": {"segment": waypoint.index, "error": str(e)}},
            )
            return RouteSegment(
                position=position,
                safety_rating=SafetyRating.MEDIUM,
                health_score=SEGMENT_FALLBACK_HEALTH_SCORE,
                surface_conditions=None,
                segment_index=waypoint.index,
                distance_from_origin_km=distance_from_origin,
                error=SEGMENT_FALLBACK_ERROR,
            )

        return RouteSegment(
            position=position,
            safety_rating=analysis.route_safety_rating,
            health_score=analysis.destination_health_score,
            surface_conditions=analysis.surface_indices,
            segment_index=waypoint.index,
            distance_from_origin_km=distance_from_origin,
            error=analysis.error,
        )
