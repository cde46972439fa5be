"""Route safety rating service.

Rates how safe it is to travel at a location from satellite positioning
quality and surface conditions.
"""

import logging
from typing import Optional

from travel_intel.schemas.common import SafetyRating
from travel_intel.schemas.conditions import SurfaceMetrics
from travel_intel.services.data_sources import PositioningSource
from travel_intel.services.scoring_service import SafetyRatingCalculator

logger = logging.getLogger(__name__)

# Surface conditions assumed when no imagery is available
DEFAULT_SURFACE_METRICS = SurfaceMetrics(
    vegetation_index=0.5,
    water_index=0.1,
    snow_index=0.05,
)


class RouteSafetyService:
    """Safety rating for a single location."""

    def __init__(
        self,
        positioning: PositioningSource,
        calculator: Optional[SafetyRatingCalculator] = None,
    ):
        self.positioning = positioning
        self.calculator = calculator or SafetyRatingCalculator()

    async def analyze_route_safety(
        self,
        lat: float,
        lng: float,
        metrics: Optional[SurfaceMetrics] = None,
        accuracy_m: Optional[float] = None,
    ) -> SafetyRating:
        """Rate travel safety at a coordinate.

        Args:
            lat: Latitude
            lng: Longitude
            metrics: Surface indices; typical mid-latitude values when omitted
            accuracy_m: Positioning accuracy; fetched from the positioning
                source when omitted

        Returns:
            SafetyRating (HIGH = safe). MEDIUM when positioning data is
            unavailable.
        """
        try:
            if accuracy_m is None:
                position = await self.positioning.get_positioning_accuracy(lat, lng)
                accuracy_m = position.accuracy

            rating = self.calculator.compute(accuracy_m, metrics or DEFAULT_SURFACE_METRICS)

        except Exception as e:
            logger.error(
                "Route safety analysis failed",
                extra={"extra_fields": {"lat": lat, "lng": lng, "error": str(e)}},
            )
            return SafetyRating.MEDIUM

        logger.debug(f"Safety rating {rating.value} at ({lat}, {lng}), accuracy {accuracy_m}m")
        return rating
