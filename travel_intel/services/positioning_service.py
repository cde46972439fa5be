"""Satellite positioning accuracy model.

Estimates horizontal accuracy, altitude and satellite visibility for a
coordinate from simple geographic heuristics. The model is deterministic;
the atmospheric factor and satellite count are injected so callers can
reproduce provider conditions.
"""

import logging
from typing import Optional

from travel_intel.config import get_settings
from travel_intel.schemas.conditions import PositionInfo

logger = logging.getLogger(__name__)

# Typical open-sky Galileo accuracy in metres
BASE_ACCURACY_M = 2.0

MOUNTAIN_ALTITUDE_M = 1750.0
COASTAL_ALTITUDE_M = 50.0
DEFAULT_ALTITUDE_M = 275.0


class PositioningService:
    """Deterministic positioning accuracy estimates."""

    def __init__(
        self,
        satellite_count: Optional[int] = None,
        atmospheric_factor: Optional[float] = None,
    ):
        settings = get_settings()
        self.satellite_count = (
            settings.POSITIONING_SATELLITE_COUNT if satellite_count is None else satellite_count
        )
        self.atmospheric_factor = (
            settings.POSITIONING_ATMOSPHERIC_FACTOR
            if atmospheric_factor is None
            else atmospheric_factor
        )

    async def get_positioning_accuracy(self, lat: float, lng: float) -> PositionInfo:
        """Positioning quality at a coordinate.

        Args:
            lat: Latitude
            lng: Longitude

        Returns:
            PositionInfo with accuracy in metres and HDOP
        """
        accuracy = self.calculate_accuracy(lat, lng)
        logger.debug(f"Positioning accuracy {accuracy}m at ({lat}, {lng})")

        return PositionInfo(
            latitude=lat,
            longitude=lng,
            altitude=self.estimate_altitude(lat, lng),
            accuracy=accuracy,
            satellite_count=self.satellite_count,
            hdop=round(accuracy / 2, 2),
        )

    def calculate_accuracy(self, lat: float, lng: float) -> float:
        """Horizontal accuracy in metres.

        Accuracy degrades towards the poles (up to +50 %) and in urban
        canyons (+50 %), then scales with the atmospheric factor.
        """
        lat_factor = 1 + (abs(lat) / 90) * 0.5
        urban_factor = 1.5 if self.is_urban_area(lat, lng) else 1.0

        return round(BASE_ACCURACY_M * lat_factor * urban_factor * self.atmospheric_factor, 2)

    @staticmethod
    def is_urban_area(lat: float, lng: float) -> bool:
        """Coarse urban-area heuristic based on coordinate magnitude."""
        coord_sum = abs(lat) + abs(lng)
        return 50 < coord_sum < 180

    @staticmethod
    def estimate_altitude(lat: float, lng: float) -> float:
        """Representative altitude band for the coordinate."""
        if abs(lat) > 40 and abs(lng) > 80:
            return MOUNTAIN_ALTITUDE_M
        if abs(lat) < 10 or abs(lng) < 10:
            return COASTAL_ALTITUDE_M
        return DEFAULT_ALTITUDE_M
