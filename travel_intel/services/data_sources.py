"""Data source capabilities consumed by the analysis services.

Any object with the matching coroutine can stand in for the bundled
provider clients, which is how tests inject deterministic data.
Implementations raise ExternalServiceError when the provider fails.
"""

from typing import Protocol

from travel_intel.schemas.conditions import PositionInfo, SurfaceAnalysis, WeatherSnapshot


class PositioningSource(Protocol):
    async def get_positioning_accuracy(self, lat: float, lng: float) -> PositionInfo: ...


class SurfaceImagerySource(Protocol):
    async def get_surface_indices(
        self, lat: float, lng: float, mode: str = "all"
    ) -> SurfaceAnalysis: ...


class WeatherSource(Protocol):
    async def get_weather_data(self, lat: float, lng: float) -> WeatherSnapshot: ...
