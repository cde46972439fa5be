"""Route analysis request/response schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from travel_intel.schemas.common import Coordinate, RiskLevel, SafetyRating, TravelMode
from travel_intel.schemas.conditions import SurfaceMetrics, WeatherSnapshot


class RouteSegment(BaseModel):
    """Analysed waypoint along a route.

    Index 0 is the origin and the last index the destination. A waypoint
    whose analysis failed keeps its place with neutral values and an error.
    """

    position: Coordinate
    safety_rating: SafetyRating
    health_score: float
    surface_conditions: Optional[SurfaceMetrics] = None
    segment_index: int
    distance_from_origin_km: float
    error: Optional[str] = None


class FeasibilityVerdict(BaseModel):
    """Trip-level risk assessment."""

    is_feasible: bool
    risk_level: RiskLevel
    risk_score: float = Field(..., ge=0.0)
    risk_factors: List[str] = []
    advisories: List[str] = []


class RouteOption(BaseModel):
    """Candidate route with a safety score derived from the trip risk."""

    route_type: str
    description: str
    safety_score: float
    waypoints: List[Coordinate] = []
    recommended_mode: Optional[TravelMode] = None
    note: Optional[str] = None


class RouteOptions(BaseModel):
    """Recommended route and its alternatives."""

    best_route: RouteOption
    alternatives: List[RouteOption] = []


class TravelTimeEstimate(BaseModel):
    """Travel time from straight-line distance and mode speed."""

    hours: int
    minutes: int
    total_distance_km: float


class RouteWeatherPoint(BaseModel):
    """Weather sampled at one waypoint."""

    location: Coordinate
    weather: WeatherSnapshot
    segment_index: int


class RouteConditions(BaseModel):
    """Conditions at the origin or destination of a route."""

    safety_rating: Optional[SafetyRating] = None
    health_score: Optional[float] = None
    weather: Optional[WeatherSnapshot] = None
    error: Optional[str] = None


class RouteAnalysis(BaseModel):
    """Full route feasibility and safety analysis."""

    travel_feasible: Optional[bool]
    overall_risk_level: RiskLevel
    risk_score: Optional[float]
    risk_factors: List[str] = []
    origin_conditions: RouteConditions
    destination_conditions: RouteConditions
    route_segments: List[RouteSegment] = []
    recommended_route: Optional[RouteOption] = None
    alternative_routes: List[RouteOption] = []
    safety_recommendations: List[str] = []
    travel_advisories: List[str] = []
    estimated_travel_time: TravelTimeEstimate
    weather_forecast: List[RouteWeatherPoint] = []
    bbox: Optional[List[float]] = Field(
        None, description="Route extent as [min_lng, min_lat, max_lng, max_lat]"
    )
    timestamp: datetime
    error: Optional[str] = None

    @property
    def is_degraded(self) -> bool:
        """True when the route or any analysed point holds fallback values."""
        return (
            self.error is not None
            or self.origin_conditions.error is not None
            or self.destination_conditions.error is not None
            or any(segment.error is not None for segment in self.route_segments)
        )


class QuickCheckResult(BaseModel):
    """Single-location safety summary."""

    location: Coordinate
    safety_rating: SafetyRating
    health_score: float
    travel_feasible: Optional[bool]
    risk_level: RiskLevel
    recommendations: List[str] = []
    timestamp: datetime
    error: Optional[str] = None
