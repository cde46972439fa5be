"""Destination analysis response schemas."""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from travel_intel.schemas.common import RiskLevel, SafetyRating
from travel_intel.schemas.conditions import PositionInfo, SurfaceMetrics, WeatherSnapshot


class SafetyRecommendations(BaseModel):
    """Advice derived from the health score, safety rating and conditions."""

    risk_level: RiskLevel
    recommendations: List[str] = []
    priority_alerts: List[str] = []
    equipment_suggestions: List[str] = []
    best_travel_times: List[str] = []


class DestinationAnalysis(BaseModel):
    """Unified travel intelligence record for one coordinate.

    When a data source fails the record is still structurally complete;
    it carries fixed fallback values and a non-null ``error``.
    """

    position_info: PositionInfo
    surface_indices: SurfaceMetrics
    weather_snapshot: WeatherSnapshot
    destination_health_score: float = Field(..., ge=0.0, le=100.0)
    health_components: Dict[str, float]
    route_safety_rating: SafetyRating
    safety_recommendations: SafetyRecommendations
    bbox: List[float] = Field(..., min_length=4, max_length=4)
    timestamp: datetime
    valid_until: datetime
    error: Optional[str] = None

    @property
    def is_fallback(self) -> bool:
        """True when this record holds fallback values."""
        return self.error is not None
