"""Shared coordinate and rating types."""

from enum import Enum

from pydantic import BaseModel, Field


class Coordinate(BaseModel):
    """Geographic coordinate."""

    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class SafetyRating(str, Enum):
    """Discrete safety rating for a single location.

    HIGH is the SAFE end of the scale and LOW the dangerous one. Consumers
    branch on the literal values, so they must not change.
    """

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class RiskLevel(str, Enum):
    """Risk classification for a destination or a whole trip.

    Unlike SafetyRating, HIGH and CRITICAL are the DANGEROUS end of the
    scale. UNKNOWN is only reported by fallback records when the analysis
    could not run.
    """

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"
    UNKNOWN = "UNKNOWN"


class TravelMode(str, Enum):
    """Means of travel for route feasibility checks."""

    DRIVING = "driving"
    WALKING = "walking"
    CYCLING = "cycling"
