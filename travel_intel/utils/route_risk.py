"""Route risk aggregation.

Folds the analyses of a route's origin, destination and intermediate
waypoints into a trip-level feasibility verdict using an additive point
system, and derives route options, advice and travel time from it.
Everything here is pure computation over already gathered data.
"""

import logging
import math
from typing import List

from travel_intel.config import (
    ENDPOINT_POOR_HEALTH_SCORE,
    ROUTE_RISK_POINTS,
    SEGMENT_POOR_HEALTH_SCORE,
    TRAVEL_SPEEDS_KMH,
)
from travel_intel.schemas.common import RiskLevel, SafetyRating, TravelMode
from travel_intel.schemas.destination import DestinationAnalysis
from travel_intel.schemas.route import (
    FeasibilityVerdict,
    RouteOption,
    RouteOptions,
    RouteSegment,
    TravelTimeEstimate,
)
from travel_intel.utils.scoring import risk_level_from_score

logger = logging.getLogger(__name__)

# Fraction of LOW-rated segments above which cycling is discouraged
CYCLING_LOW_SEGMENT_FRACTION = 0.3

# Walking is discouraged above this risk score
WALKING_MAX_RISK_SCORE = 50

NOT_RECOMMENDED_ADVISORY = "Travel NOT RECOMMENDED due to critical safety risks"


def assess_travel_feasibility(
    origin: DestinationAnalysis,
    destination: DestinationAnalysis,
    segments: List[RouteSegment],
    mode: TravelMode = TravelMode.DRIVING,
) -> FeasibilityVerdict:
    """Decide whether a trip is feasible and how risky it is.

    Risk points (order independent):
    - origin / destination rated LOW: +30 each
    - origin / destination health below 30: +20 each
    - each segment rated LOW: +15
    - each segment with health below 25: +10

    Levels: >= 80 CRITICAL, >= 60 HIGH, >= 30 MEDIUM, otherwise LOW.
    CRITICAL trips are infeasible; HIGH trips are feasible only by car.

    Args:
        origin: Analysis of the starting point
        destination: Analysis of the end point
        segments: Analysed waypoints along the route
        mode: Travel mode

    Returns:
        FeasibilityVerdict with risk factors and advisories
    """
    risk_factors: List[str] = []
    advisories: List[str] = []
    risk_score = 0

    if origin.route_safety_rating == SafetyRating.LOW:
        risk_factors.append("High risk origin location")
        risk_score += ROUTE_RISK_POINTS["origin_low_safety"]
    if origin.destination_health_score < ENDPOINT_POOR_HEALTH_SCORE:
        risk_factors.append("Poor environmental conditions at origin")
        risk_score += ROUTE_RISK_POINTS["origin_poor_health"]

    if destination.route_safety_rating == SafetyRating.LOW:
        risk_factors.append("High risk destination")
        risk_score += ROUTE_RISK_POINTS["destination_low_safety"]
    if destination.destination_health_score < ENDPOINT_POOR_HEALTH_SCORE:
        risk_factors.append("Poor environmental conditions at destination")
        risk_score += ROUTE_RISK_POINTS["destination_poor_health"]

    low_safety_segments = sum(
        1 for segment in segments if segment.safety_rating == SafetyRating.LOW
    )
    poor_health_segments = sum(
        1 for segment in segments if segment.health_score < SEGMENT_POOR_HEALTH_SCORE
    )
    risk_score += low_safety_segments * ROUTE_RISK_POINTS["segment_low_safety"]
    risk_score += poor_health_segments * ROUTE_RISK_POINTS["segment_poor_health"]

    if low_safety_segments > 0:
        risk_factors.append(f"{low_safety_segments} high-risk route segments detected")

    if mode == TravelMode.WALKING and risk_score > WALKING_MAX_RISK_SCORE:
        advisories.append("Walking not recommended due to high environmental risks")

    low_fraction = low_safety_segments / len(segments) if segments else 0.0
    if mode == TravelMode.CYCLING and low_fraction > CYCLING_LOW_SEGMENT_FRACTION:
        advisories.append("Cycling may be dangerous due to route conditions")

    risk_level = risk_level_from_score(risk_score)

    if risk_level == RiskLevel.CRITICAL:
        is_feasible = False
    elif risk_level == RiskLevel.HIGH:
        is_feasible = mode == TravelMode.DRIVING
    else:
        is_feasible = True

    if not is_feasible:
        advisories.append(NOT_RECOMMENDED_ADVISORY)

    logger.info(
        f"Route risk {risk_score} ({risk_level.value}), feasible={is_feasible}, mode={mode.value}"
    )

    return FeasibilityVerdict(
        is_feasible=is_feasible,
        risk_level=risk_level,
        risk_score=risk_score,
        risk_factors=risk_factors,
        advisories=advisories,
    )


def generate_route_recommendations(
    verdict: FeasibilityVerdict,
    origin: DestinationAnalysis,
    destination: DestinationAnalysis,
    mode: TravelMode,
) -> List[str]:
    """General advice for the trip as a whole."""
    recommendations: List[str] = []

    if verdict.risk_level in (RiskLevel.HIGH, RiskLevel.CRITICAL):
        recommendations.append("Consider postponing travel until conditions improve")
        recommendations.append("Monitor weather and environmental conditions closely")

    if SafetyRating.LOW in (origin.route_safety_rating, destination.route_safety_rating):
        recommendations.append("Use GPS navigation with real-time traffic updates")
        recommendations.append("Travel during daylight hours only")

    if mode in (TravelMode.WALKING, TravelMode.CYCLING):
        recommendations.append("Bring emergency supplies and communication device")
        recommendations.append("Inform others of your planned route and timeline")

    recommendations.append("Check for local travel advisories before departure")
    recommendations.append("Have alternative routes planned in case of emergencies")

    return recommendations


def calculate_route_options(
    segments: List[RouteSegment], verdict: FeasibilityVerdict, mode: TravelMode
) -> RouteOptions:
    """Recommended straight-line route and a faster alternative.

    The alternative is withheld for CRITICAL trips. Safety scores are
    100 minus the trip risk (minus 20 more for the alternative), floored at 0.
    """
    best_route = RouteOption(
        route_type="optimal_safety",
        description="Route optimized for safety and environmental conditions",
        waypoints=[segment.position for segment in segments],
        safety_score=max(0.0, 100 - verdict.risk_score),
        recommended_mode=mode,
    )

    alternatives: List[RouteOption] = []
    if verdict.risk_level != RiskLevel.CRITICAL:
        alternatives.append(
            RouteOption(
                route_type="fastest",
                description="Direct route with minimal stops",
                safety_score=max(0.0, 100 - verdict.risk_score - 20),
                note="Faster but potentially higher risk",
            )
        )

    return RouteOptions(best_route=best_route, alternatives=alternatives)


def estimate_travel_time(total_distance_km: float, mode: TravelMode) -> TravelTimeEstimate:
    """Travel time at the average speed for the mode.

    Args:
        total_distance_km: Route length
        mode: Travel mode

    Returns:
        Whole hours and remaining whole minutes
    """
    speed = TRAVEL_SPEEDS_KMH.get(mode.value, TRAVEL_SPEEDS_KMH["driving"])
    hours = total_distance_km / speed
    whole_hours = math.floor(hours)

    return TravelTimeEstimate(
        hours=whole_hours,
        minutes=int((hours - whole_hours) * 60),
        total_distance_km=round(total_distance_km, 2),
    )
