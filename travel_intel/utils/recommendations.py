"""Safety advice derived from a destination analysis.

Rule tables that turn a health score, safety rating, weather snapshot and
surface indices into recommendation lists. All functions are pure.
"""

from typing import List, Optional

from travel_intel.schemas.common import RiskLevel, SafetyRating
from travel_intel.schemas.conditions import HealthScoreResult, SurfaceMetrics, WeatherSnapshot
from travel_intel.schemas.destination import SafetyRecommendations
from travel_intel.utils.scoring import health_risk_level

ALERT_KEYWORDS = ("WARNING", "HIGH RISK", "CAUTION", "EXTREME", "DANGER")

GENERAL_RECOMMENDATIONS = [
    "Carry emergency communication device",
    "Check local weather forecast before departure",
    "Inform someone of your travel plans",
]

BASE_EQUIPMENT = ["GPS device or smartphone with offline maps", "First aid kit"]

# Assumed when the provider reports no temperature
DEFAULT_TEMPERATURE_C = 20.0


def _unique(items: List[str]) -> List[str]:
    return list(dict.fromkeys(items))


def _or(value: Optional[float], default: float) -> float:
    return default if value is None else value


def _condition_recommendations(
    health: HealthScoreResult,
    safety_rating: SafetyRating,
    weather: WeatherSnapshot,
    metrics: SurfaceMetrics,
) -> List[str]:
    recommendations: List[str] = []

    if health.score < 30:
        recommendations.append(
            "CAUTION: Low destination health score - consider alternative location"
        )
    elif health.score < 60:
        recommendations.append("Exercise normal caution - monitor conditions")
    else:
        recommendations.append("Good conditions for travel and outdoor activities")

    if safety_rating == SafetyRating.LOW:
        recommendations.extend(
            [
                "HIGH RISK: Avoid travel if possible, use extreme caution",
                "Travel only during daylight hours",
                "Inform others of your exact route and expected return",
            ]
        )
    elif safety_rating == SafetyRating.MEDIUM:
        recommendations.extend(
            [
                "Moderate risk - use standard safety precautions",
                "Check weather conditions before departure",
            ]
        )
    else:
        recommendations.append("Safe conditions - enjoy your activities")

    if weather.temperature is not None:
        if weather.temperature < 0:
            recommendations.append("COLD WARNING: Dress warmly, risk of hypothermia")
            recommendations.append("Carry emergency supplies and warm clothing")
        elif weather.temperature > 35:
            recommendations.append("HEAT WARNING: Stay hydrated, avoid midday sun")
            recommendations.append("Wear sun protection and light-colored clothing")

    if weather.uv is not None and weather.uv > 8:
        recommendations.append("EXTREME UV: Use SPF 30+ sunscreen, seek shade during peak hours")

    if weather.precip_mm is not None and weather.precip_mm > 10:
        recommendations.append("RAIN EXPECTED: Carry waterproof gear, beware of slippery surfaces")

    if weather.visibility_km is not None and weather.visibility_km < 1:
        recommendations.append("POOR VISIBILITY: Reduce speed, use navigation aids")

    if weather.air_quality_pm2_5 is not None and weather.air_quality_pm2_5 > 50:
        recommendations.append("POOR AIR QUALITY: Limit outdoor activities, consider face mask")

    if metrics.water_index > 0.3:
        recommendations.append("HIGH WATER PRESENCE: Risk of flooding, avoid low-lying areas")
        recommendations.append("Waterproof equipment recommended")

    if metrics.snow_index > 0.2:
        recommendations.append(
            "SNOW/ICE CONDITIONS: Winter gear required, traction devices advised"
        )
        recommendations.append("Check avalanche conditions in mountainous areas")

    if metrics.vegetation_index < 0.2:
        recommendations.append("SPARSE VEGETATION: Limited natural shelter, bring sun protection")
        recommendations.append("Carry extra water - arid conditions possible")

    if abs(health.components.get("visibility_contribution", 0.0)) < 5:
        recommendations.append(
            "LIMITED VISIBILITY: Use GPS navigation, carry backup navigation tools"
        )

    recommendations.extend(GENERAL_RECOMMENDATIONS)
    return recommendations


def extract_priority_alerts(recommendations: List[str]) -> List[str]:
    """Recommendations that contain an alert keyword (case-insensitive).

    Args:
        recommendations: Recommendation messages

    Returns:
        Unique alert messages in their original order
    """
    alerts = [
        recommendation
        for recommendation in recommendations
        if any(keyword in recommendation.upper() for keyword in ALERT_KEYWORDS)
    ]
    return _unique(alerts)


def suggest_equipment(
    weather: WeatherSnapshot, metrics: SurfaceMetrics, safety_rating: SafetyRating
) -> List[str]:
    """Equipment list for the expected conditions.

    Args:
        weather: Current weather snapshot
        metrics: Surface indices
        safety_rating: Location safety rating

    Returns:
        Equipment suggestions, always starting with navigation and first aid
    """
    equipment = list(BASE_EQUIPMENT)

    temperature = _or(weather.temperature, DEFAULT_TEMPERATURE_C)
    if temperature < 5:
        equipment.append("Warm clothing and emergency blanket")
        equipment.append("Insulated water bottles")
    elif temperature > 30:
        equipment.append("Sun hat and UV protection clothing")
        equipment.append("Extra water (3L+ per person)")

    if _or(weather.precip_mm, 0.0) > 5:
        equipment.append("Waterproof jacket and pants")
        equipment.append("Dry bags for electronics")

    if _or(weather.uv, 0.0) > 6:
        equipment.append("SPF 30+ sunscreen")
        equipment.append("Sunglasses with UV protection")

    if metrics.snow_index > 0.1:
        equipment.append("Winter boots with good traction")
        equipment.append("Trekking poles or ice axe if mountaineering")

    if metrics.water_index > 0.2:
        equipment.append("Waterproof boots or gaiters")
        equipment.append("Water purification tablets/filter")

    if safety_rating == SafetyRating.LOW:
        equipment.append("Satellite communication device (emergency beacon)")
        equipment.append("Whistle for emergency signaling")
        equipment.append("Headlamp with extra batteries")

    return equipment


def suggest_best_travel_times(weather: WeatherSnapshot, safety_rating: SafetyRating) -> List[str]:
    """Time-of-day advice for the expected conditions.

    Args:
        weather: Current weather snapshot
        safety_rating: Location safety rating

    Returns:
        Travel timing suggestions
    """
    suggestions: List[str] = []

    if safety_rating == SafetyRating.LOW:
        suggestions.append("Travel only during daylight hours (sunrise to sunset)")
        suggestions.append("Avoid travel during adverse weather conditions")
    else:
        suggestions.append("Early morning or late afternoon for best visibility")

    temperature = _or(weather.temperature, DEFAULT_TEMPERATURE_C)
    uv = _or(weather.uv, 0.0)

    if temperature > 30 or uv > 8:
        suggestions.append("Avoid midday hours (11 AM - 3 PM) due to heat/UV")
        suggestions.append("Best times: Early morning (6-9 AM) or evening (5-7 PM)")

    if temperature < 0:
        suggestions.append("Travel during warmest part of day (10 AM - 2 PM)")

    if _or(weather.precip_mm, 0.0) > 10:
        suggestions.append("Check hourly weather forecast to avoid heaviest precipitation")

    if _or(weather.visibility_km, 10.0) < 2:
        suggestions.append("Wait for improved visibility conditions before traveling")

    return suggestions


def generate_safety_recommendations(
    health: HealthScoreResult,
    safety_rating: SafetyRating,
    weather: WeatherSnapshot,
    metrics: SurfaceMetrics,
) -> SafetyRecommendations:
    """Build the full recommendation record for a destination.

    The risk level comes from the health score (< 30 HIGH, < 60 MEDIUM,
    otherwise LOW) and is raised to HIGH when the safety rating is LOW.

    Args:
        health: Computed health score and components
        safety_rating: Location safety rating
        weather: Current weather snapshot
        metrics: Surface indices

    Returns:
        SafetyRecommendations
    """
    risk_level = health_risk_level(health.score)
    if safety_rating == SafetyRating.LOW:
        risk_level = RiskLevel.HIGH

    recommendations = _unique(_condition_recommendations(health, safety_rating, weather, metrics))

    return SafetyRecommendations(
        risk_level=risk_level,
        recommendations=recommendations,
        priority_alerts=extract_priority_alerts(recommendations),
        equipment_suggestions=suggest_equipment(weather, metrics, safety_rating),
        best_travel_times=suggest_best_travel_times(weather, safety_rating),
    )


def fallback_safety_recommendations() -> SafetyRecommendations:
    """Generic advice used when the destination could not be analysed."""
    return SafetyRecommendations(
        risk_level=RiskLevel.UNKNOWN,
        recommendations=[
            "Exercise standard travel caution",
            "Check local weather and road conditions",
            "Carry emergency communication device",
            "Inform others of your travel plans",
            "Monitor conditions throughout your journey",
        ],
        priority_alerts=["Analysis temporarily unavailable - use extra caution"],
        equipment_suggestions=[
            *BASE_EQUIPMENT,
            "Weather-appropriate clothing",
            "Emergency supplies",
        ],
        best_travel_times=[
            "Travel during daylight hours when possible",
            "Check weather forecast before departure",
        ],
    )
