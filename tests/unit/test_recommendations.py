"""Unit tests for safety recommendation rules."""

from travel_intel.schemas.common import RiskLevel, SafetyRating
from travel_intel.schemas.conditions import HealthScoreResult, SurfaceMetrics, WeatherSnapshot
from travel_intel.utils.recommendations import (
    BASE_EQUIPMENT,
    extract_priority_alerts,
    fallback_safety_recommendations,
    generate_safety_recommendations,
    suggest_best_travel_times,
    suggest_equipment,
)

CLEAR_WEATHER = WeatherSnapshot(temperature=18, uv=3, precip_mm=0, visibility_km=10, is_day=1)
GREEN_SURFACE = SurfaceMetrics(vegetation_index=0.75, water_index=0.1, snow_index=0.05)


def health(score: float, visibility_contribution: float = 15.0) -> HealthScoreResult:
    return HealthScoreResult(
        score=score, components={"visibility_contribution": visibility_contribution}
    )


def test_good_conditions():
    """Healthy, safe destination gets LOW risk and positive advice."""
    result = generate_safety_recommendations(
        health(82.5), SafetyRating.HIGH, CLEAR_WEATHER, GREEN_SURFACE
    )

    assert result.risk_level == RiskLevel.LOW
    assert "Good conditions for travel and outdoor activities" in result.recommendations
    assert "Safe conditions - enjoy your activities" in result.recommendations
    assert result.priority_alerts == []
    assert result.equipment_suggestions == BASE_EQUIPMENT


def test_risk_level_from_health_score():
    """Risk level follows the health score thresholds 30 / 60."""
    medium = generate_safety_recommendations(
        health(45), SafetyRating.HIGH, CLEAR_WEATHER, GREEN_SURFACE
    )
    high = generate_safety_recommendations(
        health(20), SafetyRating.HIGH, CLEAR_WEATHER, GREEN_SURFACE
    )

    assert medium.risk_level == RiskLevel.MEDIUM
    assert high.risk_level == RiskLevel.HIGH
    assert any(alert.startswith("CAUTION") for alert in high.priority_alerts)


def test_low_safety_forces_high_risk():
    """A LOW safety rating raises the risk level to HIGH."""
    result = generate_safety_recommendations(
        health(90), SafetyRating.LOW, CLEAR_WEATHER, GREEN_SURFACE
    )

    assert result.risk_level == RiskLevel.HIGH
    assert "HIGH RISK: Avoid travel if possible, use extreme caution" in result.priority_alerts
    assert "Satellite communication device (emergency beacon)" in result.equipment_suggestions
    assert result.best_travel_times[0] == "Travel only during daylight hours (sunrise to sunset)"


def test_extreme_weather_rules():
    """Cold, UV, rain, visibility and air quality each add a warning."""
    weather = WeatherSnapshot(
        temperature=-5, uv=9, precip_mm=15, visibility_km=0.5, air_quality_pm2_5=80
    )
    result = generate_safety_recommendations(
        health(40, visibility_contribution=0.75), SafetyRating.MEDIUM, weather, GREEN_SURFACE
    )

    alerts = result.priority_alerts
    assert "COLD WARNING: Dress warmly, risk of hypothermia" in alerts
    assert "EXTREME UV: Use SPF 30+ sunscreen, seek shade during peak hours" in alerts
    assert (
        "LIMITED VISIBILITY: Use GPS navigation, carry backup navigation tools"
        in result.recommendations
    )
    assert "RAIN EXPECTED: Carry waterproof gear, beware of slippery surfaces" in (
        result.recommendations
    )
    assert "POOR AIR QUALITY: Limit outdoor activities, consider face mask" in (
        result.recommendations
    )


def test_surface_rules():
    """Water, snow and sparse vegetation add surface advice."""
    metrics = SurfaceMetrics(vegetation_index=0.1, water_index=0.4, snow_index=0.3)
    result = generate_safety_recommendations(
        health(35), SafetyRating.MEDIUM, CLEAR_WEATHER, metrics
    )

    assert "HIGH WATER PRESENCE: Risk of flooding, avoid low-lying areas" in result.recommendations
    assert "Check avalanche conditions in mountainous areas" in result.recommendations
    assert "Carry extra water - arid conditions possible" in result.recommendations


def test_recommendations_are_unique():
    """Duplicate messages are removed, first occurrence kept."""
    result = generate_safety_recommendations(
        health(20), SafetyRating.LOW, WeatherSnapshot(temperature=40), GREEN_SURFACE
    )

    assert len(result.recommendations) == len(set(result.recommendations))


def test_extract_priority_alerts_case_insensitive():
    """Alert keywords match regardless of case."""
    alerts = extract_priority_alerts(
        ["Danger of rockfall", "Enjoy the view", "use caution", "Danger of rockfall"]
    )

    assert alerts == ["Danger of rockfall", "use caution"]


def test_suggest_equipment_defaults_temperature():
    """A missing temperature counts as 20°C (no temperature gear)."""
    equipment = suggest_equipment(WeatherSnapshot(), GREEN_SURFACE, SafetyRating.HIGH)
    assert equipment == BASE_EQUIPMENT


def test_suggest_equipment_conditions():
    """Heat, rain, UV, snow and water each add equipment."""
    equipment = suggest_equipment(
        WeatherSnapshot(temperature=33, precip_mm=6, uv=7),
        SurfaceMetrics(vegetation_index=0.5, water_index=0.25, snow_index=0.15),
        SafetyRating.MEDIUM,
    )

    assert "Extra water (3L+ per person)" in equipment
    assert "Waterproof jacket and pants" in equipment
    assert "SPF 30+ sunscreen" in equipment
    assert "Winter boots with good traction" in equipment
    assert "Water purification tablets/filter" in equipment


def test_suggest_best_travel_times():
    """Timing advice for heat, cold, rain and fog."""
    hot = suggest_best_travel_times(WeatherSnapshot(temperature=35), SafetyRating.HIGH)
    cold = suggest_best_travel_times(WeatherSnapshot(temperature=-3), SafetyRating.HIGH)
    foggy = suggest_best_travel_times(
        WeatherSnapshot(precip_mm=12, visibility_km=1.5), SafetyRating.MEDIUM
    )

    assert "Avoid midday hours (11 AM - 3 PM) due to heat/UV" in hot
    assert "Travel during warmest part of day (10 AM - 2 PM)" in cold
    assert "Check hourly weather forecast to avoid heaviest precipitation" in foggy
    assert "Wait for improved visibility conditions before traveling" in foggy


def test_fallback_recommendations():
    """Fallback advice has UNKNOWN risk and an availability alert."""
    result = fallback_safety_recommendations()

    assert result.risk_level == RiskLevel.UNKNOWN
    assert result.priority_alerts == ["Analysis temporarily unavailable - use extra caution"]
    assert result.recommendations
