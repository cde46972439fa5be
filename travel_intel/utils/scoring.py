"""Scoring utilities for health, safety and risk calculations.

Small numeric helpers shared by the calculators and the route risk
aggregation: rounding, clamping, score normalization and the threshold
tables that turn continuous scores into ratings.
"""

import math
from decimal import ROUND_HALF_UP, Decimal

from travel_intel.config import RISK_LEVEL_THRESHOLDS, SAFETY_RATING_THRESHOLDS
from travel_intel.schemas.common import RiskLevel, SafetyRating


def round_half_up(value: float, ndigits: int = 2) -> float:
    """Round half away from zero on the decimal representation.

    ``round(2.675, 2)`` gives 2.67 because of binary floating point; the
    scores are published with conventional rounding, so this gives 2.68.

    Args:
        value: Number to round
        ndigits: Decimal places to keep

    Returns:
        Rounded value as float; infinities and NaN are returned unchanged
    """
    # Floats this large have no fractional part left to round
    if not math.isfinite(value) or abs(value) >= 2**52:
        return value
    quantum = Decimal(1).scaleb(-ndigits)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def clamp(value: float, lower: float, upper: float) -> float:
    """Limit value to the closed range [lower, upper]."""
    return max(lower, min(upper, value))


def normalize_health_score(raw: float) -> float:
    """Map a raw weighted sum onto the 0-100 health scale.

    Raw values in [-1, 1] map linearly to [0, 100]; anything outside that
    range saturates at the bounds instead of being rescaled.

    Args:
        raw: Weighted sum of health factors

    Returns:
        Health score between 0 and 100, two decimal places
    """
    return clamp(round_half_up((raw + 1) * 50, 2), 0.0, 100.0)


def safety_rating_from_score(score: float) -> SafetyRating:
    """Convert a 0-100 safety score to a rating.

    Args:
        score: Safety score (higher = safer)

    Returns:
        HIGH (>= 70), MEDIUM (>= 40) or LOW
    """
    if score >= SAFETY_RATING_THRESHOLDS["HIGH"]:
        return SafetyRating.HIGH
    elif score >= SAFETY_RATING_THRESHOLDS["MEDIUM"]:
        return SafetyRating.MEDIUM
    else:
        return SafetyRating.LOW


def risk_level_from_score(risk_score: float) -> RiskLevel:
    """Convert an additive route risk score to a risk level.

    Args:
        risk_score: Accumulated risk points (higher = more dangerous)

    Returns:
        CRITICAL (>= 80), HIGH (>= 60), MEDIUM (>= 30) or LOW
    """
    if risk_score >= RISK_LEVEL_THRESHOLDS["CRITICAL"]:
        return RiskLevel.CRITICAL
    elif risk_score >= RISK_LEVEL_THRESHOLDS["HIGH"]:
        return RiskLevel.HIGH
    elif risk_score >= RISK_LEVEL_THRESHOLDS["MEDIUM"]:
        return RiskLevel.MEDIUM
    else:
        return RiskLevel.LOW


def health_risk_level(health_score: float) -> RiskLevel:
    """Classify destination risk from its health score alone.

    Args:
        health_score: Destination health score (higher = healthier)

    Returns:
        HIGH (< 30), MEDIUM (< 60) or LOW
    """
    if health_score < 30:
        return RiskLevel.HIGH
    elif health_score < 60:
        return RiskLevel.MEDIUM
    else:
        return RiskLevel.LOW
