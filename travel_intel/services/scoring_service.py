"""Destination health score and safety rating calculators.

Both calculators are pure: identical inputs always produce identical
outputs and nothing is cached between calls.
"""

import logging
import math
from typing import Dict, Optional

from travel_intel.config import (
    HEALTH_SCORE_DEFAULTS,
    HEALTH_SCORE_WEIGHTS,
    SAFETY_SCORE_PENALTIES,
    UV_EXTREME_THRESHOLD,
)
from travel_intel.schemas.common import SafetyRating
from travel_intel.schemas.conditions import HealthScoreResult, SurfaceMetrics, WeatherSnapshot
from travel_intel.utils.scoring import (
    clamp,
    normalize_health_score,
    round_half_up,
    safety_rating_from_score,
)

logger = logging.getLogger(__name__)

# Weight key -> contribution key in HealthScoreResult.components
CONTRIBUTION_KEYS: Dict[str, str] = {
    "vegetation_index": "vegetation_contribution",
    "water_index": "water_contribution",
    "snow_index": "snow_contribution",
    "precip_mm": "precip_contribution",
    "visibility_km": "visibility_contribution",
    "air_quality_pm2_5": "air_quality_contribution",
    "uv_extreme": "uv_extreme_contribution",
    "night_travel": "night_travel_contribution",
}


def _value_or_default(value: Optional[float], key: str) -> float:
    # Non-finite readings count as missing
    if value is None or not math.isfinite(value):
        return HEALTH_SCORE_DEFAULTS[key]
    return value


class HealthScoreCalculator:
    """Weighted 0-100 destination health score."""

    def __init__(self, weights: Optional[Dict[str, float]] = None):
        self.weights = dict(HEALTH_SCORE_WEIGHTS if weights is None else weights)

    def factor_values(self, metrics: SurfaceMetrics, weather: WeatherSnapshot) -> Dict[str, float]:
        """Resolve the eight weighted factor values, applying defaults.

        Visibility is returned already divided by 10, the scale at which
        it enters the weighted sum.
        """
        uv = _value_or_default(weather.uv, "uv")
        is_day = _value_or_default(weather.is_day, "is_day")

        return {
            "vegetation_index": _value_or_default(metrics.vegetation_index, "vegetation_index"),
            "water_index": _value_or_default(metrics.water_index, "water_index"),
            "snow_index": _value_or_default(metrics.snow_index, "snow_index"),
            "precip_mm": _value_or_default(weather.precip_mm, "precip_mm"),
            "visibility_km": _value_or_default(weather.visibility_km, "visibility_km") / 10,
            "air_quality_pm2_5": _value_or_default(weather.air_quality_pm2_5, "air_quality_pm2_5"),
            "uv_extreme": 1.0 if uv > UV_EXTREME_THRESHOLD else 0.0,
            "night_travel": 1.0 if is_day == 0 else 0.0,
        }

    def compute(self, metrics: SurfaceMetrics, weather: WeatherSnapshot) -> HealthScoreResult:
        """Compute the health score and its per-factor contributions.

        Missing or non-finite inputs fall back to defaults; this never raises
        for absent data.

        Args:
            metrics: Surface indices at the destination
            weather: Current weather snapshot (any field may be None)

        Returns:
            HealthScoreResult with score in [0, 100] and contributions
            scaled by 100
        """
        values = self.factor_values(metrics, weather)

        raw_score = sum(values[key] * weight for key, weight in self.weights.items())
        score = normalize_health_score(raw_score)

        # Contributions are reported unclamped
        components = {
            CONTRIBUTION_KEYS[key]: round_half_up(values[key] * weight * 100, 2)
            for key, weight in self.weights.items()
        }

        logger.debug(f"Health score {score} from raw {raw_score:.4f}")
        return HealthScoreResult(score=score, components=components)


class SafetyRatingCalculator:
    """Penalty-based safety rating from positioning accuracy and surface metrics."""

    def __init__(self, penalties: Optional[Dict[str, float]] = None):
        self.penalties = dict(SAFETY_SCORE_PENALTIES if penalties is None else penalties)

    def score(self, accuracy_m: float, metrics: SurfaceMetrics) -> float:
        """Continuous safety score.

        Args:
            accuracy_m: Horizontal positioning accuracy in metres (higher = worse)
            metrics: Surface indices at the location

        Returns:
            Safety score from 0 to 100 (higher = safer)
        """
        p = self.penalties
        score = 100.0

        if accuracy_m > p["gps_accuracy_threshold_m"]:
            score -= min(
                p["gps_penalty_max"],
                (accuracy_m - p["gps_accuracy_threshold_m"]) * p["gps_penalty_per_m"],
            )

        # Flooding / standing water
        if metrics.water_index > p["water_threshold"]:
            score -= (metrics.water_index - p["water_threshold"]) * p["water_penalty_factor"]

        # Snow and ice
        if metrics.snow_index > p["snow_threshold"]:
            score -= (metrics.snow_index - p["snow_threshold"]) * p["snow_penalty_factor"]

        # Barren terrain
        if metrics.vegetation_index < p["vegetation_threshold"]:
            score -= (p["vegetation_threshold"] - metrics.vegetation_index) * p[
                "vegetation_penalty_factor"
            ]

        return clamp(score, 0.0, 100.0)

    def compute(self, accuracy_m: float, metrics: SurfaceMetrics) -> SafetyRating:
        """Safety rating for a location (HIGH = safe, LOW = dangerous)."""
        return safety_rating_from_score(self.score(accuracy_m, metrics))
