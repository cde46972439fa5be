"""Travel Intelligence Application Configuration.

Centralized configuration management for the travel intelligence API using
Pydantic settings. Handles environment variables, provider API keys, cache
connections, and the fixed constants of the destination scoring model.

Environment variables are loaded from .env file in development and from the
system environment in production.
"""

from typing import Dict, List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Destination health score weights. Positive weights raise the score,
# negative weights lower it. Visibility enters the weighted sum as visibility_km / 10.
HEALTH_SCORE_WEIGHTS: Dict[str, float] = {
    "vegetation_index": 0.50,
    "water_index": -0.30,
    "snow_index": -0.20,
    "precip_mm": -0.25,
    "visibility_km": 0.15,
    "air_quality_pm2_5": -0.10,
    "uv_extreme": -0.10,
    "night_travel": -0.10,
}

# Values used when a surface metric or weather field is missing
HEALTH_SCORE_DEFAULTS: Dict[str, float] = {
    "vegetation_index": 0.0,
    "water_index": 0.0,
    "snow_index": 0.0,
    "precip_mm": 0.0,
    "visibility_km": 10.0,
    "air_quality_pm2_5": 0.0,
    "uv": 0.0,
    "is_day": 1,
}

# UV index strictly above this counts as extreme
UV_EXTREME_THRESHOLD = 8.0

# Safety score penalties, applied to a starting score of 100
SAFETY_SCORE_PENALTIES: Dict[str, float] = {
    "gps_accuracy_threshold_m": 5.0,
    "gps_penalty_per_m": 3.0,
    "gps_penalty_max": 30.0,
    "water_threshold": 0.2,
    "water_penalty_factor": 100.0,
    "snow_threshold": 0.1,
    "snow_penalty_factor": 80.0,
    "vegetation_threshold": 0.3,
    "vegetation_penalty_factor": 50.0,
}

# Minimum safety score for each rating (HIGH rating == safest)
SAFETY_RATING_THRESHOLDS: Dict[str, float] = {"HIGH": 70.0, "MEDIUM": 40.0}

# Additive risk points for route feasibility
ROUTE_RISK_POINTS: Dict[str, int] = {
    "origin_low_safety": 30,
    "origin_poor_health": 20,
    "destination_low_safety": 30,
    "destination_poor_health": 20,
    "segment_low_safety": 15,
    "segment_poor_health": 10,
}

# Health scores below these count as poor conditions
ENDPOINT_POOR_HEALTH_SCORE = 30.0
SEGMENT_POOR_HEALTH_SCORE = 25.0

# Minimum route risk score for each risk level (CRITICAL == most dangerous)
RISK_LEVEL_THRESHOLDS: Dict[str, float] = {"CRITICAL": 80.0, "HIGH": 60.0, "MEDIUM": 30.0}

# Average travel speeds by mode (km/h)
TRAVEL_SPEEDS_KMH: Dict[str, float] = {"driving": 60.0, "cycling": 20.0, "walking": 5.0}


class Settings(BaseSettings):
    """Application settings - single source of truth for configuration."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # App
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:8080"

    # Rate Limiting
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_PER_MINUTE: int = 30

    # Redis
    REDIS_URL: str = "redis://localhost:6379/0"
    CACHE_ENABLED: bool = True
    ANALYSIS_CACHE_TTL_S: int = 48 * 3600
    ANALYSIS_VALID_HOURS: int = 48

    # Weather provider
    WEATHER_API_URL: str = "https://api.weatherapi.com/v1"
    WEATHER_API_KEY: str = Field(default="")
    WEATHER_TIMEOUT_S: float = 15.0
    WEATHER_SCORE_AIR_QUALITY: bool = False

    # Copernicus Data Space (Sentinel Hub)
    COPERNICUS_CLIENT_ID: str = Field(default="")
    COPERNICUS_CLIENT_SECRET: str = Field(default="")
    COPERNICUS_TOKEN_URL: str = (
        "https://identity.dataspace.copernicus.eu/auth/realms/CDSE/protocol/openid-connect/token"
    )
    COPERNICUS_PROCESS_URL: str = "https://sh.dataspace.copernicus.eu/api/v1/process"
    IMAGERY_TIMEOUT_S: float = 120.0
    IMAGERY_BBOX_SIZE_DEG: float = 0.01
    IMAGERY_LOOKBACK_DAYS: int = 10

    # Positioning
    POSITIONING_SATELLITE_COUNT: int = 10
    POSITIONING_ATMOSPHERIC_FACTOR: float = 1.0

    # Route segmentation
    ROUTE_SEGMENT_KM: float = 50.0
    ROUTE_MIN_SEGMENTS: int = 3
    ROUTE_MAX_SEGMENTS: int = 10
    SEGMENT_ANALYSIS_CONCURRENCY: int = 4

    @property
    def cors_origins_list(self) -> List[str]:
        """Comma-separated CORS_ORIGINS as a list."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get settings instance (singleton pattern)."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
