"""Environmental condition schemas.

Shapes returned by the positioning, imagery and weather data sources, and
the health score computed from them.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class SurfaceMetrics(BaseModel):
    """Surface indices for one location, rescaled from [-1, 1] to [0, 1]."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    vegetation_index: float = Field(0.0, ge=0.0, le=1.0, description="Rescaled NDVI")
    water_index: float = Field(0.0, ge=0.0, le=1.0, description="Rescaled NDWI")
    snow_index: float = Field(0.0, ge=0.0, le=1.0, description="Rescaled NDSI")


class AirQuality(BaseModel):
    """Particulate matter readings (µg/m³)."""

    model_config = ConfigDict(allow_inf_nan=False)

    pm2_5: Optional[float] = None
    pm10: Optional[float] = None


class WeatherLocation(BaseModel):
    """Location resolved by the weather provider."""

    name: Optional[str] = None
    region: Optional[str] = None
    country: Optional[str] = None
    lat: Optional[float] = None
    lon: Optional[float] = None
    localtime: Optional[str] = None


class WeatherSnapshot(BaseModel):
    """Current weather at a location.

    Every field is optional; a missing (None) field means the provider did
    not report it, and the scoring model substitutes its default.
    """

    model_config = ConfigDict(allow_inf_nan=False)

    temperature: Optional[float] = Field(None, description="Air temperature in °C")
    condition: Optional[str] = None
    uv: Optional[float] = Field(None, description="UV index")
    precip_mm: Optional[float] = Field(None, description="Precipitation in mm")
    humidity: Optional[float] = None
    cloud_cover: Optional[float] = None
    visibility_km: Optional[float] = None
    wind_kph: Optional[float] = None
    wind_dir: Optional[str] = None
    air_quality_pm2_5: Optional[float] = Field(
        None, description="PM2.5 value fed into the health score"
    )
    is_day: Optional[int] = Field(None, ge=0, le=1, description="1 = daylight, 0 = night")
    air_quality: Optional[AirQuality] = None
    location: Optional[WeatherLocation] = None
    last_updated: Optional[str] = None


class PositionInfo(BaseModel):
    """Satellite positioning quality at a location."""

    latitude: float
    longitude: float
    altitude: float = Field(..., description="Estimated altitude in metres")
    accuracy: float = Field(..., ge=0.0, description="Horizontal accuracy in metres")
    satellite_count: int = Field(..., ge=0)
    hdop: float = Field(..., ge=0.0, description="Horizontal dilution of precision")


class SurfaceAnalysis(BaseModel):
    """Surface indices together with the queried bounding box."""

    metrics: SurfaceMetrics
    bbox: List[float] = Field(
        ...,
        min_length=4,
        max_length=4,
        description="Bounding box as [min_lng, min_lat, max_lng, max_lat] in WGS84",
    )
    mode: str = "all"


class HealthScoreResult(BaseModel):
    """Destination health score with per-factor contributions."""

    score: float = Field(..., ge=0.0, le=100.0)
    components: Dict[str, float]

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "score": 82.5,
                "components": {
                    "vegetation_contribution": 50.0,
                    "water_contribution": 0.0,
                    "snow_contribution": 0.0,
                    "precip_contribution": 0.0,
                    "visibility_contribution": 15.0,
                    "air_quality_contribution": 0.0,
                    "uv_extreme_contribution": 0.0,
                    "night_travel_contribution": 0.0,
                },
            }
        }
    )
