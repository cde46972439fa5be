"""Copernicus Data Space (Sentinel Hub) surface imagery client."""

import io
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import httpx
from PIL import Image, ImageStat

from travel_intel.config import get_settings
from travel_intel.core.exceptions import ExternalServiceError, ValidationError
from travel_intel.schemas.conditions import SurfaceAnalysis, SurfaceMetrics
from travel_intel.services.cache_service import CacheService
from travel_intel.utils.geometry import point_bbox
from travel_intel.utils.scoring import clamp, round_half_up

logger = logging.getLogger(__name__)
settings = get_settings()

TOKEN_CACHE_NAME = "copernicus"
TOKEN_TIMEOUT_S = 30.0
TOKEN_EXPIRY_MARGIN_S = 60

IMAGE_SIZE_PX = 512
MAX_CLOUD_COVERAGE = 20
CRS_WGS84 = "http://www.opengis.net/def/crs/EPSG/0/4326"

# Modes whose image encodes surface indices, and the metric each band holds
INDEX_BANDS: Dict[str, List[str]] = {
    "all": ["vegetation_index", "water_index", "snow_index"],
    "vegetation": ["vegetation_index"],
    "water": ["water_index"],
    "snow": ["snow_index"],
}

_INDEX_SCRIPT = """//VERSION=3
function setup() {{
    return {{
        input: [{inputs}],
        output: {{ bands: 3 }}
    }};
}}
function rescale(v) {{
    return Math.max(0, Math.min(1, (v + 1) / 2));
}}
function evaluatePixel(sample) {{
    {body}
}}
"""

EVAL_SCRIPTS: Dict[str, str] = {
    "all": _INDEX_SCRIPT.format(
        inputs='"B03", "B04", "B08", "B11"',
        body=(
            "let ndvi = (sample.B08 - sample.B04) / (sample.B08 + sample.B04);\n"
            "    let ndwi = (sample.B03 - sample.B08) / (sample.B03 + sample.B08);\n"
            "    let ndsi = (sample.B03 - sample.B11) / (sample.B03 + sample.B11);\n"
            "    return [rescale(ndvi), rescale(ndwi), rescale(ndsi)];"
        ),
    ),
    "vegetation": _INDEX_SCRIPT.format(
        inputs='"B04", "B08"',
        body=(
            "let ndvi = rescale((sample.B08 - sample.B04) / (sample.B08 + sample.B04));\n"
            "    return [ndvi, ndvi, ndvi];"
        ),
    ),
    "water": _INDEX_SCRIPT.format(
        inputs='"B03", "B08"',
        body=(
            "let ndwi = rescale((sample.B03 - sample.B08) / (sample.B03 + sample.B08));\n"
            "    return [ndwi, ndwi, ndwi];"
        ),
    ),
    "snow": _INDEX_SCRIPT.format(
        inputs='"B03", "B11"',
        body=(
            "let ndsi = rescale((sample.B03 - sample.B11) / (sample.B03 + sample.B11));\n"
            "    return [ndsi, ndsi, ndsi];"
        ),
    ),
    "true_color": """//VERSION=3
function setup() {
    return {
        input: ["B02", "B03", "B04"],
        output: { bands: 3 }
    };
}
function evaluatePixel(sample) {
    return [2.5 * sample.B04, 2.5 * sample.B03, 2.5 * sample.B02];
}
""",
}


def get_eval_script(mode: str) -> str:
    """Evalscript for an imagery mode; unknown modes render true colour."""
    return EVAL_SCRIPTS.get(mode, EVAL_SCRIPTS["true_color"])


def summarize_indices(image_bytes: bytes, mode: str = "all") -> SurfaceMetrics:
    """Mean surface indices from a rendered index image.

    Each band mean (0-255) is scaled back to [0, 1]. Metrics the mode
    does not render stay at 0.

    Args:
        image_bytes: PNG returned by the process API
        mode: Mode the image was rendered with

    Returns:
        SurfaceMetrics

    Raises:
        ValidationError: Mode does not render surface indices
        ExternalServiceError: Image could not be decoded
    """
    if mode not in INDEX_BANDS:
        raise ValidationError(f"Mode '{mode}' does not render surface indices")

    try:
        with Image.open(io.BytesIO(image_bytes)) as image:
            means = ImageStat.Stat(image.convert("RGB")).mean
    except (OSError, ValueError) as e:
        raise ExternalServiceError(f"Invalid imagery response: {str(e)}")

    values = {
        metric: round_half_up(clamp(means[band] / 255.0, 0.0, 1.0), 4)
        for band, metric in enumerate(INDEX_BANDS[mode])
    }
    return SurfaceMetrics(**values)


class CopernicusService:
    """Sentinel-2 surface indices via the Copernicus process API.

    Access tokens are cached in Redis until shortly before they expire.
    Every failure raises ExternalServiceError; there are no retries.
    """

    def __init__(self, cache: Optional[CacheService] = None):
        self.client_id = settings.COPERNICUS_CLIENT_ID
        self.client_secret = settings.COPERNICUS_CLIENT_SECRET
        self.token_url = settings.COPERNICUS_TOKEN_URL
        self.process_url = settings.COPERNICUS_PROCESS_URL
        self.timeout = settings.IMAGERY_TIMEOUT_S
        self.bbox_size = settings.IMAGERY_BBOX_SIZE_DEG
        self.lookback_days = settings.IMAGERY_LOOKBACK_DAYS
        self.cache = cache

    async def get_access_token(self) -> str:
        """OAuth2 client-credentials access token.

        Raises:
            ExternalServiceError: Credentials missing or token request failed
        """
        if self.cache:
            cached = await self.cache.get_token(TOKEN_CACHE_NAME)
            if cached:
                return cached

        if not self.client_id or not self.client_secret:
            raise ExternalServiceError("Copernicus credentials not configured")

        data = {
            "grant_type": "client_credentials",
            "client_id": self.client_id,
            "client_secret": self.client_secret,
        }

        try:
            async with httpx.AsyncClient(timeout=TOKEN_TIMEOUT_S) as client:
                response = await client.post(self.token_url, data=data)
        except httpx.HTTPError as e:
            logger.error(f"Copernicus token request failed: {str(e)}")
            raise ExternalServiceError("Copernicus authentication unavailable")

        if response.status_code != 200:
            logger.error(f"Copernicus token error {response.status_code}: {response.text[:500]}")
            raise ExternalServiceError("Copernicus authentication failed")

        try:
            payload = response.json()
        except ValueError:
            raise ExternalServiceError("Copernicus token response was not JSON")

        token = payload.get("access_token")
        if not token:
            raise ExternalServiceError("Copernicus token response had no access_token")

        if self.cache:
            expires_in = int(payload.get("expires_in", 0))
            await self.cache.set_token(TOKEN_CACHE_NAME, token, expires_in - TOKEN_EXPIRY_MARGIN_S)

        return token

    def build_payload(self, bbox: List[float], mode: str = "all") -> Dict[str, Any]:
        """Process API request body for a bounding box.

        Args:
            bbox: [min_lng, min_lat, max_lng, max_lat]
            mode: Imagery mode selecting the evalscript

        Returns:
            JSON-serializable payload
        """
        now = datetime.now(timezone.utc)
        since = now - timedelta(days=self.lookback_days)

        return {
            "input": {
                "bounds": {"bbox": bbox, "properties": {"crs": CRS_WGS84}},
                "data": [
                    {
                        "type": "sentinel-2-l2a",
                        "dataFilter": {
                            "timeRange": {
                                "from": f"{since.date().isoformat()}T00:00:00Z",
                                "to": f"{now.date().isoformat()}T23:59:59Z",
                            },
                            "maxCloudCoverage": MAX_CLOUD_COVERAGE,
                        },
                    }
                ],
            },
            "output": {
                "width": IMAGE_SIZE_PX,
                "height": IMAGE_SIZE_PX,
                "responses": [{"identifier": "default", "format": {"type": "image/png"}}],
            },
            "evalscript": get_eval_script(mode),
        }

    async def process_image(self, payload: Dict[str, Any], token: str) -> bytes:
        """Render imagery for a payload.

        Raises:
            ExternalServiceError: Request failed or returned an empty body
        """
        headers = {"Authorization": f"Bearer {token}"}

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(self.process_url, json=payload, headers=headers)
        except httpx.TimeoutException:
            logger.error("Copernicus process request timed out")
            raise ExternalServiceError("Imagery service timeout")
        except httpx.HTTPError as e:
            logger.error(f"Copernicus process request failed: {str(e)}")
            raise ExternalServiceError(f"Imagery error: {str(e)}")

        if response.status_code != 200:
            logger.error(
                "Copernicus process failed",
                extra={
                    "extra_fields": {
                        "status": response.status_code,
                        "body": response.text[:500],
                    }
                },
            )
            raise ExternalServiceError("Imagery service unavailable")

        if not response.content:
            bbox = payload["input"]["bounds"]["bbox"]
            logger.error(f"Copernicus process returned empty body for bbox {bbox}")
            raise ExternalServiceError("Imagery service returned no data")

        return response.content

    async def get_surface_indices(self, lat: float, lng: float, mode: str = "all") -> SurfaceAnalysis:
        """Surface indices around a coordinate.

        Args:
            lat: Latitude
            lng: Longitude
            mode: all, vegetation, water or snow

        Returns:
            SurfaceAnalysis with metrics in [0, 1] and the queried bbox

        Raises:
            ValidationError: Mode does not render surface indices
            ExternalServiceError: Imagery unavailable
        """
        if mode not in INDEX_BANDS:
            raise ValidationError(f"Unsupported surface index mode: {mode}")

        bbox = point_bbox(lat, lng, self.bbox_size)
        token = await self.get_access_token()
        image_bytes = await self.process_image(self.build_payload(bbox, mode), token)
        metrics = summarize_indices(image_bytes, mode)

        logger.debug(
            f"Surface indices at ({lat}, {lng}): veg={metrics.vegetation_index} "
            f"water={metrics.water_index} snow={metrics.snow_index}"
        )
        return SurfaceAnalysis(metrics=metrics, bbox=bbox, mode=mode)
