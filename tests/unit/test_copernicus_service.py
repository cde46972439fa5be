"""Unit tests for the Copernicus imagery client."""

import io
from unittest.mock import AsyncMock, Mock, patch

import pytest
from PIL import Image

from travel_intel.core.exceptions import ExternalServiceError, ValidationError
from travel_intel.services.copernicus_service import (
    CopernicusService,
    get_eval_script,
    summarize_indices,
)


def png_bytes(color, size=(8, 8)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


def mock_response(status_code=200, payload=None, content=b""):
    response = Mock()
    response.status_code = status_code
    response.json = Mock(return_value=payload)
    response.content = content
    response.text = "error"
    return response


def test_summarize_indices_all_bands():
    """R, G and B band means are vegetation, water and snow."""
    metrics = summarize_indices(png_bytes((204, 51, 0)), "all")

    assert metrics.vegetation_index == 0.8
    assert metrics.water_index == 0.2
    assert metrics.snow_index == 0.0


def test_summarize_indices_single_mode():
    """Single-index modes fill only their own metric."""
    metrics = summarize_indices(png_bytes((102, 102, 102)), "water")

    assert metrics.water_index == 0.4
    assert metrics.vegetation_index == 0.0
    assert metrics.snow_index == 0.0


def test_summarize_indices_rejects_true_color():
    """True colour images carry no indices."""
    with pytest.raises(ValidationError):
        summarize_indices(png_bytes((0, 0, 0)), "true_color")


def test_summarize_indices_invalid_image():
    """Undecodable responses raise ExternalServiceError."""
    with pytest.raises(ExternalServiceError):
        summarize_indices(b"not a png", "all")


def test_eval_scripts():
    """Index scripts rescale to [0, 1]; unknown modes render true colour."""
    assert "rescale(ndvi), rescale(ndwi), rescale(ndsi)" in get_eval_script("all")
    assert '"B04", "B08"' in get_eval_script("vegetation")
    assert '"B03", "B11"' in get_eval_script("snow")
    assert get_eval_script("unknown") == get_eval_script("true_color")


def test_build_payload():
    """Payload targets Sentinel-2 L2A as a 512px PNG."""
    service = CopernicusService()
    bbox = [6.99, 44.99, 7.01, 45.01]
    payload = service.build_payload(bbox, "all")

    assert payload["input"]["bounds"]["bbox"] == bbox
    data = payload["input"]["data"][0]
    assert data["type"] == "sentinel-2-l2a"
    assert data["dataFilter"]["maxCloudCoverage"] == 20
    assert data["dataFilter"]["timeRange"]["from"].endswith("T00:00:00Z")
    assert payload["output"]["width"] == 512
    assert payload["output"]["height"] == 512
    assert payload["output"]["responses"][0]["format"]["type"] == "image/png"
    assert payload["evalscript"] == get_eval_script("all")


@pytest.mark.asyncio
async def test_get_access_token_cached():
    """A cached token skips the token request."""
    cache = Mock()
    cache.get_token = AsyncMock(return_value="cached-token")
    service = CopernicusService(cache=cache)

    with patch("httpx.AsyncClient.post", new_callable=AsyncMock) as mock_post:
        token = await service.get_access_token()

    assert token == "cached-token"
    mock_post.assert_not_called()


@pytest.mark.asyncio
async def test_get_access_token_stores_until_expiry():
    """Fresh tokens are cached for expires_in minus one minute."""
    cache = Mock()
    cache.get_token = AsyncMock(return_value=None)
    cache.set_token = AsyncMock(return_value=True)
    service = CopernicusService(cache=cache)

    with patch("httpx.AsyncClient.post", new_callable=AsyncMock) as mock_post:
        mock_post.return_value = mock_response(
            payload={"access_token": "fresh-token", "expires_in": 600}
        )
        token = await service.get_access_token()

    assert token == "fresh-token"
    assert mock_post.call_args.kwargs["data"]["grant_type"] == "client_credentials"
    cache.set_token.assert_awaited_once_with("copernicus", "fresh-token", 540)


@pytest.mark.asyncio
async def test_get_access_token_failure():
    """Rejected credentials raise ExternalServiceError."""
    service = CopernicusService()

    with patch("httpx.AsyncClient.post", new_callable=AsyncMock) as mock_post:
        mock_post.return_value = mock_response(status_code=401)

        with pytest.raises(ExternalServiceError):
            await service.get_access_token()


@pytest.mark.asyncio
async def test_process_image_empty_body():
    """An empty image body is an error."""
    service = CopernicusService()
    payload = service.build_payload([0, 0, 1, 1])

    with patch("httpx.AsyncClient.post", new_callable=AsyncMock) as mock_post:
        mock_post.return_value = mock_response(content=b"")

        with pytest.raises(ExternalServiceError, match="no data"):
            await service.process_image(payload, "token")


@pytest.mark.asyncio
async def test_get_surface_indices():
    """Token, render and decode produce a SurfaceAnalysis."""
    service = CopernicusService()
    image = png_bytes((153, 26, 13))

    with patch("httpx.AsyncClient.post", new_callable=AsyncMock) as mock_post:
        mock_post.side_effect = [
            mock_response(payload={"access_token": "token", "expires_in": 600}),
            mock_response(content=image),
        ]
        result = await service.get_surface_indices(45.0, 7.0)

    assert result.mode == "all"
    assert result.bbox == pytest.approx([6.99, 44.99, 7.01, 45.01])
    assert result.metrics.vegetation_index == 0.6
    assert result.metrics.water_index == 0.102
    assert result.metrics.snow_index == 0.051

    render_call = mock_post.call_args_list[1]
    assert render_call.kwargs["headers"] == {"Authorization": "Bearer token"}


@pytest.mark.asyncio
async def test_get_surface_indices_rejects_unknown_mode():
    """Only index modes are accepted."""
    with pytest.raises(ValidationError):
        await CopernicusService().get_surface_indices(45.0, 7.0, "true_color")
