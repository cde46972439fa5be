"""Unit tests for the positioning accuracy model."""

import pytest

from travel_intel.services.positioning_service import PositioningService


def test_calculate_accuracy_equator_open_sky():
    """Base accuracy at the equator outside urban areas."""
    service = PositioningService(atmospheric_factor=1.0)
    assert service.calculate_accuracy(0.0, 0.0) == 2.0


def test_calculate_accuracy_latitude_and_urban():
    """Latitude and urban factors multiply."""
    service = PositioningService(atmospheric_factor=1.0)

    assert service.calculate_accuracy(30.0, 15.0) == 2.33
    assert service.calculate_accuracy(45.0, 90.0) == 3.75


def test_atmospheric_factor_scales_accuracy():
    """Injected atmospheric factor scales the estimate."""
    service = PositioningService(atmospheric_factor=1.2)
    assert service.calculate_accuracy(0.0, 0.0) == 2.4


def test_is_urban_area():
    """Urban heuristic window is exclusive."""
    assert PositioningService.is_urban_area(51.5, -0.1) is True
    assert PositioningService.is_urban_area(10.0, 20.0) is False
    assert PositioningService.is_urban_area(25.0, 25.0) is False
    assert PositioningService.is_urban_area(80.0, 170.0) is False


def test_estimate_altitude_bands():
    """Mountain, coastal and default altitude bands."""
    assert PositioningService.estimate_altitude(45.0, 90.0) == 1750.0
    assert PositioningService.estimate_altitude(5.0, 40.0) == 50.0
    assert PositioningService.estimate_altitude(30.0, 15.0) == 275.0


@pytest.mark.asyncio
async def test_get_positioning_accuracy():
    """Position info is deterministic and carries HDOP = accuracy / 2."""
    service = PositioningService(satellite_count=8, atmospheric_factor=1.0)

    first = await service.get_positioning_accuracy(45.0, 90.0)
    second = await service.get_positioning_accuracy(45.0, 90.0)

    assert first == second
    assert first.latitude == 45.0
    assert first.longitude == 90.0
    assert first.accuracy == 3.75
    assert first.hdop == 1.88
    assert first.satellite_count == 8
    assert first.altitude == 1750.0
