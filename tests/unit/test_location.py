"""
Unit tests for the driver-at-destination check.
"""
import pytest
from unittest.mock import AsyncMock

from app.exceptions import InvalidStateError
from app.services.location import haversine_km, validate_driver_in_location

DEST = (24.7136, 46.6753)


def _redis(value):
    mock_redis = AsyncMock()
    mock_redis.get = AsyncMock(return_value=value)
    return mock_redis


def test_haversine_same_point_is_zero():
    assert haversine_km(*DEST, *DEST) == pytest.approx(0.0)


def test_haversine_riyadh_to_jeddah():
    # ~850 km great-circle
    assert haversine_km(24.7136, 46.6753, 21.4858, 39.1925) == pytest.approx(850, rel=0.02)


@pytest.mark.asyncio
class TestValidateDriverInLocation:
    async def test_driver_at_destination_passes(self):
        mock_redis = _redis("24.7137,46.6754")
        await validate_driver_in_location(mock_redis, 7, *DEST)
        mock_redis.get.assert_awaited_once_with("driver:7:loc")

    async def test_unknown_location_rejected(self):
        with pytest.raises(InvalidStateError, match="unknown"):
            await validate_driver_in_location(_redis(None), 7, *DEST)

    async def test_far_from_destination_rejected(self):
        with pytest.raises(InvalidStateError, match="not at the destination"):
            await validate_driver_in_location(_redis("24.80,46.75"), 7, *DEST)
