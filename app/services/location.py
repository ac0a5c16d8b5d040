"""
Driver-at-destination check used before a trip can be ended.
"""
import logging
from math import atan2, cos, radians, sin, sqrt

import redis.asyncio as aioredis

from app.config import get_settings
from app.exceptions import InvalidStateError
from app.redis_client import get_driver_location

logger = logging.getLogger(__name__)
settings = get_settings()


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    R = 6371
    phi1, phi2 = radians(lat1), radians(lat2)
    dphi = radians(lat2 - lat1)
    dlambda = radians(lng2 - lng1)
    a = sin(dphi / 2) ** 2 + cos(phi1) * cos(phi2) * sin(dlambda / 2) ** 2
    return 2 * R * atan2(sqrt(a), sqrt(1 - a))


async def validate_driver_in_location(
    redis: aioredis.Redis,
    driver_id: int,
    dest_lat: float,
    dest_lng: float,
) -> None:
    """Raise InvalidStateError unless the driver's last reported position is near the destination."""
    location = await get_driver_location(redis, driver_id)
    if location is None:
        raise InvalidStateError("Driver location is unknown")

    distance_km = haversine_km(location[0], location[1], dest_lat, dest_lng)
    if distance_km > settings.arrival_radius_km:
        logger.warning(
            "Driver %s is %.3f km from destination (limit %.3f)",
            driver_id, distance_km, settings.arrival_radius_km,
        )
        raise InvalidStateError("Driver is not at the destination")
