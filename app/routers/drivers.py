"""
Drivers router: POST /v1/drivers/me/location
"""
import logging

import redis.asyncio as aioredis
from fastapi import APIRouter, Depends, status

from app.middleware.auth import get_current_driver
from app.redis_client import get_redis, set_driver_location
from app.schemas.schemas import LocationUpdateRequest

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/v1/drivers", tags=["Drivers"])


@router.post("/me/location", status_code=status.HTTP_204_NO_CONTENT)
async def update_location(
    payload: LocationUpdateRequest,
    redis: aioredis.Redis = Depends(get_redis),
    driver_id: int = Depends(get_current_driver),
):
    """
    High-frequency endpoint. Only the latest position is kept, in redis, with a
    short TTL; ending a trip checks it against the destination.
    """
    await set_driver_location(redis, driver_id, payload.lat, payload.lng)
