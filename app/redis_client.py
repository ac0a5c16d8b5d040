import redis.asyncio as aioredis
from app.config import get_settings

settings = get_settings()

_redis_pool: aioredis.Redis | None = None


async def get_redis() -> aioredis.Redis:
    global _redis_pool
    if _redis_pool is None:
        _redis_pool = aioredis.from_url(
            settings.redis_url,
            encoding="utf-8",
            decode_responses=True,
            max_connections=100,
        )
    return _redis_pool


async def close_redis() -> None:
    global _redis_pool
    if _redis_pool:
        await _redis_pool.aclose()
        _redis_pool = None


# ---------------------------------------------------------------------------
# Driver location
# ---------------------------------------------------------------------------

def driver_location_key(driver_id: int) -> str:
    return f"driver:{driver_id}:loc"


async def set_driver_location(redis: aioredis.Redis, driver_id: int, lat: float, lng: float) -> None:
    """Store the driver's last known position; it expires if the app stops reporting."""
    await redis.setex(driver_location_key(driver_id), settings.driver_location_ttl_seconds, f"{lat},{lng}")


async def get_driver_location(redis: aioredis.Redis, driver_id: int) -> tuple[float, float] | None:
    raw = await redis.get(driver_location_key(driver_id))
    if not raw:
        return None
    lat, lng = raw.split(",")
    return float(lat), float(lng)
