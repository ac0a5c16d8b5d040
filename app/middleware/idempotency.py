import json
from typing import Optional

import redis.asyncio as aioredis
from fastapi import Request, Response
from fastapi.responses import JSONResponse


IDEMPOTENCY_TTL = 86400  # 24 hours


def _cache_key(key: str, user_id: int) -> str:
    return f"idempotency:{user_id}:{key}"


async def check_idempotency(
    request: Request,
    redis: aioredis.Redis,
    user_id: int,
) -> Optional[Response]:
    """
    Returns the stored Response if this user already used the Idempotency-Key,
    otherwise returns None (proceed normally).
    """
    key = request.headers.get("Idempotency-Key")
    if not key:
        return None

    cached = await redis.get(_cache_key(key, user_id))
    if cached:
        data = json.loads(cached)
        return JSONResponse(
            content=data["body"],
            status_code=data["status_code"],
            headers={"X-Idempotency-Replay": "true"},
        )
    return None


async def store_idempotency_result(
    redis: aioredis.Redis,
    key: str,
    user_id: int,
    status_code: int,
    body: dict,
) -> None:
    """Persist the response for the given idempotency key (24h TTL)."""
    await redis.setex(
        _cache_key(key, user_id),
        IDEMPOTENCY_TTL,
        json.dumps({"status_code": status_code, "body": body}),
    )
