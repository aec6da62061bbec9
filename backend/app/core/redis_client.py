"""
Shared Redis connection for the token blacklist.
"""

import redis.asyncio as redis
from redis.exceptions import RedisError
from backend.app.core.config import settings

# Connects lazily on first command
redis_client = redis.from_url(
    settings.redis_url,
    decode_responses=settings.redis_decode_responses,
)


async def ping_redis() -> bool:
    """Whether the blacklist store answers; reported by /health."""
    try:
        return await redis_client.ping()
    except RedisError:
        return False
