"""Redis client factory — used only as the read-through user cache.

Redis is never authoritative: callers must tolerate it being down.
"""

import logging

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from config.settings import Settings

logger = logging.getLogger(__name__)


def create_redis(settings: Settings) -> aioredis.Redis:
    """Create the Redis connection pool. Does not connect until first use."""
    return aioredis.from_url(
        settings.REDIS_URL,
        decode_responses=True,
        socket_connect_timeout=settings.REDIS_CONNECT_TIMEOUT,
        socket_timeout=settings.REDIS_SOCKET_TIMEOUT,
    )


async def ping_redis(client: aioredis.Redis) -> bool:
    """Return True when Redis answers PING, False (logged) otherwise."""
    try:
        return bool(await client.ping())
    except (RedisError, OSError) as exc:
        logger.warning("Redis ping failed: %s", exc)
        return False


async def close_redis(client: aioredis.Redis) -> None:
    """Close the Redis connection pool."""
    await client.aclose()
