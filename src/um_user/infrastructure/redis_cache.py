"""RedisCacheStore — CacheStoreProtocol backed by redis.asyncio.

Thin adapter: errors from redis-py propagate so the access layer can decide
what to do with them.
"""

import redis.asyncio as aioredis


class RedisCacheStore:
    def __init__(self, client: aioredis.Redis) -> None:
        self._client = client

    async def get(self, key: str) -> str | None:
        return await self._client.get(key)

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        await self._client.set(key, value, ex=ttl_seconds)

    async def delete(self, key: str) -> int:
        return int(await self._client.delete(key))
