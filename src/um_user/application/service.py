"""UserAccessService — cache-aside access layer over the user store.

Reads populate the cache on miss; writes go to the store first and then
invalidate the list entry. The per-user entry is repopulated on update and
deleted on delete. Nothing here spans both stores atomically: between a store
write and the cache invalidation a reader may see the old snapshot until the
next write or TTL expiry.

Error policy:
  - Store errors propagate to the caller unchanged.
  - Cache errors are turned into CacheFailure values, logged, and dropped.
"""

import logging
from collections.abc import Callable
from typing import TypeVar

from redis.exceptions import RedisError

from src.um_common.errors import EmailExistsError
from src.um_user.domain.cache import (
    CACHE_ALL_USERS_KEY,
    CacheFailure,
    CacheHit,
    CacheMiss,
    CacheRead,
    CacheStoreProtocol,
    user_cache_key,
)
from src.um_user.domain.codec import JsonUserCodec, UserCodecProtocol
from src.um_user.domain.models import User, UserPatch
from src.um_user.domain.repository import UserRepositoryProtocol

logger = logging.getLogger(__name__)

# Failures a cache round-trip may raise: transport errors from redis-py,
# socket-level errors, and undecodable payloads.
_CACHE_ERRORS = (RedisError, OSError, TimeoutError, ValueError, KeyError, TypeError)

T = TypeVar("T")


class UserAccessService:
    def __init__(
        self,
        repo: UserRepositoryProtocol,
        cache: CacheStoreProtocol,
        ttl_seconds: int,
        codec: UserCodecProtocol | None = None,
    ) -> None:
        if ttl_seconds < 1:
            raise ValueError(f"ttl_seconds must be at least 1, got {ttl_seconds}")
        self._repo = repo
        self._cache = cache
        self._ttl = ttl_seconds
        self._codec: UserCodecProtocol = codec or JsonUserCodec()

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def create_user(self, name: str, email: str, age: int) -> User:
        """Insert a user. Raises EmailExistsError when the email is taken.

        The list entry is deleted, not rebuilt: the next list read is a miss.
        """
        if await self._repo.find_by_email(email) is not None:
            raise EmailExistsError()

        user = await self._repo.insert(name, email, age)
        self._discard(await self._cache_delete(CACHE_ALL_USERS_KEY))
        return user

    async def list_users(self) -> list[User]:
        """All users, newest first. A hit is returned without touching the store."""
        cached = await self._cache_get(CACHE_ALL_USERS_KEY, self._codec.decode_users)
        if isinstance(cached, CacheHit):
            logger.debug("Returning users from cache")
            return cached.value
        self._discard(cached)

        users = await self._repo.find_all_ordered_by_created_desc()
        self._discard(
            await self._cache_set(CACHE_ALL_USERS_KEY, self._codec.encode_users(users))
        )
        logger.debug("Returning users from database")
        return users

    async def get_user(self, user_id: str) -> User | None:
        cached = await self._cache_get(user_cache_key(user_id), self._codec.decode_user)
        if isinstance(cached, CacheHit):
            logger.debug("Returning user %s from cache", user_id)
            return cached.value
        self._discard(cached)

        user = await self._repo.find_by_id(user_id)
        if user is not None:
            self._discard(await self._cache_set(user_cache_key(user.id), self._codec.encode_user(user)))
        return user

    async def update_user(self, user_id: str, patch: UserPatch) -> User | None:
        """Apply the supplied fields only.

        Raises EmailExistsError when the new email belongs to another user.
        Returns None (no cache mutation) when user_id does not exist.
        """
        if patch.email is not None:
            clash = await self._repo.find_one_excluding_id(patch.email, user_id)
            if clash is not None:
                raise EmailExistsError()

        user = await self._repo.find_and_update(user_id, patch)
        if user is None:
            return None

        self._discard(await self._cache_set(user_cache_key(user.id), self._codec.encode_user(user)))
        self._discard(await self._cache_delete(CACHE_ALL_USERS_KEY))
        return user

    async def delete_user(self, user_id: str) -> bool:
        deleted = await self._repo.find_and_delete(user_id)
        if deleted is None:
            return False

        self._discard(await self._cache_delete(user_cache_key(user_id)))
        self._discard(await self._cache_delete(CACHE_ALL_USERS_KEY))
        return True

    # ------------------------------------------------------------------
    # Cache primitives — never raise
    # ------------------------------------------------------------------

    async def _cache_get(self, key: str, decode: Callable[[str], T]) -> CacheRead[T]:
        try:
            payload = await self._cache.get(key)
            if payload is None:
                return CacheMiss()
            return CacheHit(decode(payload))
        except _CACHE_ERRORS as exc:
            return CacheFailure("get", key, exc)

    async def _cache_set(self, key: str, payload: str) -> CacheFailure | None:
        try:
            await self._cache.set(key, payload, self._ttl)
        except _CACHE_ERRORS as exc:
            return CacheFailure("set", key, exc)
        return None

    async def _cache_delete(self, key: str) -> CacheFailure | None:
        try:
            removed = await self._cache.delete(key)
        except _CACHE_ERRORS as exc:
            return CacheFailure("delete", key, exc)
        logger.debug("Invalidated cache key=%s removed=%s", key, removed)
        return None

    @staticmethod
    def _discard(outcome: CacheRead | CacheFailure | None) -> None:
        """Drop a cache outcome. Failures are logged; they never reach the caller."""
        if isinstance(outcome, CacheFailure):
            logger.warning(
                "Cache %s failed for key=%s: %r", outcome.operation, outcome.key, outcome.error
            )
