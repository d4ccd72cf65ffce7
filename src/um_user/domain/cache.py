"""User cache contract: key scheme, store Protocol, explicit read results.

Cache keys:
  - f"users:{user_id}"  one user snapshot
  - "users:all"         full list snapshot, newest first

Policy (cache-aside):
  - Read: check cache → store on miss → populate cache
  - Write: store first, then invalidate (list) / repopulate (single user)
  - A missing user is never cached.
"""

from dataclasses import dataclass
from typing import Generic, Protocol, TypeVar

CACHE_PREFIX = "users:"
CACHE_ALL_USERS_KEY = "users:all"

T = TypeVar("T")


def user_cache_key(user_id: str) -> str:
    return f"{CACHE_PREFIX}{user_id}"


class CacheStoreProtocol(Protocol):
    """Key-value store with per-key expiry. Any method may raise."""

    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str, ttl_seconds: int) -> None: ...

    async def delete(self, key: str) -> int: ...


@dataclass(frozen=True)
class CacheHit(Generic[T]):
    value: T


@dataclass(frozen=True)
class CacheMiss:
    pass


@dataclass(frozen=True)
class CacheFailure:
    """A cache call raised. Carried as a value so callers discard it explicitly."""

    operation: str
    key: str
    error: Exception


CacheRead = CacheHit[T] | CacheMiss | CacheFailure
