"""Shared test fixtures: in-memory stores and an API client wired to them."""

import time
import uuid
from datetime import UTC, datetime, timedelta

import pytest
from httpx import ASGITransport, AsyncClient
from redis.exceptions import ConnectionError as RedisConnectionError

from src.main import app
from src.um_user.api.dependencies import get_user_service
from src.um_user.application.service import UserAccessService
from src.um_user.domain.models import User, UserPatch


class InMemoryUserRepository:
    """UserRepositoryProtocol over a dict. Counts calls per method."""

    def __init__(self) -> None:
        self.rows: dict[str, User] = {}
        self.calls: dict[str, int] = {}
        self._clock = datetime(2026, 1, 1, tzinfo=UTC)

    def _count(self, name: str) -> None:
        self.calls[name] = self.calls.get(name, 0) + 1

    def _tick(self) -> datetime:
        # Strictly increasing timestamps keep created_at ordering deterministic
        self._clock += timedelta(seconds=1)
        return self._clock

    async def find_by_email(self, email: str) -> User | None:
        self._count("find_by_email")
        return next((u for u in self.rows.values() if u.email == email.lower()), None)

    async def find_by_id(self, user_id: str) -> User | None:
        self._count("find_by_id")
        return self.rows.get(user_id)

    async def find_one_excluding_id(self, email: str, user_id: str) -> User | None:
        self._count("find_one_excluding_id")
        return next(
            (u for u in self.rows.values() if u.email == email.lower() and u.id != user_id),
            None,
        )

    async def insert(self, name: str, email: str, age: int) -> User:
        self._count("insert")
        now = self._tick()
        user = User(
            id=str(uuid.uuid4()), name=name, email=email.lower(), age=age,
            created_at=now, updated_at=now,
        )
        self.rows[user.id] = user
        return user

    async def find_and_update(self, user_id: str, patch: UserPatch) -> User | None:
        self._count("find_and_update")
        current = self.rows.get(user_id)
        if current is None:
            return None
        updated = User(**{**current.__dict__, **patch.supplied(), "updated_at": self._tick()})
        self.rows[user_id] = updated
        return updated

    async def find_and_delete(self, user_id: str) -> User | None:
        self._count("find_and_delete")
        return self.rows.pop(user_id, None)

    async def find_all_ordered_by_created_desc(self) -> list[User]:
        self._count("find_all_ordered_by_created_desc")
        return sorted(self.rows.values(), key=lambda u: u.created_at, reverse=True)


class InMemoryCacheStore:
    """CacheStoreProtocol with real TTL expiry. Set `failing` to break every call."""

    def __init__(self) -> None:
        self.entries: dict[str, tuple[str, float]] = {}
        self.failing = False

    def _check(self) -> None:
        if self.failing:
            raise RedisConnectionError("cache unavailable")

    async def get(self, key: str) -> str | None:
        self._check()
        entry = self.entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if time.monotonic() >= expires_at:
            del self.entries[key]
            return None
        return value

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        self._check()
        self.entries[key] = (value, time.monotonic() + ttl_seconds)

    async def delete(self, key: str) -> int:
        self._check()
        return 1 if self.entries.pop(key, None) is not None else 0

    def expire_all(self) -> None:
        self.entries = {k: (v, 0.0) for k, (v, _) in self.entries.items()}


@pytest.fixture
def repo() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def cache() -> InMemoryCacheStore:
    return InMemoryCacheStore()


@pytest.fixture
def service(repo: InMemoryUserRepository, cache: InMemoryCacheStore) -> UserAccessService:
    return UserAccessService(repo=repo, cache=cache, ttl_seconds=60)


@pytest.fixture
async def client(service: UserAccessService) -> AsyncClient:
    """Async HTTP client for testing FastAPI endpoints against in-memory stores."""
    app.dependency_overrides[get_user_service] = lambda: service
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
