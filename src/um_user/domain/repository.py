# src/um_user/domain/repository.py
"""Repository Protocol — dependency inversion for testability.

Unit tests inject an in-memory fake or a mock that conforms to this Protocol.
Infrastructure layer provides the real implementation.

Emails are compared case-insensitively by every lookup.
"""

from typing import Protocol

from src.um_user.domain.models import User, UserPatch


class UserRepositoryProtocol(Protocol):
    async def find_by_email(self, email: str) -> User | None: ...

    async def find_by_id(self, user_id: str) -> User | None: ...

    async def find_one_excluding_id(self, email: str, user_id: str) -> User | None: ...

    async def insert(self, name: str, email: str, age: int) -> User: ...

    async def find_and_update(self, user_id: str, patch: UserPatch) -> User | None: ...

    async def find_and_delete(self, user_id: str) -> User | None: ...

    async def find_all_ordered_by_created_desc(self) -> list[User]: ...
