"""UserRepository — concrete implementation of UserRepositoryProtocol.

Each call opens its own AsyncSession from the injected factory; writes run
in a single-statement transaction (`async with db.begin()`).
Email matching is case-insensitive: values are stored lowercased and compared
through lower(email), which is also what the unique index covers.
"""

import uuid

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.um_common.errors import EmailExistsError
from src.um_user.domain.models import User, UserPatch
from src.um_user.infrastructure.db_models import UserModel

EMAIL_UNIQUE_INDEX = "uq_users_email_lower"


def _to_domain(row: UserModel) -> User:
    return User(
        id=str(row.id),
        name=row.name,
        email=row.email,
        age=row.age,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _parse_id(user_id: str) -> uuid.UUID | None:
    """Ids that are not UUIDs can never match a row."""
    try:
        return uuid.UUID(str(user_id))
    except ValueError:
        return None


def _normalize_email(email: str) -> str:
    return email.strip().lower()


def _raise_if_email_conflict(exc: IntegrityError) -> None:
    if EMAIL_UNIQUE_INDEX in str(exc.orig):
        raise EmailExistsError() from exc


class UserRepository:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def find_by_email(self, email: str) -> User | None:
        stmt = select(UserModel).where(func.lower(UserModel.email) == _normalize_email(email))
        async with self._session_factory() as db:
            result = await db.execute(stmt)
            row = result.scalar_one_or_none()
        return _to_domain(row) if row else None

    async def find_by_id(self, user_id: str) -> User | None:
        uid = _parse_id(user_id)
        if uid is None:
            return None
        async with self._session_factory() as db:
            result = await db.execute(select(UserModel).where(UserModel.id == uid))
            row = result.scalar_one_or_none()
        return _to_domain(row) if row else None

    async def find_one_excluding_id(self, email: str, user_id: str) -> User | None:
        stmt = select(UserModel).where(func.lower(UserModel.email) == _normalize_email(email))
        uid = _parse_id(user_id)
        if uid is not None:
            stmt = stmt.where(UserModel.id != uid)
        async with self._session_factory() as db:
            result = await db.execute(stmt.limit(1))
            row = result.scalar_one_or_none()
        return _to_domain(row) if row else None

    async def insert(self, name: str, email: str, age: int) -> User:
        user = UserModel(name=name.strip(), email=_normalize_email(email), age=age)
        try:
            async with self._session_factory() as db:
                async with db.begin():
                    db.add(user)
                    await db.flush()  # Populate server defaults (id, timestamps)
                    await db.refresh(user)
        except IntegrityError as exc:
            _raise_if_email_conflict(exc)
            raise
        return _to_domain(user)

    async def find_and_update(self, user_id: str, patch: UserPatch) -> User | None:
        uid = _parse_id(user_id)
        if uid is None:
            return None

        if patch.is_empty():
            return await self.find_by_id(user_id)
        values = patch.supplied()
        if "email" in values:
            values["email"] = _normalize_email(values["email"])
        if "name" in values:
            values["name"] = values["name"].strip()
        values["updated_at"] = func.now()

        stmt = (
            update(UserModel)
            .where(UserModel.id == uid)
            .values(**values)
            .returning(UserModel)
        )
        try:
            async with self._session_factory() as db:
                async with db.begin():
                    result = await db.execute(stmt)
                    row = result.scalar_one_or_none()
        except IntegrityError as exc:
            _raise_if_email_conflict(exc)
            raise
        return _to_domain(row) if row else None

    async def find_and_delete(self, user_id: str) -> User | None:
        uid = _parse_id(user_id)
        if uid is None:
            return None
        stmt = delete(UserModel).where(UserModel.id == uid).returning(UserModel)
        async with self._session_factory() as db:
            async with db.begin():
                result = await db.execute(stmt)
                row = result.scalar_one_or_none()
        return _to_domain(row) if row else None

    async def find_all_ordered_by_created_desc(self) -> list[User]:
        stmt = select(UserModel).order_by(UserModel.created_at.desc(), UserModel.id.desc())
        async with self._session_factory() as db:
            result = await db.execute(stmt)
            rows = result.scalars().all()
        return [_to_domain(row) for row in rows]
