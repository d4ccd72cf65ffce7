"""Cache value codecs for User snapshots.

The cache-aside logic only sees str payloads; swapping the codec changes the
wire format of cache entries without touching the service.
"""

import json
from datetime import datetime
from typing import Any, Protocol

from src.um_user.domain.models import User


class UserCodecProtocol(Protocol):
    def encode_user(self, user: User) -> str: ...

    def decode_user(self, payload: str) -> User: ...

    def encode_users(self, users: list[User]) -> str: ...

    def decode_users(self, payload: str) -> list[User]: ...


def _to_dict(user: User) -> dict[str, Any]:
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "age": user.age,
        "created_at": user.created_at.isoformat(),
        "updated_at": user.updated_at.isoformat(),
    }


def _from_dict(data: dict[str, Any]) -> User:
    return User(
        id=str(data["id"]),
        name=data["name"],
        email=data["email"],
        age=int(data["age"]),
        created_at=datetime.fromisoformat(data["created_at"]),
        updated_at=datetime.fromisoformat(data["updated_at"]),
    )


class JsonUserCodec:
    """JSON objects with ISO-8601 timestamps."""

    def encode_user(self, user: User) -> str:
        return json.dumps(_to_dict(user))

    def decode_user(self, payload: str) -> User:
        return _from_dict(json.loads(payload))

    def encode_users(self, users: list[User]) -> str:
        return json.dumps([_to_dict(u) for u in users])

    def decode_users(self, payload: str) -> list[User]:
        return [_from_dict(item) for item in json.loads(payload)]
