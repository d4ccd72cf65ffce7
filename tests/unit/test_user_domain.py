"""Unit tests for um_user domain: patch semantics, key scheme, JSON codec."""

import json
from datetime import UTC, datetime

import pytest

from src.um_user.domain.cache import CACHE_ALL_USERS_KEY, user_cache_key
from src.um_user.domain.codec import JsonUserCodec
from src.um_user.domain.models import User, UserPatch


def _make_user(**kwargs) -> User:
    defaults = dict(
        id="0b7c5b0e-6a53-4c41-9d3b-0d2c1f6b2a11", name="Jane Doe",
        email="jane@example.com", age=25,
        created_at=datetime(2026, 1, 1, 12, 0, tzinfo=UTC),
        updated_at=datetime(2026, 1, 2, 8, 30, tzinfo=UTC),
    )
    defaults.update(kwargs)
    return User(**defaults)


class TestUserPatch:
    def test_supplied_skips_none(self) -> None:
        assert UserPatch(age=30).supplied() == {"age": 30}

    def test_empty(self) -> None:
        assert UserPatch().is_empty()
        assert not UserPatch(name="Bob").is_empty()


class TestCacheKeys:
    def test_user_key_uses_prefix(self) -> None:
        assert user_cache_key("abc") == "users:abc"

    def test_list_key_is_fixed(self) -> None:
        assert CACHE_ALL_USERS_KEY == "users:all"


class TestJsonUserCodec:
    def test_user_payload_is_plain_json(self) -> None:
        payload = JsonUserCodec().encode_user(_make_user())

        data = json.loads(payload)
        assert data["email"] == "jane@example.com"
        assert data["created_at"] == "2026-01-01T12:00:00+00:00"

    def test_decode_keeps_timezone(self) -> None:
        codec = JsonUserCodec()
        user = _make_user()

        decoded = codec.decode_user(codec.encode_user(user))

        assert decoded == user
        assert decoded.created_at.tzinfo is not None

    def test_list_preserves_order(self) -> None:
        codec = JsonUserCodec()
        users = [_make_user(id="b", name="Bee"), _make_user(id="a", name="Ay")]

        assert [u.id for u in codec.decode_users(codec.encode_users(users))] == ["b", "a"]

    def test_malformed_payload_raises_value_error(self) -> None:
        with pytest.raises(ValueError):
            JsonUserCodec().decode_user("not json")
