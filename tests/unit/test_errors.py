"""Tests for um_common.errors, um_common.response and config.settings."""

import pytest
from pydantic import ValidationError

from config.settings import Settings
from src.um_common.errors import (
    AppError,
    EmailExistsError,
    InvalidUserIdError,
    UserNotFoundError,
    ValidationFailedError,
)
from src.um_common.response import ApiResponse, error_response, success_response


class TestAppError:
    def test_base_error(self) -> None:
        err = AppError(code=9002, message="Internal error")
        assert err.code == 9002
        assert err.message == "Internal error"
        assert err.http_status == 500
        assert err.details == []

    def test_is_exception(self) -> None:
        assert isinstance(AppError(code=1001, message="test"), Exception)


class TestSpecificErrors:
    def test_email_exists(self) -> None:
        err = EmailExistsError()
        assert err.code == 1002
        assert err.http_status == 409

    def test_user_not_found(self) -> None:
        err = UserNotFoundError("abc")
        assert err.http_status == 404
        assert "abc" in err.message

    def test_validation_failed_carries_details(self) -> None:
        err = ValidationFailedError(["age: too small"])
        assert err.http_status == 400
        assert err.details == ["age: too small"]

    def test_invalid_user_id(self) -> None:
        err = InvalidUserIdError("xyz")
        assert err.http_status == 400
        assert err.message == "Invalid user ID format"


class TestApiResponse:
    def test_success(self) -> None:
        resp = success_response({"k": 1}, message="ok")
        assert resp.code == 0
        assert resp.message == "ok"
        assert resp.data == {"k": 1}
        assert resp.request_id.startswith("req_")

    def test_error(self) -> None:
        resp = error_response(1002, "dup", ["email"])
        assert isinstance(resp, ApiResponse)
        assert resp.data is None
        assert resp.details == ["email"]


class TestSettings:
    def test_ttl_must_be_positive(self) -> None:
        with pytest.raises(ValidationError, match="CACHE_TTL_SECONDS"):
            Settings(CACHE_TTL_SECONDS=0)

    def test_redacted_masks_credentials(self) -> None:
        settings = Settings(
            DATABASE_URL="postgresql+asyncpg://u:secret@db:5432/users",
            REDIS_URL="redis://:hunter2@cache:6379/0",
        )

        data = settings.redacted()

        assert "secret" not in data["DATABASE_URL"]
        assert "hunter2" not in data["REDIS_URL"]
        assert data["DATABASE_URL"].endswith("//***:***@db:5432/users")

    def test_log_level_upper_cased(self) -> None:
        assert Settings(LOG_LEVEL="debug").LOG_LEVEL == "DEBUG"
