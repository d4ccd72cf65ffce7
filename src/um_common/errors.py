"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: User
  9xxx: System
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
        details: list[str] | None = None,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        self.details = details or []
        super().__init__(message)


# --- 1xxx: User ---

class ValidationFailedError(AppError):
    def __init__(self, details: list[str]) -> None:
        super().__init__(1001, "Validation failed", 400, details)


class EmailExistsError(AppError):
    def __init__(self) -> None:
        super().__init__(1002, "User with this email already exists", 409)


class UserNotFoundError(AppError):
    def __init__(self, user_id: str) -> None:
        super().__init__(1003, f"User not found: {user_id}", 404)


class InvalidUserIdError(AppError):
    def __init__(self, user_id: str) -> None:
        super().__init__(1004, "Invalid user ID format", 400, [f"got {user_id!r}"])


# --- 9xxx: System ---

class RouteNotFoundError(AppError):
    def __init__(self, path: str) -> None:
        super().__init__(9001, f"Route {path} not found", 404)


class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)
