"""Domain models for um_user — pure dataclasses, no business logic."""

from dataclasses import dataclass, fields
from datetime import datetime
from typing import Any


@dataclass
class User:
    id: str
    name: str
    email: str
    age: int
    created_at: datetime
    updated_at: datetime


@dataclass
class UserPatch:
    """Partial update: None means "leave unchanged"."""

    name: str | None = None
    email: str | None = None
    age: int | None = None

    def supplied(self) -> dict[str, Any]:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }

    def is_empty(self) -> bool:
        return not self.supplied()
