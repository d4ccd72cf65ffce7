"""Pydantic request/response schemas for um_user.

All responses are wrapped in ApiResponse at the router layer.
"""

from typing import Annotated

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    StringConstraints,
    field_validator,
    model_validator,
)

from src.um_user.domain.models import User, UserPatch

Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=50)]
Age = Annotated[int, Field(ge=1, le=120)]


class CreateUserRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: Name
    email: EmailStr
    age: Age

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return v.strip().lower()


class UpdateUserRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: Name | None = None
    email: EmailStr | None = None
    age: Age | None = None

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str | None) -> str | None:
        return v.strip().lower() if v is not None else None

    @model_validator(mode="after")
    def at_least_one_field(self) -> "UpdateUserRequest":
        if self.name is None and self.email is None and self.age is None:
            raise ValueError("At least one field must be provided for update")
        return self

    def to_patch(self) -> UserPatch:
        return UserPatch(name=self.name, email=self.email, age=self.age)


class UserOut(BaseModel):
    id: str
    name: str
    email: str
    age: int
    created_at: str
    updated_at: str

    @classmethod
    def from_domain(cls, u: User) -> "UserOut":
        return cls(
            id=u.id,
            name=u.name,
            email=u.email,
            age=u.age,
            created_at=u.created_at.isoformat(),
            updated_at=u.updated_at.isoformat(),
        )


class UserEnvelope(BaseModel):
    user: UserOut


class UserListResponse(BaseModel):
    users: list[UserOut]
    count: int

    @classmethod
    def from_domain(cls, users: list[User]) -> "UserListResponse":
        return cls(users=[UserOut.from_domain(u) for u in users], count=len(users))
