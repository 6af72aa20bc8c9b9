"""Request and response envelopes exchanged with the user service."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .models import User, format_timestamp


class _Message(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UserMessage(_Message):
    id: str
    name: str
    email: str
    age: int
    created_at: str
    updated_at: str

    @classmethod
    def from_user(cls, user: User) -> "UserMessage":
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            age=user.age,
            created_at=format_timestamp(user.created_at),
            updated_at=format_timestamp(user.updated_at),
        )


class GetUserRequest(_Message):
    id: str


class CreateUserRequest(_Message):
    name: str = ""
    email: str = ""
    age: int = 0


class UpdateUserRequest(_Message):
    id: str
    name: str = ""
    email: str = ""
    age: int = 0


class UpdateUserBody(_Message):
    """Body of ``PUT /v1/users/{id}``; the id travels in the path."""

    name: str = ""
    email: str = ""
    age: int = 0


class DeleteUserRequest(_Message):
    id: str


class ListUsersRequest(_Message):
    page: int = 1
    limit: int = 10


class GetUserResponse(_Message):
    user: Optional[UserMessage] = None
    success: bool
    message: str


class CreateUserResponse(_Message):
    user: UserMessage
    success: bool
    message: str


class UpdateUserResponse(_Message):
    user: Optional[UserMessage] = None
    success: bool
    message: str


class DeleteUserResponse(_Message):
    success: bool
    message: str


class ListUsersResponse(_Message):
    users: List[UserMessage] = Field(default_factory=list)
    total: int
    success: bool
    message: str


__all__ = [
    "CreateUserRequest",
    "CreateUserResponse",
    "DeleteUserRequest",
    "DeleteUserResponse",
    "GetUserRequest",
    "GetUserResponse",
    "ListUsersRequest",
    "ListUsersResponse",
    "UpdateUserBody",
    "UpdateUserRequest",
    "UpdateUserResponse",
    "UserMessage",
]
