"""In-memory record store backing the user service."""

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List

from .logging_config import log_fields
from .models import User
from .schemas import (
    CreateUserResponse,
    DeleteUserResponse,
    GetUserResponse,
    ListUsersResponse,
    UpdateUserResponse,
    UserMessage,
)

USER_NOT_FOUND = "User not found"
NO_USERS_FOR_PAGE = "No users found for the given page"

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserStore:
    """Owns the keyed collection of user records.

    Every operation returns a response envelope; a missing record is reported
    through ``success=False`` rather than an exception. Identifiers are
    allocated as ``live count + 1``, so an id freed by a deletion can be issued
    again and a create may replace an existing record with the same id.
    """

    def __init__(
        self,
        *,
        clock: Clock = _utcnow,
        seed: bool = True,
        logger: logging.Logger | None = None,
    ) -> None:
        self._clock = clock
        self._logger = logger if logger is not None else logging.getLogger("user_service.store")
        self._users: Dict[str, User] = {}
        self._lock = threading.Lock()
        if seed:
            self._initialise_sample_data()

    def __len__(self) -> int:
        with self._lock:
            return len(self._users)

    def __contains__(self, user_id: object) -> bool:
        with self._lock:
            return user_id in self._users

    def _initialise_sample_data(self) -> None:
        now = self._clock()
        samples = [
            ("1", "John Doe", "john.doe@example.com", 30, now - timedelta(hours=24)),
            ("2", "Jane Smith", "jane.smith@example.com", 25, now - timedelta(hours=12)),
        ]
        for user_id, name, email, age, created in samples:
            self._users[user_id] = User(
                id=user_id,
                name=name,
                email=email,
                age=age,
                created_at=created,
                updated_at=created,
            )
        self._logger.info("Initialized sample user data")

    def get(self, user_id: str) -> GetUserResponse:
        self._logger.info("Getting user", extra=log_fields(user_id=user_id))

        with self._lock:
            user = self._users.get(user_id)
            if user is None:
                return GetUserResponse(success=False, message=USER_NOT_FOUND)
            return GetUserResponse(
                user=UserMessage.from_user(user),
                success=True,
                message="User retrieved successfully",
            )

    def create(self, name: str, email: str, age: int) -> CreateUserResponse:
        self._logger.info(
            "Creating user", extra=log_fields(name=name, email=email, age=age)
        )

        with self._lock:
            user_id = str(len(self._users) + 1)
            now = self._clock()
            user = User(
                id=user_id,
                name=name,
                email=email,
                age=age,
                created_at=now,
                updated_at=now,
            )
            self._users[user_id] = user
            return CreateUserResponse(
                user=UserMessage.from_user(user),
                success=True,
                message="User created successfully",
            )

    def update(self, user_id: str, name: str, email: str, age: int) -> UpdateUserResponse:
        """Apply a partial update: empty strings and non-positive ages are ignored."""

        self._logger.info("Updating user", extra=log_fields(user_id=user_id))

        with self._lock:
            user = self._users.get(user_id)
            if user is None:
                return UpdateUserResponse(success=False, message=USER_NOT_FOUND)

            if name:
                user.name = name
            if email:
                user.email = email
            if age > 0:
                user.age = age
            user.updated_at = self._clock()

            return UpdateUserResponse(
                user=UserMessage.from_user(user),
                success=True,
                message="User updated successfully",
            )

    def delete(self, user_id: str) -> DeleteUserResponse:
        self._logger.info("Deleting user", extra=log_fields(user_id=user_id))

        with self._lock:
            if self._users.pop(user_id, None) is None:
                return DeleteUserResponse(success=False, message=USER_NOT_FOUND)
        return DeleteUserResponse(success=True, message="User deleted successfully")

    def list(self, page: int, limit: int) -> ListUsersResponse:
        """Return one page of users using offset/limit slicing.

        Ordering is not part of the contract. Bounds computed from a
        non-positive page or a negative limit are clamped to zero.
        """

        self._logger.info("Listing users", extra=log_fields(page=page, limit=limit))

        with self._lock:
            users: List[User] = list(self._users.values())
            snapshot = [UserMessage.from_user(user) for user in users]

        total = len(snapshot)
        start = (page - 1) * limit
        end = start + limit

        if start >= total:
            return ListUsersResponse(
                users=[],
                total=total,
                success=True,
                message=NO_USERS_FOR_PAGE,
            )

        end = min(end, total)
        return ListUsersResponse(
            users=snapshot[max(start, 0):max(end, 0)],
            total=total,
            success=True,
            message="Users retrieved successfully",
        )

    def snapshot(self) -> List[User]:
        """Return detached copies of every stored record."""

        with self._lock:
            return [replace(user) for user in self._users.values()]


__all__ = ["NO_USERS_FOR_PAGE", "USER_NOT_FOUND", "UserStore"]
