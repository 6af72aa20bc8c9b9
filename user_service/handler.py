"""Per-operation entry points that adapt requests to the record store."""

from __future__ import annotations

import logging
import threading

from .logging_config import log_fields
from .schemas import (
    CreateUserRequest,
    CreateUserResponse,
    DeleteUserRequest,
    DeleteUserResponse,
    GetUserRequest,
    GetUserResponse,
    ListUsersRequest,
    ListUsersResponse,
    UpdateUserRequest,
    UpdateUserResponse,
)
from .store import UserStore


class UserHandler:
    """Log each request, forward it to the store and return its envelope.

    The handler never turns a missing record into an error; callers inspect
    ``success`` on the returned envelope.
    """

    def __init__(self, store: UserStore, logger: logging.Logger | None = None) -> None:
        self._store = store
        self._logger = logger if logger is not None else logging.getLogger("user_service.handler")
        self._requests_total = 0
        self._counter_lock = threading.Lock()

    @property
    def store(self) -> UserStore:
        return self._store

    @property
    def requests_total(self) -> int:
        with self._counter_lock:
            return self._requests_total

    def _count(self) -> None:
        with self._counter_lock:
            self._requests_total += 1

    def get_user(self, request: GetUserRequest) -> GetUserResponse:
        self._logger.info("Handling GetUser request", extra=log_fields(user_id=request.id))
        self._count()
        return self._store.get(request.id)

    def create_user(self, request: CreateUserRequest) -> CreateUserResponse:
        self._logger.info(
            "Handling CreateUser request",
            extra=log_fields(name=request.name, email=request.email, age=request.age),
        )
        self._count()
        return self._store.create(request.name, request.email, request.age)

    def update_user(self, request: UpdateUserRequest) -> UpdateUserResponse:
        self._logger.info("Handling UpdateUser request", extra=log_fields(user_id=request.id))
        self._count()
        return self._store.update(request.id, request.name, request.email, request.age)

    def delete_user(self, request: DeleteUserRequest) -> DeleteUserResponse:
        self._logger.info("Handling DeleteUser request", extra=log_fields(user_id=request.id))
        self._count()
        return self._store.delete(request.id)

    def list_users(self, request: ListUsersRequest) -> ListUsersResponse:
        self._logger.info(
            "Handling ListUsers request",
            extra=log_fields(page=request.page, limit=request.limit),
        )
        self._count()
        return self._store.list(request.page, request.limit)


__all__ = ["UserHandler"]
