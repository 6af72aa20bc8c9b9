"""HTTP transport for the user operations and the operational probes."""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Dict, Union

from fastapi import FastAPI

from .handler import UserHandler
from .logging_config import log_fields
from .models import format_timestamp
from .schemas import (
    CreateUserRequest,
    CreateUserResponse,
    DeleteUserRequest,
    DeleteUserResponse,
    GetUserRequest,
    GetUserResponse,
    ListUsersRequest,
    ListUsersResponse,
    UpdateUserBody,
    UpdateUserRequest,
    UpdateUserResponse,
)
from .store import UserStore

logger = logging.getLogger("user_service.service")

SERVICE_NAME = "user-service"


def register_api_routes(app: FastAPI, handler: UserHandler) -> None:
    """Expose the five user operations as JSON endpoints.

    Every endpoint answers 200 with the envelope returned by the handler; a
    missing record shows up as ``success: false`` in the body.
    """

    @app.get("/v1/users/{user_id}", response_model=GetUserResponse)
    def get_user(user_id: str) -> GetUserResponse:
        return handler.get_user(GetUserRequest(id=user_id))

    @app.post("/v1/users", response_model=CreateUserResponse)
    def create_user(request: CreateUserRequest) -> CreateUserResponse:
        return handler.create_user(request)

    @app.put("/v1/users/{user_id}", response_model=UpdateUserResponse)
    def update_user(user_id: str, body: UpdateUserBody) -> UpdateUserResponse:
        return handler.update_user(
            UpdateUserRequest(id=user_id, name=body.name, email=body.email, age=body.age)
        )

    @app.delete("/v1/users/{user_id}", response_model=DeleteUserResponse)
    def delete_user(user_id: str) -> DeleteUserResponse:
        return handler.delete_user(DeleteUserRequest(id=user_id))

    @app.get("/v1/users", response_model=ListUsersResponse)
    def list_users(page: int = 1, limit: int = 10) -> ListUsersResponse:
        return handler.list_users(ListUsersRequest(page=page, limit=limit))


def register_probe_routes(app: FastAPI, handler: UserHandler) -> None:
    """Expose health, readiness and metrics endpoints."""

    started = time.monotonic()

    @app.get("/health")
    def health() -> Dict[str, str]:
        return {
            "status": "healthy",
            "timestamp": format_timestamp(datetime.now(timezone.utc)),
            "service": SERVICE_NAME,
        }

    @app.get("/ready")
    def ready() -> Dict[str, str]:
        return {"status": "ready"}

    @app.get("/metrics")
    def metrics() -> Dict[str, Union[int, str]]:
        return {
            "requests_total": handler.requests_total,
            "uptime": f"{time.monotonic() - started:.3f}s",
        }


def create_app(
    *,
    store: UserStore | None = None,
    handler: UserHandler | None = None,
    seed_sample_data: bool = True,
    include_api: bool = True,
    include_probes: bool = True,
) -> FastAPI:
    """Instantiate the FastAPI application for the user service."""

    if handler is None:
        if store is None:
            store = UserStore(seed=seed_sample_data)
        handler = UserHandler(store)

    app = FastAPI(
        title="User Service API",
        version="0.1.0",
        description="In-memory user records exposed over JSON/HTTP.",
    )
    app.state.handler = handler
    app.state.store = handler.store

    if include_api:
        register_api_routes(app, handler)
    if include_probes:
        register_probe_routes(app, handler)

    logger.info(
        "User service application created",
        extra=log_fields(api=include_api, probes=include_probes),
    )
    return app


def create_api_app(
    *,
    store: UserStore | None = None,
    handler: UserHandler | None = None,
    seed_sample_data: bool = True,
) -> FastAPI:
    """Return an application exposing only the user operations."""

    return create_app(
        store=store,
        handler=handler,
        seed_sample_data=seed_sample_data,
        include_api=True,
        include_probes=False,
    )


def create_probe_app(
    *,
    store: UserStore | None = None,
    handler: UserHandler | None = None,
    seed_sample_data: bool = True,
) -> FastAPI:
    """Return an application exposing only health, readiness and metrics."""

    return create_app(
        store=store,
        handler=handler,
        seed_sample_data=seed_sample_data,
        include_api=False,
        include_probes=True,
    )


__all__ = ["SERVICE_NAME", "create_api_app", "create_app", "create_probe_app"]
