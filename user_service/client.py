"""HTTP client for a running user service."""

from __future__ import annotations

from typing import Any, Dict, Type, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ValidationError

from .schemas import (
    CreateUserResponse,
    DeleteUserResponse,
    GetUserResponse,
    ListUsersResponse,
    UpdateUserResponse,
)

DEFAULT_SERVICE_URL = "http://localhost:50051"

_Response = TypeVar("_Response", bound=BaseModel)


class UserServiceError(RuntimeError):
    """Raised when the service cannot be reached or answers unexpectedly."""


def _normalize_base_url(base_url: str) -> str:
    cleaned = (base_url or "").strip()
    if not cleaned:
        raise ValueError("Service URL must not be empty")
    return cleaned.rstrip("/")


def _user_path(user_id: str) -> str:
    return f"/v1/users/{quote(user_id, safe='')}"


def _extract_error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        payload = response.text
    if isinstance(payload, dict):
        for key in ("message", "detail", "error"):
            value = payload.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
    if isinstance(payload, str) and payload.strip():
        return payload.strip()
    return f"Service responded with status {response.status_code}"


class UserServiceClient:
    """Call the user operations over HTTP.

    Envelopes with ``success=False`` are returned to the caller as-is;
    :class:`UserServiceError` is reserved for transport failures.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_SERVICE_URL,
        *,
        timeout: float = 10.0,
        http: httpx.Client | None = None,
    ) -> None:
        self._owns_http = http is None
        self._http = http or httpx.Client(base_url=_normalize_base_url(base_url), timeout=timeout)

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> "UserServiceClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _request(
        self,
        method: str,
        path: str,
        model: Type[_Response],
        **kwargs: Any,
    ) -> _Response:
        try:
            response = self._http.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            raise UserServiceError(f"Failed to contact user service: {exc}") from exc

        if response.status_code != 200:
            raise UserServiceError(_extract_error_message(response))

        try:
            return model.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise UserServiceError("Service returned an unexpected response format") from exc

    def get_user(self, user_id: str) -> GetUserResponse:
        return self._request("GET", _user_path(user_id), GetUserResponse)

    def create_user(self, name: str, email: str, age: int) -> CreateUserResponse:
        body: Dict[str, Any] = {"name": name, "email": email, "age": age}
        return self._request("POST", "/v1/users", CreateUserResponse, json=body)

    def update_user(
        self,
        user_id: str,
        *,
        name: str = "",
        email: str = "",
        age: int = 0,
    ) -> UpdateUserResponse:
        body: Dict[str, Any] = {"name": name, "email": email, "age": age}
        return self._request("PUT", _user_path(user_id), UpdateUserResponse, json=body)

    def delete_user(self, user_id: str) -> DeleteUserResponse:
        return self._request("DELETE", _user_path(user_id), DeleteUserResponse)

    def list_users(self, page: int = 1, limit: int = 10) -> ListUsersResponse:
        return self._request(
            "GET",
            "/v1/users",
            ListUsersResponse,
            params={"page": page, "limit": limit},
        )


__all__ = ["DEFAULT_SERVICE_URL", "UserServiceClient", "UserServiceError"]
