"""Domain models held by the in-memory user store."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone


def format_timestamp(value: datetime) -> str:
    """Render ``value`` as an RFC 3339 string in UTC with second precision."""

    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    rendered = value.astimezone(timezone.utc).isoformat(timespec="seconds")
    return rendered.replace("+00:00", "Z")


@dataclass
class User:
    """A user record owned by :class:`~user_service.store.UserStore`."""

    id: str
    name: str
    email: str
    age: int
    created_at: datetime
    updated_at: datetime


__all__ = ["User", "format_timestamp"]
