"""In-memory user record service."""

from __future__ import annotations

from typing import Any

from .handler import UserHandler
from .store import UserStore


def create_app(*args: Any, **kwargs: Any):
    """Factory function that returns the combined API + probe application."""

    from .service import create_app as _create_app

    return _create_app(*args, **kwargs)


def create_api_app(*args: Any, **kwargs: Any):
    """Factory function for the user operations application."""

    from .service import create_api_app as _create_api_app

    return _create_api_app(*args, **kwargs)


def create_probe_app(*args: Any, **kwargs: Any):
    """Factory function for the health/readiness/metrics application."""

    from .service import create_probe_app as _create_probe_app

    return _create_probe_app(*args, **kwargs)


__all__ = [
    "UserHandler",
    "UserStore",
    "create_app",
    "create_api_app",
    "create_probe_app",
]
