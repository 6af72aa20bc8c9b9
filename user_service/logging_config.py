"""Logging setup for the user service.

Records are emitted either as one JSON object per line or as plain text.
Structured context travels on the record under the ``fields`` attribute,
which callers attach with ``extra=log_fields(...)``::

    logger.info("Getting user", extra=log_fields(user_id="1"))
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict

TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_HANDLER_MARK = "_user_service"


def log_fields(**fields: Any) -> Dict[str, Dict[str, Any]]:
    """Wrap key/value context so it can be passed as ``extra=``."""

    return {"fields": fields}


class JSONFormatter(logging.Formatter):
    """Format log records as single-line JSON documents."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "time": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "msg": record.getMessage(),
        }
        fields = getattr(record, "fields", None)
        if isinstance(fields, dict):
            for key, value in fields.items():
                payload.setdefault(key, value)
        if record.exc_info:
            payload["error"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def setup_logging(level: str = "info", fmt: str = "json") -> None:
    """Configure the root logger once.

    Repeated calls are ignored once this module has installed its handler.
    Handlers added by other tools (test capture, embedding servers) are left
    alone and do not prevent installation.
    """

    root = logging.getLogger()
    if any(getattr(handler, _HANDLER_MARK, False) for handler in root.handlers):
        return

    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = logging.StreamHandler()
    if fmt.lower() == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))
    setattr(handler, _HANDLER_MARK, True)
    root.addHandler(handler)


__all__ = ["JSONFormatter", "TEXT_FORMAT", "log_fields", "setup_logging"]
