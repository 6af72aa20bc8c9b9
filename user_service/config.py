"""Configuration management for the user service."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional

import yaml

logger = logging.getLogger("user_service.config")

DEFAULT_API_HOST = "0.0.0.0"
DEFAULT_API_PORT = 50051
DEFAULT_HTTP_PORT = 8080
DEFAULT_LOG_LEVEL = "info"
DEFAULT_LOG_FORMAT = "json"

_CONFIG_CANDIDATES = (Path("configs") / "config.yaml", Path("config.yaml"))


def _section(raw: Mapping[str, object], name: str) -> Dict[str, object]:
    value = raw.get(name) or {}
    if not isinstance(value, dict):
        raise ValueError(f"Configuration section '{name}' must be a mapping")
    return value


def _parse_port(value: object, field: str) -> int:
    try:
        port = int(str(value).strip())
    except ValueError as exc:
        raise ValueError(f"{field} must be an integer") from exc
    if port < 1 or port > 65535:
        raise ValueError(f"{field} must be between 1 and 65535")
    return port


def _pick(env_value: Optional[str], file_value: object, default: object) -> object:
    """Return the env override when set, else the file value when present, else ``default``."""
    if env_value is not None and env_value.strip():
        return env_value
    if file_value is not None:
        return file_value
    return default


def _as_bool(value: object, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class ServiceConfig:
    """Settings for both listeners, logging and the record store."""

    api_host: str = DEFAULT_API_HOST
    api_port: int = DEFAULT_API_PORT
    http_port: int = DEFAULT_HTTP_PORT
    log_level: str = DEFAULT_LOG_LEVEL
    log_format: str = DEFAULT_LOG_FORMAT
    seed_sample_data: bool = True

    @staticmethod
    def from_dict(
        data: Mapping[str, object],
        environ: Optional[Mapping[str, str]] = None,
    ) -> "ServiceConfig":
        """Build a :class:`ServiceConfig` from parsed YAML, applying env overrides."""
        env = os.environ if environ is None else environ

        api = _section(data, "api")
        http = _section(data, "http")
        log = _section(data, "log")
        store = _section(data, "store")

        api_host = _pick(env.get("USER_SERVICE_API_HOST"), api.get("host"), DEFAULT_API_HOST)
        api_port = _pick(env.get("USER_SERVICE_API_PORT"), api.get("port"), DEFAULT_API_PORT)
        http_port = _pick(env.get("USER_SERVICE_HTTP_PORT"), http.get("port"), DEFAULT_HTTP_PORT)
        log_level = _pick(env.get("USER_SERVICE_LOG_LEVEL"), log.get("level"), DEFAULT_LOG_LEVEL)
        log_format = _pick(env.get("USER_SERVICE_LOG_FORMAT"), log.get("format"), DEFAULT_LOG_FORMAT)

        api_host = str(api_host).strip()
        if not api_host:
            raise ValueError("api.host must not be empty")

        log_format = str(log_format).strip().lower()
        if log_format not in {"json", "text"}:
            raise ValueError("log.format must be either 'json' or 'text'")

        return ServiceConfig(
            api_host=api_host,
            api_port=_parse_port(api_port, "api.port"),
            http_port=_parse_port(http_port, "http.port"),
            log_level=str(log_level).strip().lower(),
            log_format=log_format,
            seed_sample_data=_as_bool(store.get("seed_sample_data"), True),
        )


def load_config(
    config_path: Optional[Path],
    environ: Optional[Mapping[str, str]] = None,
) -> ServiceConfig:
    """Load settings from a YAML file, falling back to defaults when it is absent."""
    if config_path is None or not config_path.exists():
        logger.warning(
            "Could not read config file %s; using defaults",
            config_path if config_path is not None else "(none found)",
        )
        return ServiceConfig.from_dict({}, environ)

    with config_path.open("r", encoding="utf-8") as handle:
        try:
            raw = yaml.safe_load(handle) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ValueError("Configuration file must contain a mapping at the top level")

    return ServiceConfig.from_dict(raw, environ)


def resolve_config_path(env_value: Optional[str], base_dir: Optional[Path] = None) -> Optional[Path]:
    """Resolve the configuration file to load, if any."""
    if env_value:
        return Path(env_value).expanduser().resolve(strict=False)

    root = base_dir or Path.cwd()
    for candidate in _CONFIG_CANDIDATES:
        path = root / candidate
        if path.exists():
            return path.resolve(strict=False)
    return None


__all__ = ["ServiceConfig", "load_config", "resolve_config_path"]
