"""Environment-driven settings for the client and CLI."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

API_URL = "https://openexchangerates.org/api/"

DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class Settings:
    """Resolved configuration for one client instance."""

    app_id: str
    api_base_url: str = API_URL
    base_currency: str = "USD"
    show_alternative: bool = False
    request_timeout_seconds: float = 5.0
    log_level: str = "INFO"
    log_json_enabled: bool = False
    log_format: str = DEFAULT_LOG_FORMAT


def _get_env(environ: Mapping[str, str], name: str, default: str) -> str:
    value = environ.get(name)
    return value if value is not None else default


def _to_bool(name: str, value: str) -> bool:
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean flag, got '{value}'")


def get_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build ``Settings`` from environment variables.

    Args:
        environ: Mapping to read from. Defaults to ``os.environ``.

    Raises:
        ValueError: If ``OXR_APP_ID`` is missing or a value cannot be parsed.
    """

    env = os.environ if environ is None else environ

    app_id = _get_env(env, "OXR_APP_ID", "").strip()
    if not app_id:
        raise ValueError("OXR_APP_ID is not set")

    timeout_raw = _get_env(env, "REQUEST_TIMEOUT_SECONDS", "5")
    try:
        timeout = float(timeout_raw)
    except ValueError as exc:
        raise ValueError(f"REQUEST_TIMEOUT_SECONDS must be a number, got '{timeout_raw}'") from exc
    if timeout <= 0:
        raise ValueError("REQUEST_TIMEOUT_SECONDS must be positive")

    return Settings(
        app_id=app_id,
        api_base_url=_get_env(env, "OXR_API_BASE_URL", API_URL),
        base_currency=_get_env(env, "OXR_BASE_CURRENCY", "USD"),
        show_alternative=_to_bool(
            "OXR_SHOW_ALTERNATIVE", _get_env(env, "OXR_SHOW_ALTERNATIVE", "false")
        ),
        request_timeout_seconds=timeout,
        log_level=_get_env(env, "LOG_LEVEL", "INFO").upper(),
        log_json_enabled=_to_bool("LOG_JSON_ENABLED", _get_env(env, "LOG_JSON_ENABLED", "false")),
        log_format=_get_env(env, "LOG_FORMAT", DEFAULT_LOG_FORMAT),
    )
