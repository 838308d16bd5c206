"""Logging helpers and structured JSON formatter for the client."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import Any

from .config import DEFAULT_LOG_FORMAT, Settings

# Attributes every LogRecord carries; anything else arrived through ``extra``.
_STANDARD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {
    "message",
    "asctime",
}


class JSONLogFormatter(logging.Formatter):
    """Format LogRecord instances into structured JSON strings."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        if record.stack_info:
            payload["stack"] = record.stack_info

        payload.update(
            (key, value) for key, value in vars(record).items() if key not in _STANDARD_ATTRS
        )
        return json.dumps(payload, default=str, separators=(",", ":"))


def setup_logging(settings: Settings | None = None) -> logging.Handler:
    """Install a single stream handler on the root logger.

    Uses ``JSONLogFormatter`` when ``settings.log_json_enabled`` is set,
    otherwise ``settings.log_format``. Returns the installed handler.
    """

    level = _resolve_level(settings.log_level if settings else "INFO")
    json_enabled = settings.log_json_enabled if settings else False
    format_string = settings.log_format if settings else DEFAULT_LOG_FORMAT

    handler = logging.StreamHandler()
    handler.setLevel(level)
    if json_enabled:
        handler.setFormatter(JSONLogFormatter())
    else:
        handler.setFormatter(logging.Formatter(format_string))

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(level)

    # urllib3 logs every connection at DEBUG.
    logging.getLogger("urllib3").setLevel(max(level, logging.INFO))
    return handler


def request_log_extra(
    *,
    event: str,
    path: str,
    status: int | None,
    duration_ms: float | None,
    error: str | None = None,
) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "event": event,
        "path": path,
        "status": status,
        "duration_ms": round(duration_ms, 3) if duration_ms is not None else None,
        "source": "openexchangerates",
    }
    if error:
        payload["error"] = error
    return {key: value for key, value in payload.items() if value is not None}


def _resolve_level(level_name: str) -> int:
    return logging.getLevelNamesMapping().get(str(level_name).upper(), logging.INFO)
