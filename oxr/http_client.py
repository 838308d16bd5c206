"""Thin requests wrapper that authenticates and decodes API calls."""

from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Tuple

import requests
from requests import Response, Session
from requests.exceptions import JSONDecodeError, RequestException

from .config import API_URL
from .errors import ApiError, NetworkError
from .logging import request_log_extra
from .params import serialize_value

logger = logging.getLogger(__name__)

_APP_ID_PAIR = re.compile(r"(app_id=)[^&\s'\"]+")


@dataclass(frozen=True)
class RequestClientConfig:
    """Configuration for the request client."""

    app_id: str
    base_url: str = API_URL
    timeout: float = 5.0

    def __post_init__(self) -> None:
        if not self.app_id or not str(self.app_id).strip():
            raise ValueError("app_id must be provided")


class RequestClient:
    """Issues authenticated GET requests against the API.

    Failures are never retried; callers decide whether to try again.
    """

    def __init__(
        self,
        config: RequestClientConfig,
        session: Optional[Session] = None,
    ) -> None:
        self._config = config
        self._session = session or requests.Session()

    def get(self, path: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        url = self.build_url(path)
        query = self.build_query(params)
        started = time.perf_counter()
        try:
            response = self._session.get(url, params=query, timeout=self._config.timeout)
        except RequestException as exc:
            detail = _redact(str(exc))
            logger.warning(
                "Request to %s failed",
                url,
                extra=request_log_extra(
                    event="request.failed",
                    path=path,
                    status=None,
                    duration_ms=_elapsed_ms(started),
                    error=detail,
                ),
            )
            raise NetworkError(f"Failed to fetch {url}: {detail}") from exc

        logger.debug(
            "GET %s returned %s",
            url,
            response.status_code,
            extra=request_log_extra(
                event="request.completed",
                path=path,
                status=response.status_code,
                duration_ms=_elapsed_ms(started),
            ),
        )
        return self._handle_response(response)

    def close(self) -> None:
        self._session.close()

    def build_url(self, path: str) -> str:
        base = self._config.base_url.rstrip("/")
        suffix = path.lstrip("/")
        return f"{base}/{suffix}"

    def build_query(self, params: Optional[Mapping[str, Any]] = None) -> List[Tuple[str, str]]:
        """Return ordered query pairs with ``app_id`` first.

        A caller-supplied ``app_id`` is dropped, as are ``None`` values.
        """

        query = [("app_id", self._config.app_id)]
        for key, value in (params or {}).items():
            if key == "app_id" or value is None:
                continue
            query.append((key, serialize_value(value)))
        return query

    @staticmethod
    def _handle_response(response: Response) -> Any:
        status = response.status_code
        if not 200 <= status < 300:
            raise _error_from_response(response)

        try:
            return response.json()
        except JSONDecodeError as exc:
            raise ApiError(status, "decode error", str(exc)) from exc


def _redact(text: str) -> str:
    return _APP_ID_PAIR.sub(r"\1***", text)


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000


def _error_from_response(response: Response) -> ApiError:
    status = response.status_code
    try:
        body = response.json()
    except JSONDecodeError:
        body = None

    if not isinstance(body, dict):
        logger.warning("HTTP %s with unparseable error body", status)
        return ApiError(status, "unknown", "unparseable error body")

    message = str(body.get("message") or "unknown")
    description = str(body.get("description") or "")
    logger.warning("HTTP %s from API: %s %s", status, message, description)
    return ApiError(status, message, description)
