"""Public client for the Open Exchange Rates API."""

from __future__ import annotations

import logging
import math
from dataclasses import replace
from datetime import datetime
from typing import Any, Callable, Dict, Mapping, Optional

from requests import Session

from .config import Settings, get_settings
from .dates import (
    Period,
    format_ohlc_start,
    utc_now,
    validate_date,
    validate_date_range,
    validate_ohlc,
)
from .errors import ApiError, ValidationError
from .http_client import API_URL, RequestClient, RequestClientConfig
from .params import ClientConfig, Currencies, base_params, format_currencies, normalize_code
from .schemas import ConversionResult

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class OXR:
    """Open Exchange Rates client.

    Each instance owns its configuration (base currency and the alternative
    currencies flag). The setters are not synchronized; share an instance
    across threads only if nothing mutates it concurrently.
    """

    def __init__(
        self,
        app_id: str,
        base_currency: str = "USD",
        show_alternative: bool = False,
        *,
        base_url: str = API_URL,
        timeout: float = 5.0,
        session: Optional[Session] = None,
        clock: Clock = utc_now,
        request_client: Optional[RequestClient] = None,
    ) -> None:
        self._config = ClientConfig(base_currency=base_currency, show_alternative=show_alternative)
        self._client = request_client or RequestClient(
            RequestClientConfig(app_id=app_id, base_url=base_url, timeout=timeout),
            session=session,
        )
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> OXR:
        return cls(
            settings.app_id,
            base_currency=settings.base_currency,
            show_alternative=settings.show_alternative,
            base_url=settings.api_base_url,
            timeout=settings.request_timeout_seconds,
            **kwargs,
        )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **kwargs: Any) -> OXR:
        return cls.from_settings(get_settings(environ), **kwargs)

    @property
    def config(self) -> ClientConfig:
        return self._config

    def set_base_currency(self, currency: str) -> OXR:
        """Set the currency all rates are expressed against."""

        self._config = replace(self._config, base_currency=currency)
        return self

    def set_show_alternative(self, flag: bool) -> OXR:
        """Include alternative, black market and digital currency rates."""

        self._config = replace(self._config, show_alternative=flag)
        return self

    def get_currencies(self) -> Dict[str, str]:
        """Return every available currency code mapped to its full name."""

        params = base_params(self._config, include_base=False)
        return self._client.get("currencies.json", params)

    def get_latest_rates(self, currencies: Currencies = ()) -> Dict[str, Any]:
        params = format_currencies(currencies, base_params(self._config))
        payload = self._client.get("latest.json", params)
        return _extract(payload, "rates")

    def get_historical_rates(self, date: Any, currencies: Currencies = ()) -> Dict[str, Any]:
        """Return the end-of-day rates for ``date`` (``YYYY-MM-DD`` or a date)."""

        day = validate_date(date)
        params = format_currencies(currencies, base_params(self._config))
        payload = self._client.get(f"historical/{day}.json", params)
        return _extract(payload, "rates")

    def get_time_series(self, start: Any, end: Any, currencies: Currencies = ()) -> Dict[str, Any]:
        """Return daily rates keyed by date for the inclusive range ``start``..``end``."""

        start_day, end_day = validate_date_range(start, end)
        params: Dict[str, Any] = {"start": start_day, "end": end_day}
        params.update(base_params(self._config))
        payload = self._client.get("time-series.json", format_currencies(currencies, params))
        return _extract(payload, "rates")

    def convert(self, amount: float, to: str, from_currency: Optional[str] = None) -> ConversionResult:
        """Convert ``amount`` from ``from_currency`` (default: base currency) into ``to``."""

        source = self._config.base_currency
        if from_currency:
            source = normalize_code(from_currency, field="from")
        target = normalize_code(to, field="to")
        payload = self._client.get(f"convert/{_format_amount(amount)}/{source}/{target}")
        try:
            return ConversionResult.from_payload(payload)
        except (KeyError, TypeError, ValueError) as exc:
            raise ApiError(200, "unexpected payload", f"malformed convert response: {exc}") from exc

    def get_ohlc_rates(
        self,
        start_time: Any,
        period: Period | str,
        currencies: Currencies = (),
    ) -> Dict[str, Any]:
        """Return open, high, low, close and average rates for one period.

        ``start_time`` is checked against the endpoint's look-back, alignment
        and completeness limits before anything is sent.
        """

        start = validate_ohlc(start_time, period, now=self._clock())
        params: Dict[str, Any] = {
            "start_time": format_ohlc_start(start),
            "period": Period(period).value,
        }
        params.update(base_params(self._config))
        payload = self._client.get("ohlc.json", format_currencies(currencies, params))
        return _extract(payload, "rates")

    def get_usage(self) -> Dict[str, Any]:
        """Return plan and usage statistics for the app id."""

        payload = self._client.get("usage.json")
        return _extract(payload, "data")

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> OXR:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def _extract(payload: Any, key: str) -> Any:
    if not isinstance(payload, dict) or key not in payload:
        logger.warning("API response missing '%s' field", key)
        raise ApiError(200, "unexpected payload", f"response missing '{key}' field")
    return payload[key]


def _format_amount(amount: float) -> str:
    if isinstance(amount, bool) or not isinstance(amount, (int, float)) or not math.isfinite(amount):
        raise ValidationError(
            f"Amount must be a finite number, got {amount!r}.", rule="type", field="amount"
        )
    if float(amount).is_integer():
        return str(int(amount))
    return repr(float(amount))
