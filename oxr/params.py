"""Helpers that turn client configuration and arguments into query parameters."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from .errors import ValidationError

Currencies = Union[str, Iterable[str]]

_CODE_PATTERN = re.compile(r"[A-Z]{3,}")


def normalize_code(code: str, *, field: str = "currency") -> str:
    normalized = str(code).strip().upper()
    if not _CODE_PATTERN.fullmatch(normalized):
        raise ValidationError(
            f"Currency code must be three or more letters: {code!r}",
            rule="currency",
            field=field,
        )
    return normalized


@dataclass(frozen=True)
class ClientConfig:
    """Per-client request defaults."""

    base_currency: str = "USD"
    show_alternative: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "base_currency", normalize_code(self.base_currency))
        object.__setattr__(self, "show_alternative", bool(self.show_alternative))


def base_params(config: ClientConfig, *, include_base: bool = True) -> Dict[str, Any]:
    """Return a fresh parameter mapping seeded from ``config``."""

    params: Dict[str, Any] = {}
    if include_base:
        params["base"] = config.base_currency
    params["show_alternative"] = config.show_alternative
    return params


def format_currencies(
    currencies: Currencies,
    params: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    """Add a comma-joined ``symbols`` entry to a copy of ``params``.

    A single string counts as one currency. Order is kept and nothing is
    deduplicated. When no currencies are given the key is left out.
    """

    updated: Dict[str, Any] = dict(params or {})
    codes = [currencies] if isinstance(currencies, str) else list(currencies)
    if codes:
        updated["symbols"] = ",".join(codes)
    return updated


def serialize_value(value: Any) -> str:
    """Render a query parameter value the way the API expects it."""

    if isinstance(value, bool):
        return "1" if value else "0"
    return str(value)
