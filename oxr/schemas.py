"""Typed results built from API payloads."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Mapping

from .dates import ensure_utc


@dataclass(frozen=True)
class ConversionResult:
    """Outcome of a single currency conversion."""

    converted_at: datetime
    rate: float
    value: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "converted_at", ensure_utc(self.converted_at))

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> ConversionResult:
        meta = payload["meta"]
        return cls(
            converted_at=datetime.fromtimestamp(int(meta["timestamp"]), tz=UTC),
            rate=meta["rate"],
            value=payload["response"],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "converted_at": self.converted_at.isoformat(),
            "rate": self.rate,
            "value": self.value,
        }
