"""Exception hierarchy raised by the Open Exchange Rates client."""

from __future__ import annotations


class OXRError(Exception):
    """Base class for every error raised by the client."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(OXRError):
    """A caller-supplied argument broke a documented rule.

    Raised before any request is sent. ``rule`` is a short machine-readable
    identifier such as ``"alignment"`` or ``"incomplete_period"``.
    """

    def __init__(
        self,
        message: str,
        *,
        rule: str,
        period: str | None = None,
        field: str | None = None,
    ) -> None:
        super().__init__(message)
        self.rule = rule
        self.period = period
        self.field = field


class NetworkError(OXRError):
    """The transport failed before a response was received."""


class ApiError(OXRError):
    """The API answered with a non-2xx status or an unusable body."""

    def __init__(self, status_code: int, message: str, description: str) -> None:
        super().__init__(
            f'Received HTTP status [{status_code} {message}] with error "{description}".'
        )
        self.status_code = status_code
        self.message = message
        self.description = description
