"""Client for the Open Exchange Rates API."""

from .client import OXR
from .dates import DATA_EPOCH, Period, PeriodRule, validate_date, validate_ohlc
from .errors import ApiError, NetworkError, OXRError, ValidationError
from .http_client import RequestClient, RequestClientConfig
from .params import ClientConfig, format_currencies
from .schemas import ConversionResult

__all__ = [
    "OXR",
    "DATA_EPOCH",
    "Period",
    "PeriodRule",
    "validate_date",
    "validate_ohlc",
    "ApiError",
    "NetworkError",
    "OXRError",
    "ValidationError",
    "RequestClient",
    "RequestClientConfig",
    "ClientConfig",
    "format_currencies",
    "ConversionResult",
]
