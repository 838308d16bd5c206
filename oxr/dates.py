"""Date and OHLC start-time validation against the API's published limits."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta
from enum import Enum
from typing import Any

from .errors import ValidationError

OHLC_TIME_FORMAT = "%Y-%m-%dT%H:%M:%SZ"
DATE_FORMAT = "%Y-%m-%d"

# Earliest start time the OHLC endpoint has data for.
DATA_EPOCH = datetime(2016, 12, 19, tzinfo=UTC)

_OHLC_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}Z")
_DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")


def ensure_utc(value: datetime) -> datetime:
    """Return a timezone-aware datetime in UTC."""

    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def utc_now() -> datetime:
    """Return the current UTC datetime."""

    return datetime.now(UTC)


class Period(str, Enum):
    """Bucket sizes accepted by the OHLC endpoint."""

    ONE_MINUTE = "1m"
    FIVE_MINUTES = "5m"
    FIFTEEN_MINUTES = "15m"
    THIRTY_MINUTES = "30m"
    ONE_HOUR = "1h"
    TWELVE_HOURS = "12h"
    ONE_DAY = "1d"
    ONE_WEEK = "1w"
    ONE_MONTH = "1mo"


@dataclass(frozen=True)
class PeriodRule:
    """Limits the API places on start times for one period."""

    label: str
    step: timedelta | None
    lookback: timedelta | None = None
    alignment: int | None = None
    months: int = 0

    def end_of(self, start: datetime) -> datetime:
        if self.step is None:
            return _add_months(start, self.months)
        return start + self.step


PERIOD_RULES: dict[Period, PeriodRule] = {
    Period.ONE_MINUTE: PeriodRule("1 minute", timedelta(minutes=1), lookback=timedelta(hours=1)),
    Period.FIVE_MINUTES: PeriodRule(
        "5 minutes", timedelta(minutes=5), lookback=timedelta(days=1), alignment=5
    ),
    Period.FIFTEEN_MINUTES: PeriodRule(
        "15 minutes", timedelta(minutes=15), lookback=timedelta(days=1), alignment=15
    ),
    Period.THIRTY_MINUTES: PeriodRule(
        "30 minutes", timedelta(minutes=30), lookback=timedelta(days=32), alignment=30
    ),
    Period.ONE_HOUR: PeriodRule(
        "1 hour", timedelta(hours=1), lookback=timedelta(days=32), alignment=30
    ),
    Period.TWELVE_HOURS: PeriodRule("12 hours", timedelta(hours=12), alignment=30),
    Period.ONE_DAY: PeriodRule("1 day", timedelta(days=1), alignment=30),
    Period.ONE_WEEK: PeriodRule("1 week", timedelta(weeks=1)),
    Period.ONE_MONTH: PeriodRule("1 month", None, months=1),
}

_LOOKBACK_LABELS = {
    timedelta(hours=1): "1 hour",
    timedelta(days=1): "1 day",
    timedelta(days=32): "32 days",
}


def _add_months(value: datetime, months: int) -> datetime:
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    return value.replace(year=year, month=month)


def _alignment_examples(alignment: int) -> str:
    marks = [f"{minute:02d}" for minute in range(0, 60, alignment)]
    if len(marks) > 4:
        return "e.g. " + ", ".join(marks[:4]) + ", etc"
    return "i.e. " + ", ".join(marks)


def parse_period(period: Period | str) -> Period:
    """Return the ``Period`` for a code, rejecting anything unknown."""

    try:
        return Period(period)
    except ValueError:
        allowed = ", ".join(member.value for member in Period)
        raise ValidationError(
            f"{period} is not a valid time period. Allowed periods are: {allowed}.",
            rule="unknown_period",
            period=str(period),
        ) from None


def parse_ohlc_start(value: Any) -> datetime:
    """Parse an OHLC start time into an aware UTC datetime."""

    if isinstance(value, datetime):
        return ensure_utc(value)
    if isinstance(value, str):
        if _OHLC_PATTERN.fullmatch(value):
            try:
                return datetime.strptime(value, OHLC_TIME_FORMAT).replace(tzinfo=UTC)
            except ValueError:
                pass
        raise ValidationError(
            f"{value} is not a valid start time. Format must be YYYY-MM-DDThh:mm:00Z.",
            rule="format",
            field="start_time",
        )
    raise ValidationError(
        "Start time is invalid. Expects either a string or a datetime instance.",
        rule="type",
        field="start_time",
    )


def format_ohlc_start(value: datetime) -> str:
    return ensure_utc(value).strftime(OHLC_TIME_FORMAT)


def validate_ohlc(
    start_time: Any,
    period: Period | str,
    now: datetime | None = None,
) -> datetime:
    """Check a start time and period against the OHLC endpoint's restrictions.

    Args:
        start_time: ``datetime`` or a ``YYYY-MM-DDThh:mm:00Z`` string.
        period: One of the ``Period`` codes.
        now: Reference time for the look-back and completeness checks.
            Defaults to the current UTC time.

    Returns:
        The start time as an aware UTC datetime.

    Raises:
        ValidationError: Naming the first rule the combination breaks.
    """

    start = parse_ohlc_start(start_time)
    reference = ensure_utc(now) if now is not None else utc_now()
    code = period.value if isinstance(period, Period) else str(period)

    if start.second or start.microsecond:
        raise ValidationError(
            "Start time must always have zero seconds (i.e. hh:mm:00).",
            rule="seconds",
            period=code,
        )
    if start < DATA_EPOCH:
        raise ValidationError(
            "Start date must be on or after December 19th 2016.",
            rule="epoch",
            period=code,
        )

    resolved = parse_period(period)
    rule = PERIOD_RULES[resolved]
    suffix = f"when using a time period of {rule.label}."

    if rule.lookback is not None and start < reference - rule.lookback:
        raise ValidationError(
            f"Start date cannot be older than {_LOOKBACK_LABELS[rule.lookback]} ago {suffix}",
            rule="lookback",
            period=code,
        )
    if rule.alignment is not None and start.minute % rule.alignment:
        raise ValidationError(
            f"Start time minutes must be aligned to {rule.alignment} minutes "
            f"({_alignment_examples(rule.alignment)}) {suffix}",
            rule="alignment",
            period=code,
        )
    if resolved is Period.ONE_WEEK and (start.hour or start.minute):
        raise ValidationError(
            f"Start date must be aligned to the start of a calendar day (i.e. 00:00) {suffix}",
            rule="day_start",
            period=code,
        )
    if resolved is Period.ONE_MONTH and start.day != 1:
        raise ValidationError(
            f"Start date must be aligned to the start of the calendar month "
            f"(i.e. YYYY-mm-01) {suffix}",
            rule="month_start",
            period=code,
        )

    if rule.end_of(start) > reference:
        raise ValidationError(
            "The combination of start time and the time period must not produce an end "
            "time that is in the future (i.e. an incomplete period).",
            rule="incomplete_period",
            period=code,
        )
    return start


def validate_date(value: Any, *, field: str = "date") -> str:
    """Return ``value`` as a ``YYYY-MM-DD`` string or raise ``ValidationError``."""

    if isinstance(value, datetime):
        return ensure_utc(value).strftime(DATE_FORMAT)
    if isinstance(value, date):
        return value.strftime(DATE_FORMAT)
    if isinstance(value, str):
        if _DATE_PATTERN.fullmatch(value):
            try:
                datetime.strptime(value, DATE_FORMAT)
            except ValueError:
                pass
            else:
                return value
        raise ValidationError(
            f"{value} is not a valid {field}. Valid format is YYYY-MM-DD.",
            rule="format",
            field=field,
        )
    raise ValidationError(
        f"Value for {field} is invalid. Expects either a string or a date instance.",
        rule="type",
        field=field,
    )


def validate_date_range(start: Any, end: Any) -> tuple[str, str]:
    """Validate both ends of a time series and make sure they are ordered."""

    start_value = validate_date(start, field="start")
    end_value = validate_date(end, field="end")
    # Zero-padded ISO dates compare correctly as strings.
    if start_value > end_value:
        raise ValidationError(
            f"Start date {start_value} must not be after end date {end_value}.",
            rule="range",
            field="start",
        )
    return start_value, end_value
