"""Date window and duration helpers shared by the fetch and aggregation stages."""

from __future__ import annotations

import re
from datetime import date, datetime, time, tzinfo

import pandas as pd
import pytz

from .config import NOW_SENTINEL, TIMEZONE

DateLike = str | date | datetime | pd.Timestamp | None

_LEADING_DIGIT = re.compile(r"^\d")
_DURATION_TOKEN = re.compile(r"^(\d+(?:\.\d+)?)([A-Za-z]+)$")

# Unit alias -> (pandas Timedelta unit, multiplier)
_DURATION_UNITS: dict[str, tuple[str, float]] = {
    **dict.fromkeys(("y", "yr", "yrs", "year", "years"), ("D", 365.25)),
    **dict.fromkeys(("w", "week", "weeks"), ("W", 1)),
    **dict.fromkeys(("d", "day", "days"), ("D", 1)),
    **dict.fromkeys(("h", "hr", "hrs", "hour", "hours"), ("h", 1)),
    **dict.fromkeys(("m", "min", "mins", "minute", "minutes"), ("min", 1)),
    **dict.fromkeys(("s", "sec", "secs", "second", "seconds"), ("s", 1)),
    **dict.fromkeys(("ms", "msec", "msecs", "millisecond", "milliseconds"), ("ms", 1)),
}


class DurationParseError(ValueError):
    """Raised when a human duration string (e.g. ``"1h 30m"``) cannot be parsed."""


def resolve_tz(tz: str | tzinfo | None = None) -> tzinfo:
    if tz is None:
        return pytz.timezone(TIMEZONE)
    if isinstance(tz, str):
        return pytz.timezone(tz)
    return tz


def normalize_timestamp(value, target_tz) -> pd.Timestamp | None:
    """Normalize a timestamp-like value into `target_tz`.

    Naive values are assumed to be UTC. Returns None when the input cannot be
    parsed.
    """
    if value is None or value == "":
        return None
    ts = pd.to_datetime(value, errors="coerce")
    if ts is None or pd.isna(ts):
        return None
    try:
        if getattr(ts, "tzinfo", None) is None:
            ts = ts.tz_localize(pytz.UTC)
    except (TypeError, ValueError):
        return None
    try:
        return ts.tz_convert(target_tz)
    except (TypeError, ValueError):
        return None


def is_now(value: DateLike) -> bool:
    return value is None or (isinstance(value, str) and value.strip().lower() == NOW_SENTINEL)


def to_query_date(value: DateLike, tz: str | tzinfo | None = None) -> str:
    """Render a date bound for embedding in JQL.

    Dates, datetimes, and strings starting with a digit become ``YYYY-MM-DD``
    (aware timestamps are converted to `tz` first). Anything else, such as
    ``now()``, is returned verbatim for the server to resolve.
    """
    if value is None:
        return NOW_SENTINEL
    if isinstance(value, str):
        text = value.strip()
        if not _LEADING_DIGIT.match(text):
            return text
        value = text
    return resolve_day(value, tz).strftime("%Y-%m-%d")


def resolve_day(value: DateLike, tz: str | tzinfo | None = None) -> date:
    """Resolve a date-like value (or the ``now()`` sentinel) to a calendar day in `tz`."""
    zone = resolve_tz(tz)
    if is_now(value):
        return datetime.now(zone).date()
    if isinstance(value, str) and not _LEADING_DIGIT.match(value.strip()):
        raise ValueError(f"Cannot resolve date expression locally: {value!r}")
    ts = pd.Timestamp(value)
    if pd.isna(ts):
        raise ValueError(f"Invalid date: {value!r}")
    if ts.tzinfo is not None:
        ts = ts.tz_convert(zone)
    return ts.date()


def pin_now(value: DateLike, tz: str | tzinfo | None = None) -> DateLike:
    """Replace the ``now()`` sentinel with today's date in `tz`; other values pass through."""
    if is_now(value):
        return resolve_day(value, tz)
    return value


def day_window(start: DateLike, end: DateLike, tz: str | tzinfo | None = None) -> tuple[pd.Timestamp, pd.Timestamp]:
    """Return ``(start of start day, end of end day)`` as aware timestamps in `tz`."""
    zone = resolve_tz(tz)
    start_day = resolve_day(start, zone)
    end_day = resolve_day(end, zone)
    # Some zones switch DST at midnight; widen rather than fail.
    lo = pd.Timestamp(datetime.combine(start_day, time.min)).tz_localize(
        zone, ambiguous=True, nonexistent="shift_forward"
    )
    hi = pd.Timestamp(datetime.combine(end_day, time.max)).tz_localize(
        zone, ambiguous=False, nonexistent="shift_backward"
    )
    return lo, hi


def day_range(start: DateLike, end: DateLike, tz: str | tzinfo | None = None) -> list[str]:
    """Every calendar day from `start` to `end`, both inclusive, as ``YYYY-MM-DD``."""
    zone = resolve_tz(tz)
    days = pd.date_range(resolve_day(start, zone), resolve_day(end, zone), freq="D")
    return [d.strftime("%Y-%m-%d") for d in days]


def window_day_count(start: DateLike, end: DateLike, tz: str | tzinfo | None = None) -> int:
    return len(day_range(start, end, tz))


def parse_duration_seconds(text: str) -> float:
    """Parse a Jira-style duration (``"1w 2d 3h 30m"``) into seconds.

    Tokens are whitespace separated and summed; each must carry a unit.
    Units are case-insensitive, so ``"1M"`` is one minute, and a year counts
    365.25 days.
    """
    tokens = str(text or "").split()
    if not tokens:
        raise DurationParseError(f"Empty duration: {text!r}")
    total = 0.0
    for token in tokens:
        match = _DURATION_TOKEN.match(token)
        if not match:
            raise DurationParseError(f"Invalid duration token {token!r} in {text!r}")
        amount, unit = match.groups()
        try:
            pandas_unit, scale = _DURATION_UNITS[unit.lower()]
        except KeyError:
            raise DurationParseError(f"Unknown duration unit {unit!r} in {text!r}") from None
        total += pd.Timedelta(float(amount) * scale, unit=pandas_unit).total_seconds()
    return total
