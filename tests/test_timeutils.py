from datetime import date, datetime

import pytest
import pytz

from worklog_app.core.timeutils import (
    DurationParseError,
    day_range,
    day_window,
    parse_duration_seconds,
    resolve_day,
    to_query_date,
)


def test_to_query_date():
    assert to_query_date("now()") == "now()"
    assert to_query_date(None) == "now()"
    assert to_query_date("2024-01-05") == "2024-01-05"
    assert to_query_date("2024-01-05T10:00:00.000+0000", "UTC") == "2024-01-05"
    assert to_query_date(date(2024, 1, 5)) == "2024-01-05"
    assert to_query_date(datetime(2024, 1, 5, 22, 0, tzinfo=pytz.UTC), "Asia/Tokyo") == "2024-01-06"


def test_resolve_day_rejects_server_side_functions():
    with pytest.raises(ValueError):
        resolve_day("startOfMonth()")
    assert resolve_day("now()", "UTC") == datetime.now(pytz.UTC).date()


def test_day_range_is_inclusive():
    assert day_range("2024-01-30", "2024-02-02", "UTC") == [
        "2024-01-30",
        "2024-01-31",
        "2024-02-01",
        "2024-02-02",
    ]
    assert day_range("2024-01-03", "2024-01-03", "UTC") == ["2024-01-03"]
    assert day_range("2024-01-05", "2024-01-03", "UTC") == []


def test_day_window_spans_whole_days():
    lo, hi = day_window("2024-01-01", "2024-01-03", "UTC")
    assert lo.isoformat().startswith("2024-01-01T00:00:00")
    assert hi.isoformat().startswith("2024-01-03T23:59:59.999999")


def test_parse_duration_seconds():
    assert parse_duration_seconds("1h 30m") == 5400
    assert parse_duration_seconds("1d") == 86400
    assert parse_duration_seconds("8h") == 28800
    assert parse_duration_seconds("1w 2d") == 9 * 86400


@pytest.mark.parametrize("text", ["", "   ", "abc", "5", "1h x"])
def test_parse_duration_rejects_malformed(text):
    with pytest.raises(DurationParseError):
        parse_duration_seconds(text)


@pytest.mark.filterwarnings("error")
def test_parse_duration_day_and_week_units_without_warnings():
    assert parse_duration_seconds("1d") == 86400
    assert parse_duration_seconds("1w 2d") == 9 * 86400
    assert parse_duration_seconds("1.5h") == 5400


def test_parse_duration_units_are_case_insensitive():
    assert parse_duration_seconds("1M") == 60
    assert parse_duration_seconds("2H 1D") == 2 * 3600 + 86400
    assert parse_duration_seconds("1y") == 365.25 * 86400
    assert parse_duration_seconds("250ms") == 0.25


def test_parse_duration_rejects_unknown_unit():
    with pytest.raises(DurationParseError, match="Unknown duration unit"):
        parse_duration_seconds("3q")
