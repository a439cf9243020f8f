"""Tests for date parsing and report period resolution."""

from datetime import date, datetime, timedelta, timezone

import pytest

from firereport.domain.errors import ValidationError
from firereport.utils.date_parser import (
    parse_date,
    parse_local_date,
    parse_timestamp,
    resolve_date_range,
)

TODAY = date(2026, 10, 19)


def test_parse_absolute_date():
    """Test parsing absolute dates."""
    assert parse_date("2024-01-15") == date(2024, 1, 15)


def test_parse_today():
    """Test parsing 'today'."""
    assert parse_date("today") == date.today()


def test_parse_yesterday():
    """Test parsing 'yesterday'."""
    assert parse_date("Yesterday") == date.today() - timedelta(days=1)


def test_parse_invalid_date():
    with pytest.raises(ValueError, match="Could not parse date"):
        parse_date("not a date")


def test_parse_timestamp_keeps_offset():
    value = parse_timestamp("2023-02-10T23:30:00+07:00")

    assert value.utcoffset() == timedelta(hours=7)
    assert value.astimezone(timezone.utc) == datetime(2023, 2, 10, 16, 30, tzinfo=timezone.utc)


def test_parse_local_date_uses_own_offset():
    assert parse_local_date("2023-02-10T23:30:00+07:00") == date(2023, 2, 10)
    assert parse_local_date(None) is None
    assert parse_local_date("") is None


@pytest.mark.parametrize(
    "period, year, start, end",
    [
        ("Q1", 2023, date(2023, 1, 1), date(2023, 3, 31)),
        ("Q2", 2023, date(2023, 4, 1), date(2023, 6, 30)),
        ("Q3", 2023, date(2023, 7, 1), date(2023, 9, 30)),
        ("Q4", 2023, date(2023, 10, 1), date(2023, 12, 31)),
        ("H1", 2022, date(2022, 1, 1), date(2022, 6, 30)),
        ("H2", 2022, date(2022, 7, 1), date(2022, 12, 31)),
        ("All Year", 2020, date(2020, 1, 1), date(2020, 12, 31)),
        ("February", 2024, date(2024, 2, 1), date(2024, 2, 29)),
        ("February", 2023, date(2023, 2, 1), date(2023, 2, 28)),
        ("september", 2023, date(2023, 9, 1), date(2023, 9, 30)),
    ],
)
def test_resolve_date_range(period, year, start, end):
    date_range = resolve_date_range(period, year, today=TODAY)

    assert date_range.start_date == start
    assert date_range.end_date == end
    assert date_range.period == period
    assert date_range.year == year


def test_resolve_date_range_clamps_to_today():
    date_range = resolve_date_range("Q4", 2026, today=TODAY)

    assert date_range.start_date == date(2026, 10, 1)
    assert date_range.end_date == TODAY


def test_resolve_date_range_unknown_period():
    with pytest.raises(ValidationError, match="Unknown period"):
        resolve_date_range("Q5", 2023, today=TODAY)
