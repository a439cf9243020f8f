"""Date parsing and report period resolution utilities."""

from datetime import date, datetime, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from firereport.domain.entities import DateRangeBoundaries
from firereport.domain.errors import ValidationError

MONTHS = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]

# Period name -> (first month, last month), 1-based
PERIODS = {
    "Q1": (1, 3),
    "Q2": (4, 6),
    "Q3": (7, 9),
    "Q4": (10, 12),
    "H1": (1, 6),
    "H2": (7, 12),
    "All Year": (1, 12),
}


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports ISO dates ("2024-01-15"), free-form absolute dates
    ("January 15, 2024") and the relative words "today" and "yesterday".

    Args:
        date_str: Date string in various formats

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
    }
    if date_str in relative_dates:
        return relative_dates[date_str]

    try:
        return date_parser.parse(date_str).date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp as sent by Firefly III.

    Returns None for empty values. The UTC offset is preserved.
    """
    if not value:
        return None
    try:
        return date_parser.isoparse(value)
    except (ValueError, TypeError) as e:
        raise ValueError(f"Could not parse timestamp '{value}': {e}")


def parse_local_date(value: Optional[str]) -> Optional[date]:
    """Return the calendar date of a timestamp in its own UTC offset."""
    timestamp = parse_timestamp(value)
    return timestamp.date() if timestamp is not None else None


def _period_months(period: str) -> tuple[int, int]:
    if period in PERIODS:
        return PERIODS[period]

    normalized = period.strip().capitalize()
    if normalized in MONTHS:
        month = MONTHS.index(normalized) + 1
        return month, month

    supported = ", ".join(list(PERIODS) + MONTHS)
    raise ValidationError(f"Unknown period: '{period}'. Supported periods: {supported}")


def resolve_date_range(
    period: str, year: int, today: Optional[date] = None
) -> DateRangeBoundaries:
    """Resolve a named report period into calendar boundaries.

    Args:
        period: Q1-Q4, H1, H2, "All Year" or an English month name
        year: Calendar year
        today: Reference date for clamping (defaults to date.today())

    Returns:
        DateRangeBoundaries with the end date clamped to today

    Raises:
        ValidationError: If the period is not recognized
    """
    if today is None:
        today = date.today()

    start_month, end_month = _period_months(period)
    start_date = date(year, start_month, 1)
    # Day before the first of the following month
    end_date = date(year, end_month, 1) + relativedelta(months=1) - timedelta(days=1)

    return DateRangeBoundaries(
        start_date=start_date,
        end_date=min(end_date, today),
        period=period,
        year=year,
    )
