"""Display formatting helpers shared by the CLI and report renderers."""

from datetime import date, time
from decimal import Decimal
from typing import Optional, Union

from firereport.domain.entities import DateRangeBoundaries

RANGED_PERIODS = ("Q1", "Q2", "Q3", "Q4", "H1", "H2")
SCIENTIFIC_SUFFIXES = ["", "K", "M", "G"]


def format_currency(
    currency_symbol: str = "",
    amount: Union[Decimal, int, float, str] = Decimal("0"),
    decimal_places: int = 2,
) -> str:
    """Format an amount with thousands separators behind its symbol.

    Examples:
        format_currency("$", Decimal("1234.5"), 2) -> "$ 1,234.50"
        format_currency("Rp", Decimal("1000000"), 0) -> "Rp 1,000,000"
    """
    if not isinstance(amount, Decimal):
        amount = Decimal(str(amount))
    places = max(decimal_places, 0)
    return f"{currency_symbol} {amount:,.{places}f}"


def format_date(value: Optional[date]) -> str:
    """Format a date as '18 Jun 2023'; None gives an empty string."""
    if value is None:
        return ""
    return f"{value.day} {value.strftime('%b %Y')}"


def format_time(value: Optional[time]) -> str:
    if value is None:
        return ""
    return value.strftime("%H:%M")


def get_period(date_range: DateRangeBoundaries, today: Optional[date] = None) -> str:
    """Describe a report period for titles.

    Quarters, halves and ranges ending today spell out their dates; whole
    months and years are shown by name only.
    """
    if today is None:
        today = date.today()

    label = f"{date_range.period} {date_range.year}"
    if date_range.end_date == today or date_range.period in RANGED_PERIODS:
        start = format_date(date_range.start_date)
        end = format_date(date_range.end_date)
        return f"{label} ({start}—{end})"
    return label


def format_scientific(value: int, unit: str = "") -> str:
    """Format a count with K/M/G suffixes, e.g. file sizes ('1.5 MB')."""
    if value < 1000:
        return f"{value} {unit}".strip()

    scaled = float(value)
    exponent = 0
    while scaled >= 1000 and exponent < len(SCIENTIFIC_SUFFIXES) - 1:
        scaled /= 1000
        exponent += 1

    rounded = str(int(scaled)) if scaled % 1.0 == 0.0 else f"{scaled:.1f}"
    return f"{rounded} {SCIENTIFIC_SUFFIXES[exponent]}{unit}".strip()
