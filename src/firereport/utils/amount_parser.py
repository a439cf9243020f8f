"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
from typing import Optional, Union


def parse_amount(value: Union[str, int, float, Decimal, None]) -> Decimal:
    """Parse a monetary value from the API into a Decimal.

    Firefly III sends amounts as strings ("12.50"), but some endpoints
    (summary, insight) may use JSON numbers. Floats are converted through
    their string form so that no binary rounding leaks into the result.

    Args:
        value: Amount string or number

    Returns:
        Decimal amount

    Raises:
        ValueError: If the value is empty or not a number
    """
    if value is None:
        raise ValueError("Empty amount")
    if isinstance(value, Decimal):
        return value

    amount_str = str(value).strip().replace(",", "")
    if not amount_str:
        raise ValueError("Empty amount string")

    try:
        amount = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}")
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}': not finite")
    return amount


def parse_optional_amount(value: Union[str, int, float, Decimal, None]) -> Optional[Decimal]:
    """Parse an amount, mapping missing or empty values to None."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return parse_amount(value)
