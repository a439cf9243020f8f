"""Shared domain error messages and error types."""

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """Enumerated failure kinds surfaced by report collection."""

    CLIENT_ERROR = "client_error"
    SERVER_ERROR = "server_error"
    UNEXPECTED_RESPONSE = "unexpected_response"
    INVALID_CURRENCY_CODE = "invalid_currency_code"
    UNUSED_CURRENCY = "unused_currency"
    MULTIPLE_CURRENCY = "multiple_currency"
    INACTIVE_ACCOUNT = "inactive_account"
    ILLEGAL_DATE_RANGE = "illegal_date_range"
    CANCELLED = "cancelled"
    CONFIGURATION = "configuration"
    VALIDATION = "validation"


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """

    kind: ErrorKind = ErrorKind.VALIDATION


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class FireflyError(DomainError):
    """Base class for errors raised while collecting data from Firefly III."""

    default_message = "Firefly III request failed."

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)


class ResponseError(FireflyError):
    """Non-success HTTP response from the Firefly III API."""

    label = "Unexpected response"
    kind = ErrorKind.UNEXPECTED_RESPONSE

    def __init__(self, status: int, body: str = ""):
        self.status = status
        self.body = body
        super().__init__(f"{self.label} {status}: {body or 'no response body'}")


class ClientError(ResponseError):
    """4xx response. Never retried."""

    label = "Client error"
    kind = ErrorKind.CLIENT_ERROR


class ServerError(ResponseError):
    """5xx response. Never retried."""

    label = "Server error"
    kind = ErrorKind.SERVER_ERROR


class UnexpectedResponseError(ResponseError):
    """Response outside the 2xx/4xx/5xx classes, or a transport failure."""


class InvalidCurrencyCodeError(FireflyError):
    default_message = (
        "Given currency is not registered or enabled on Firefly III instance."
    )
    kind = ErrorKind.INVALID_CURRENCY_CODE


class UnusedCurrencyError(FireflyError):
    default_message = "Given currency is never used in any transaction or account."
    kind = ErrorKind.UNUSED_CURRENCY


class MultipleCurrencyError(FireflyError):
    default_message = "Transactions involving multiple currencies are not supported."
    kind = ErrorKind.MULTIPLE_CURRENCY


class InactiveAccountError(FireflyError):
    default_message = "No active account found in the specified period."
    kind = ErrorKind.INACTIVE_ACCOUNT


class IllegalDateRangeError(FireflyError):
    default_message = "Start date must be strictly before end date."
    kind = ErrorKind.ILLEGAL_DATE_RANGE


class ReportCancelledError(FireflyError):
    default_message = "Report generation was cancelled."
    kind = ErrorKind.CANCELLED


class ConfigurationError(FireflyError):
    default_message = "Firefly III host address and access token are required."
    kind = ErrorKind.CONFIGURATION


def multiple_currency_journal(journal_id: str, code: str, foreign_code: str) -> str:
    """Return message for a journal carrying a foreign currency amount."""
    return (
        f"Journal {journal_id} mixes currencies {code} and {foreign_code}; "
        "multi-currency transactions are not supported"
    )


def unused_currency(currency_code: str) -> str:
    """Return message when no chart series uses a currency."""
    return f"Currency '{currency_code}' is never used in any account chart"


def invalid_currency(currency_code: str) -> str:
    """Return message for a missing or disabled currency."""
    return f"Currency '{currency_code}' is not registered or enabled on Firefly III"


def illegal_date_range(start: object, end: object) -> str:
    """Return message for a start date not strictly before the end date."""
    return f"Invalid date range {start} to {end}: start must be before end"


def inactive_account(period: str, year: int) -> str:
    """Return message when no account existed during a period."""
    return f"No active account found at period {period} {year}"
