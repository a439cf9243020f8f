"""Domain model entities for firereport.

These are pure data classes representing report concepts, independent of
the Firefly III wire format. Raw API records are converted into these
entities once, by the mappers, so every value is normalized at parse time
and never mutated afterwards. Later pipeline stages derive updated copies
with ``dataclasses.replace``.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional

from firereport.domain.errors import IllegalDateRangeError, illegal_date_range


OUTFLOW_TYPES = frozenset({"withdrawal", "withdrawals", "expense"})
INFLOW_TYPES = frozenset({"deposit", "deposits", "income"})
OPENING_BALANCE_TYPE = "opening balance"


class GroupBy(Enum):
    """Key used when aggregating balances and cash flow."""

    ACCOUNT = "account"
    CURRENCY_CODE = "currency_code"


class TimeOfDayBoundary(Enum):
    """Which end of a day a balance refers to."""

    START = "start"
    END = "end"


class InsightType(Enum):
    """Direction of an insight breakdown."""

    INCOME = "income"
    EXPENSE = "expense"


class Theme(Enum):
    """Report theme, passed through to the renderer untouched."""

    LIGHT = "light"
    DARK = "dark"


@dataclass(frozen=True)
class DateRangeBoundaries:
    """Inclusive calendar date range for one report."""

    start_date: date
    end_date: date
    period: str = "Custom"
    year: Optional[int] = None

    def validate(self) -> None:
        """Raise IllegalDateRangeError unless start is strictly before end."""
        if self.start_date >= self.end_date:
            raise IllegalDateRangeError(
                illegal_date_range(self.start_date, self.end_date)
            )


@dataclass(frozen=True)
class Currency:
    """Currency registered on the Firefly III instance."""

    code: str
    id: str
    symbol: str
    decimal_places: int = 2
    name: str = ""


@dataclass(frozen=True)
class Account:
    """Account domain entity as of a snapshot date."""

    id: str
    name: str
    type: str
    currency_code: str
    currency_symbol: str
    currency_decimal_places: int
    current_balance: Decimal
    current_balance_date: Optional[datetime]
    account_number: Optional[str] = None
    iban: Optional[str] = None
    opening_balance: Decimal = Decimal("0")
    opening_balance_date: Optional[date] = None
    initial_balance: Decimal = Decimal("0")
    initial_balance_date: Optional[date] = None


@dataclass(frozen=True)
class AttachmentImage:
    """One rasterized page of an attachment."""

    path: Path
    page: int = 1


@dataclass(frozen=True)
class Attachment:
    """Attachment metadata linked to one transaction journal."""

    type: str
    id: str
    created_at: datetime
    updated_at: datetime
    attachable_id: str
    attachable_type: str
    filename: str
    download_url: str
    upload_url: str
    mime: str
    size: int
    md5: Optional[str] = None
    hash: Optional[str] = None
    title: Optional[str] = None
    notes: Optional[str] = None
    file: Optional[Path] = None
    image_files: tuple[AttachmentImage, ...] = ()
    element_id: Optional[str] = None
    parent_id: Optional[str] = None
    parent_description: str = ""


@dataclass(frozen=True)
class TransactionJournal:
    """One leg of a double-entry transaction."""

    journal_id: str
    transaction_id: str
    type: str
    datetime: datetime
    order: int
    currency_code: str
    currency_symbol: str
    currency_decimal_places: int
    amount: Decimal
    description: str
    source_id: str
    source_name: str
    source_type: str
    destination_id: str
    destination_name: str
    destination_type: str
    budget_id: Optional[str] = None
    budget_name: Optional[str] = None
    category_id: Optional[str] = None
    category_name: Optional[str] = None
    bill_id: Optional[str] = None
    bill_name: Optional[str] = None
    tags: tuple[str, ...] = ()
    has_attachments: bool = False
    foreign_currency_code: Optional[str] = None
    foreign_amount: Optional[Decimal] = None
    attachments: tuple[Attachment, ...] = ()
    balance_left: Optional[Decimal] = None
    source_balance_left: Optional[Decimal] = None
    destination_balance_left: Optional[Decimal] = None
    element_id: Optional[str] = None
    first_attachment_element_id: Optional[str] = None

    @property
    def magnitude(self) -> Decimal:
        """Unsigned amount moved from source to destination."""
        return abs(self.amount)


@dataclass(frozen=True)
class TransactionGroup:
    """Transaction record from the API holding one or more journals."""

    id: str
    journals: tuple[TransactionJournal, ...]

    @property
    def first_date(self) -> Optional[datetime]:
        return self.journals[0].datetime if self.journals else None

    @property
    def has_attachments(self) -> bool:
        return any(journal.has_attachments for journal in self.journals)


@dataclass(frozen=True)
class SummaryEntry:
    """One keyed entry of the basic summary endpoint."""

    key: str
    monetary_value: Decimal
    currency_id: str
    currency_code: str
    currency_symbol: str
    currency_decimal_places: int


@dataclass(frozen=True)
class GeneralOverview:
    """Period overview for one currency."""

    initial_balance: Decimal
    ending_balance: Decimal
    income: Decimal
    expense: Decimal
    net_flow: Decimal
    opening_balance: Decimal
    currency_id: str
    currency_code: str
    currency_symbol: str
    currency_decimal_places: int = 2

    def reconciles(self) -> bool:
        """Check initial + income + expense + opening == ending exactly."""
        total = self.initial_balance + self.income + self.expense + self.opening_balance
        return total == self.ending_balance


@dataclass(frozen=True)
class InsightItem:
    id: str
    name: str
    difference: Decimal
    currency_id: str
    currency_code: str


@dataclass(frozen=True)
class InsightGroup:
    type: InsightType
    grouping_label: str
    items: tuple[InsightItem, ...]


@dataclass(frozen=True)
class ChartEntry:
    label: date
    value: Decimal


@dataclass(frozen=True)
class SystemInfo:
    """Server version information shown in the report footer."""

    version: str
    api_version: str
    php_version: str = ""
    os: str = ""
    driver: str = ""


@dataclass(frozen=True)
class ReportData:
    """Complete snapshot handed to the report renderer."""

    date_range: DateRangeBoundaries
    theme: Theme
    currency: Currency
    accounts: tuple[Account, ...]
    chart: Mapping[str, tuple[ChartEntry, ...]]
    general_overview: GeneralOverview
    income_insight: tuple[InsightGroup, ...]
    expense_insight: tuple[InsightGroup, ...]
    transaction_journals: tuple[TransactionJournal, ...]
    downloaded_attachments: tuple[Attachment, ...]
    system_info: SystemInfo
    generated_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        # Read-only view over a private copy of the series
        object.__setattr__(self, "chart", MappingProxyType(dict(self.chart)))
