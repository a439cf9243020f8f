"""Balance and cash-flow domain service."""

from collections import defaultdict
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable

from firereport.domain.entities import (
    INFLOW_TYPES,
    OUTFLOW_TYPES,
    Account,
    DateRangeBoundaries,
    GeneralOverview,
    GroupBy,
    SummaryEntry,
    TimeOfDayBoundary,
    TransactionGroup,
)
from firereport.repository.accounts import AccountRepository
from firereport.repository.summary import SummaryRepository
from firereport.repository.transactions import TransactionRepository

UNKNOWN_CURRENCY = "UNKNOWN"
ZERO = Decimal("0")


def balance_key(account: Account, group_by: GroupBy) -> str:
    """Return the aggregation key of an account for a grouping mode."""
    if group_by == GroupBy.ACCOUNT:
        return account.id
    return account.currency_code or UNKNOWN_CURRENCY


def cash_flow_from_transactions(
    transactions: Iterable[TransactionGroup], group_by: GroupBy
) -> dict[str, Decimal]:
    """Accumulate net cash flow from transaction journals.

    ACCOUNT grouping is a plain double-entry ledger: every journal debits
    its source and credits its destination, whatever its type.
    CURRENCY_CODE grouping is an income/expense view: only withdrawal and
    deposit kinds count, signed by direction; transfers, opening balances
    and reconciliations contribute nothing.

    Args:
        transactions: Transaction records to walk
        group_by: Aggregation key

    Returns:
        Mapping of account id or currency code to signed amount
    """
    cash_flows: dict[str, Decimal] = defaultdict(lambda: ZERO)

    for transaction in transactions:
        for journal in transaction.journals:
            amount = journal.magnitude
            if group_by == GroupBy.ACCOUNT:
                cash_flows[journal.source_id] -= amount
                cash_flows[journal.destination_id] += amount
            elif journal.type in OUTFLOW_TYPES:
                cash_flows[journal.currency_code] -= amount
            elif journal.type in INFLOW_TYPES:
                cash_flows[journal.currency_code] += amount

    return dict(cash_flows)


class SummaryService:
    """Service deriving point-in-time balances and period cash flow."""

    def __init__(
        self,
        account_repository: AccountRepository,
        transaction_repository: TransactionRepository,
        summary_repository: SummaryRepository,
    ):
        """Initialize summary service.

        Args:
            account_repository: Fetcher for account balances
            transaction_repository: Fetcher for transaction journals
            summary_repository: Fetcher for server-side earned/spent totals
        """
        self.account_repository = account_repository
        self.transaction_repository = transaction_repository
        self.summary_repository = summary_repository

    def calculate_cash_flow(
        self, date_range: DateRangeBoundaries, group_by: GroupBy
    ) -> dict[str, Decimal]:
        """Calculate net cash flow over a period from transaction journals."""
        transactions = self.transaction_repository.fetch_transactions(date_range)
        return cash_flow_from_transactions(transactions, group_by)

    def get_asset_balance_at_date(
        self, at_date: date, group_by: GroupBy, boundary: TimeOfDayBoundary
    ) -> dict[str, Decimal]:
        """Get balances at the start or end of a day.

        The API reports balances as of the end of the day. For START, the
        day's own net cash flow is subtracted once per key. For
        CURRENCY_CODE grouping, an account opened on exactly this day also
        has its opening balance removed so its inception is not counted
        twice.

        Args:
            at_date: Day of the balance
            group_by: ACCOUNT (all account types) or CURRENCY_CODE (asset accounts)
            boundary: START or END of the day

        Returns:
            Mapping of account id or currency code to balance
        """
        account_type = "all" if group_by == GroupBy.ACCOUNT else "asset"
        accounts = self.account_repository.get_accounts(at_date, account_type)

        balances: dict[str, Decimal] = defaultdict(lambda: ZERO)
        for account in accounts:
            key = balance_key(account, group_by)
            balances[key] += account.current_balance

            if group_by == GroupBy.CURRENCY_CODE and account.opening_balance_date == at_date:
                balances[key] -= account.opening_balance

        if boundary == TimeOfDayBoundary.START:
            same_day = DateRangeBoundaries(start_date=at_date, end_date=at_date)
            cash_flows = self.calculate_cash_flow(same_day, group_by)
            for key in balances:
                balances[key] -= cash_flows.get(key, ZERO)

        return dict(balances)

    def get_opening_balance_by_currency(
        self, date_range: DateRangeBoundaries
    ) -> dict[str, Decimal]:
        """Sum opening balances of asset accounts opened within [start, end)."""
        accounts = self.account_repository.get_accounts(date_range.end_date, "asset")

        opening_balances: dict[str, Decimal] = defaultdict(lambda: ZERO)
        for account in accounts:
            opened = account.opening_balance_date
            if opened is None:
                continue
            if date_range.start_date <= opened < date_range.end_date:
                opening_balances[balance_key(account, GroupBy.CURRENCY_CODE)] += account.opening_balance

        return dict(opening_balances)

    def get_full_overview(self, date_range: DateRangeBoundaries) -> dict[str, GeneralOverview]:
        """Build a GeneralOverview for every currency seen in the period.

        ending = initial + cash flow + opening balances, where the initial
        balance is taken at the start of the day before the period. Earned
        and spent come from the server summary and default to zero.
        """
        summary = self.summary_repository.fetch_basic_summary(date_range)
        initial_balances = self.get_asset_balance_at_date(
            date_range.start_date - timedelta(days=1),
            GroupBy.CURRENCY_CODE,
            TimeOfDayBoundary.START,
        )
        cash_flows = self.calculate_cash_flow(date_range, GroupBy.CURRENCY_CODE)
        opening_balances = self.get_opening_balance_by_currency(date_range)

        currency_codes = list(
            dict.fromkeys([*initial_balances, *cash_flows, *opening_balances])
        )

        overviews: dict[str, GeneralOverview] = {}
        for code in currency_codes:
            initial = initial_balances.get(code, ZERO)
            opening = opening_balances.get(code, ZERO)
            ending = initial + cash_flows.get(code, ZERO) + opening

            earned = _monetary_value(summary, f"earned-in-{code}")
            spent = _monetary_value(summary, f"spent-in-{code}")
            balance_entry = summary.get(f"balance-in-{code}")

            overviews[code] = GeneralOverview(
                initial_balance=initial,
                ending_balance=ending,
                income=earned,
                expense=spent,
                net_flow=earned + spent,
                opening_balance=opening,
                currency_id=balance_entry.currency_id if balance_entry else "",
                currency_code=balance_entry.currency_code if balance_entry else code,
                currency_symbol=balance_entry.currency_symbol if balance_entry else "",
                currency_decimal_places=(
                    balance_entry.currency_decimal_places if balance_entry else 2
                ),
            )

        return overviews


def _monetary_value(summary: dict[str, SummaryEntry], key: str) -> Decimal:
    entry = summary.get(key)
    return entry.monetary_value if entry is not None else ZERO
