"""Account fetcher."""

from datetime import date
from typing import Any, Sequence

from firereport.api.client import FireflyClient
from firereport.api.mappers import account_to_domain
from firereport.domain.entities import Account, DateRangeBoundaries
from firereport.repository.pagination import fetch_all_pages


class AccountRepository:
    """Fetch accounts with balances as of a snapshot date."""

    def __init__(self, client: FireflyClient):
        self.client = client

    def fetch_accounts(self, snapshot_date: date, account_type: str) -> list[dict[str, Any]]:
        """Fetch raw account records of a type, balances as of a date.

        Args:
            snapshot_date: Balances are reported as of the end of this day
            account_type: Firefly account type filter ('asset', 'all', ...)

        Returns:
            Raw account records from every page
        """
        return fetch_all_pages(
            self.client,
            "accounts",
            {"type": account_type, "date": snapshot_date.isoformat()},
        )

    def get_accounts(self, snapshot_date: date, account_type: str) -> list[Account]:
        return [
            account_to_domain(record)
            for record in self.fetch_accounts(snapshot_date, account_type)
        ]

    def get_asset_accounts(self, date_range: DateRangeBoundaries) -> list[Account]:
        """Get asset accounts as of the end of a report period."""
        return self.get_accounts(date_range.end_date, "asset")

    def has_active_account_in_range(
        self, date_range: DateRangeBoundaries, accounts: Sequence[Account]
    ) -> bool:
        """Check whether any account was opened before the period ended."""
        return any(
            account.opening_balance_date is not None
            and account.opening_balance_date < date_range.end_date
            for account in accounts
        )
