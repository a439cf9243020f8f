"""Account overview chart fetcher."""

from decimal import Decimal
from typing import Any

from firereport.api.client import FireflyClient
from firereport.api.mappers import chart_entries_to_domain
from firereport.domain.entities import ChartEntry, DateRangeBoundaries
from firereport.domain.errors import UnusedCurrencyError, unused_currency
from firereport.utils.amount_parser import parse_amount


class ChartRepository:
    """Fetch per-account balance series for a period."""

    def __init__(self, client: FireflyClient):
        self.client = client

    def fetch_charts(self, date_range: DateRangeBoundaries) -> list[dict[str, Any]]:
        return self.client.request(
            "chart/account/overview",
            {
                "start": date_range.start_date.isoformat(),
                "end": date_range.end_date.isoformat(),
            },
        ) or []

    def get_charts(
        self, date_range: DateRangeBoundaries, currency_code: str
    ) -> dict[str, tuple[ChartEntry, ...]]:
        """Get balance series in one currency, keyed by series label.

        Raises:
            UnusedCurrencyError: If no series uses the currency
        """
        charts: dict[str, tuple[ChartEntry, ...]] = {}
        for series in self.fetch_charts(date_range):
            if series.get("currency_code") != currency_code:
                continue
            charts[series["label"]] = chart_entries_to_domain(series.get("entries") or {})

        if not charts:
            raise UnusedCurrencyError(unused_currency(currency_code))
        return charts

    def get_merged_chart(self, date_range: DateRangeBoundaries) -> dict[str, Decimal]:
        """Sum every series per date key, preserving first-seen key order."""
        merged: dict[str, Decimal] = {}
        for series in self.fetch_charts(date_range):
            for key, value in (series.get("entries") or {}).items():
                merged[key] = merged.get(key, Decimal("0")) + parse_amount(value)
        return merged
