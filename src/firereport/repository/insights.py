"""Income and expense insight fetcher."""

from typing import Any

from firereport.api.client import FireflyClient
from firereport.api.mappers import insight_item_to_domain
from firereport.domain.entities import DateRangeBoundaries, InsightGroup, InsightType

ACCOUNT_FILTERS = {
    InsightType.INCOME: "revenue",
    InsightType.EXPENSE: "expense",
}


class InsightRepository:
    """Fetch ranked income/expense breakdowns by account, category and tag."""

    def __init__(self, client: FireflyClient):
        self.client = client

    def fetch_insight(
        self, insight_type: InsightType, filter_name: str, date_range: DateRangeBoundaries
    ) -> list[dict[str, Any]]:
        return self.client.request(
            f"insight/{insight_type.value}/{filter_name}",
            {
                "start": date_range.start_date.isoformat(),
                "end": date_range.end_date.isoformat(),
            },
        ) or []

    def get_insight_group(
        self, insight_type: InsightType, filter_name: str, date_range: DateRangeBoundaries
    ) -> InsightGroup:
        """Build one insight group with its largest-impact items first.

        Income differences are positive, so they sort descending; expense
        differences are negative, so they sort ascending.
        """
        items = [
            insight_item_to_domain(record)
            for record in self.fetch_insight(insight_type, filter_name, date_range)
        ]
        items.sort(
            key=lambda item: item.difference,
            reverse=insight_type == InsightType.INCOME,
        )

        if filter_name in ACCOUNT_FILTERS.values():
            grouping_label = "Account"
        else:
            grouping_label = filter_name.title()

        return InsightGroup(type=insight_type, grouping_label=grouping_label, items=tuple(items))

    def get_insights(
        self, insight_type: InsightType, date_range: DateRangeBoundaries
    ) -> list[InsightGroup]:
        """Get non-empty insight groups by account, category and tag."""
        filters = (ACCOUNT_FILTERS[insight_type], "category", "tag")
        groups = [
            self.get_insight_group(insight_type, filter_name, date_range)
            for filter_name in filters
        ]
        return [group for group in groups if group.items]
