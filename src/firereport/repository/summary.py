"""Basic summary fetcher."""

from firereport.api.client import FireflyClient
from firereport.api.mappers import summary_entry_to_domain
from firereport.domain.entities import DateRangeBoundaries, SummaryEntry


class SummaryRepository:
    def __init__(self, client: FireflyClient):
        self.client = client

    def fetch_basic_summary(self, date_range: DateRangeBoundaries) -> dict[str, SummaryEntry]:
        """Fetch /summary/basic keyed by entry key (e.g. 'earned-in-EUR')."""
        document = self.client.request(
            "summary/basic",
            {
                "start": date_range.start_date.isoformat(),
                "end": date_range.end_date.isoformat(),
            },
        ) or {}
        return {
            key: summary_entry_to_domain(key, record)
            for key, record in document.items()
            if isinstance(record, dict)
        }
