"""Transaction fetcher."""

from firereport.api.client import FireflyClient
from firereport.api.mappers import transaction_to_domain
from firereport.domain.entities import DateRangeBoundaries, TransactionGroup
from firereport.repository.pagination import fetch_all_pages


def _chronological_key(group: TransactionGroup) -> tuple[bool, float]:
    # Records without journals sort last
    first_date = group.first_date
    if first_date is None:
        return True, 0.0
    return False, first_date.timestamp()


class TransactionRepository:
    """Fetch transactions of every type within a date range."""

    def __init__(self, client: FireflyClient):
        self.client = client

    def fetch_transactions(self, date_range: DateRangeBoundaries) -> list[TransactionGroup]:
        """Fetch all transactions in range, sorted by first-journal date.

        The sort is stable, so records sharing a timestamp keep server order.
        """
        records = fetch_all_pages(
            self.client,
            "transactions",
            {
                "start": date_range.start_date.isoformat(),
                "end": date_range.end_date.isoformat(),
                "type": "all",
            },
        )
        groups = [transaction_to_domain(record) for record in records]
        groups.sort(key=_chronological_key)
        return groups
