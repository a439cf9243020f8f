"""Exhaustive page draining for paginated Firefly III list endpoints."""

import logging
from typing import Any, Optional

from firereport.api.client import FireflyClient

logger = logging.getLogger(__name__)


def read_total_pages(document: dict[str, Any]) -> int:
    """Read meta.pagination.total_pages, defaulting to a single page."""
    pagination = (document.get("meta") or {}).get("pagination") or {}
    total_pages = pagination.get("total_pages")
    if total_pages is None:
        return 1
    return max(int(total_pages), 1)


def fetch_all_pages(
    client: FireflyClient, path: str, params: Optional[dict[str, Any]] = None
) -> list[dict[str, Any]]:
    """Fetch every page of a list endpoint and concatenate their data arrays.

    Page 1 is fetched first to learn total_pages; pages 2..total_pages are
    then fetched sequentially, each exactly once.

    Args:
        client: Firefly III client
        path: List endpoint path (e.g. 'accounts')
        params: Query parameters other than 'page'

    Returns:
        Records from all pages in page order
    """
    query = dict(params or {})

    query["page"] = 1
    first = client.request(path, query)
    total_pages = read_total_pages(first)
    records: list[dict[str, Any]] = list(first.get("data") or [])

    for page in range(2, total_pages + 1):
        query["page"] = page
        document = client.request(path, query)
        records.extend(document.get("data") or [])

    logger.debug("Fetched %d records from %s across %d pages", len(records), path, total_pages)
    return records
