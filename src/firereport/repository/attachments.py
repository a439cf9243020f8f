"""Attachment metadata fetcher."""

from firereport.api.client import FireflyClient
from firereport.api.mappers import attachment_to_domain
from firereport.domain.entities import Attachment
from firereport.repository.pagination import fetch_all_pages


class AttachmentRepository:
    def __init__(self, client: FireflyClient):
        self.client = client

    def get_attachments_by_transaction_id(self, transaction_id: str) -> list[Attachment]:
        """Fetch metadata of every attachment of a transaction record."""
        records = fetch_all_pages(self.client, f"transactions/{transaction_id}/attachments")
        return [attachment_to_domain(record) for record in records]
