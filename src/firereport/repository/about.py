"""Server information fetcher."""

from firereport.api.client import FireflyClient
from firereport.api.mappers import system_info_to_domain
from firereport.domain.entities import SystemInfo
from firereport.domain.errors import UnexpectedResponseError


class AboutRepository:
    def __init__(self, client: FireflyClient):
        self.client = client

    def get_system_info(self) -> SystemInfo:
        """Fetch /about; a body without 'data' means the host is not Firefly III."""
        document = self.client.request("about")
        record = document.get("data") if isinstance(document, dict) else None
        if not isinstance(record, dict):
            raise UnexpectedResponseError(200, "Host is not a valid Firefly III installation")
        return system_info_to_domain(record)
