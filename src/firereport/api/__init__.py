"""Firefly III API access layer for firereport."""

from firereport.api.client import FireflyClient, ConnectionConfig
from firereport.api.factories import create_client

__all__ = ["FireflyClient", "ConnectionConfig", "create_client"]
