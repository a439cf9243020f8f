"""Client factory functions for creating Firefly III clients."""

import os
from typing import Optional

import httpx

from firereport.api.client import FireflyClient, ConnectionConfig
from firereport.domain.cancellation import CancellationToken
from firereport.domain.errors import ConfigurationError

HOST_ENV_VAR = "FIREREPORT_HOST"
TOKEN_ENV_VAR = "FIREREPORT_TOKEN"


def resolve_connection_config(
    host: Optional[str] = None, token: Optional[str] = None
) -> ConnectionConfig:
    """Build connection settings from arguments or the environment.

    Args:
        host: Firefly III address. If None, checks FIREREPORT_HOST
        token: Personal access token. If None, checks FIREREPORT_TOKEN

    Returns:
        ConnectionConfig for the instance

    Raises:
        ConfigurationError: If host or token cannot be resolved
    """
    if host is None:
        host = os.environ.get(HOST_ENV_VAR)
    if token is None:
        token = os.environ.get(TOKEN_ENV_VAR)

    if not host or not host.strip() or not token or not token.strip():
        raise ConfigurationError(
            f"Firefly III host address and access token are required "
            f"(use --host/--token or {HOST_ENV_VAR}/{TOKEN_ENV_VAR})"
        )

    return ConnectionConfig(base_url=host, token=token.strip())


def create_client(
    host: Optional[str] = None,
    token: Optional[str] = None,
    cancel_token: Optional[CancellationToken] = None,
    transport: Optional[httpx.BaseTransport] = None,
) -> FireflyClient:
    """Create a Firefly III client.

    Args:
        host: Firefly III address (falls back to FIREREPORT_HOST)
        token: Personal access token (falls back to FIREREPORT_TOKEN)
        cancel_token: Optional cancellation token shared with the pipeline
        transport: Optional httpx transport

    Returns:
        FireflyClient configured for the instance
    """
    config = resolve_connection_config(host, token)
    return FireflyClient(config, transport=transport, cancel_token=cancel_token)
