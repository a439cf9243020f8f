"""HTTP client adapter for the Firefly III REST API."""

import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from firereport.domain.cancellation import CancellationToken
from firereport.domain.errors import (
    ClientError,
    ServerError,
    UnexpectedResponseError,
)

logger = logging.getLogger(__name__)

API_PREFIX = "api/v1"
DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class ConnectionConfig:
    """Request-scoped connection settings."""

    base_url: str
    token: str

    def __post_init__(self):
        object.__setattr__(self, "base_url", self.base_url.strip().rstrip("/"))

    @property
    def api_url(self) -> str:
        return f"{self.base_url}/{API_PREFIX}"


class FireflyClient:
    """Authenticated GET client with uniform status classification.

    Every repository routes its requests through this class so that 4xx
    and 5xx responses always surface as ClientError and ServerError.
    """

    def __init__(
        self,
        config: ConnectionConfig,
        transport: Optional[httpx.BaseTransport] = None,
        cancel_token: Optional[CancellationToken] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """Initialize Firefly III client.

        Args:
            config: Host address and personal access token
            transport: Optional httpx transport (used by tests)
            cancel_token: Optional token checked before every request
            timeout: Request timeout in seconds
        """
        self.config = config
        self.cancel_token = cancel_token
        self._http = httpx.Client(
            headers={
                "Authorization": f"Bearer {config.token}",
                "Accept": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "FireflyClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def request(self, path: str, params: Optional[dict[str, Any]] = None) -> Any:
        """GET an API path and return the decoded JSON body.

        Args:
            path: Path below /api/v1 (e.g. 'accounts' or 'insight/income/tag')
            params: Optional query parameters

        Returns:
            Decoded JSON document

        Raises:
            ClientError: On 4xx responses
            ServerError: On 5xx responses
            UnexpectedResponseError: On any other status or transport failure
        """
        url = f"{self.config.api_url}/{path.strip('/')}"
        response = self._get(url, params)
        try:
            return response.json()
        except ValueError as e:
            raise UnexpectedResponseError(response.status_code, f"Invalid JSON: {e}")

    def download(self, url: str) -> bytes:
        """GET an absolute URL (e.g. an attachment download link) as bytes."""
        return self._get(url, None).content

    def _get(self, url: str, params: Optional[dict[str, Any]]) -> httpx.Response:
        if self.cancel_token is not None:
            self.cancel_token.raise_if_cancelled()

        logger.debug("GET %s %s", url, params or {})
        try:
            response = self._http.get(url, params=params)
        except httpx.HTTPError as e:
            raise UnexpectedResponseError(0, f"{type(e).__name__}: {e}") from e

        return classify_response(response)


def classify_response(response: httpx.Response) -> httpx.Response:
    """Return the response if successful, otherwise raise the matching error."""
    status = response.status_code
    if 200 <= status < 300:
        return response
    if 400 <= status < 500:
        raise ClientError(status, response.text)
    if 500 <= status < 600:
        raise ServerError(status, response.text)
    raise UnexpectedResponseError(status, response.text)
