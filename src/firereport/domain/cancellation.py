"""Cooperative cancellation for long-running report collection."""

import threading

from firereport.domain.errors import ReportCancelledError


class CancellationToken:
    """Flag shared between the caller and the collection pipeline.

    The HTTP client and the attachment pipeline call ``raise_if_cancelled``
    before each unit of work, so cancelling stops the run at the next request.
    """

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise ReportCancelledError()
