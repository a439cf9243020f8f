"""Progress reporting side channel."""

import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)

ProgressSink = Callable[[int, int, str], None]


def log_progress(step: int, total_steps: int, message: str) -> None:
    """Default sink: write progress to the module logger."""
    logger.info("[%d/%d] %s", step, total_steps, message)


class ProgressTracker:
    """Monotonic step counter with free-text status messages.

    The tracker only observes the pipeline. Sinks receive
    ``(step, total_steps, message)`` and must not raise.
    """

    def __init__(self, total_steps: int = 8, sink: Optional[ProgressSink] = None):
        """Initialize progress tracker.

        Args:
            total_steps: Number of steps reported for one run
            sink: Callback receiving progress updates (defaults to logging)
        """
        self.total_steps = total_steps
        self.step = 0
        self.sink = sink or log_progress

    def report(self, message: str) -> None:
        """Advance one step and publish the message."""
        if self.step < self.total_steps:
            self.step += 1
        self.sink(self.step, self.total_steps, message)

    def send_message(self, message: str) -> None:
        """Publish a message without advancing."""
        self.sink(self.step, self.total_steps, message)

    def reset(self) -> None:
        self.step = 0
