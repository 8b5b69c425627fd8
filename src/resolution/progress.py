"""Progress observers for the batch orchestrator."""
from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

logger = logging.getLogger(__name__)


class ProgressObserver:
    """Receives batch progress. The base class ignores every event."""

    def on_start(self, total: int) -> None:
        pass

    def on_progress(self, completed: int, total: int, succeeded: int) -> None:
        pass

    def on_finish(self, completed: int, total: int, succeeded: int) -> None:
        pass


class LoggingProgressObserver(ProgressObserver):
    """Log progress at INFO every ``every`` completions."""

    def __init__(self, every: int = 100):
        self.every = max(1, every)

    def on_progress(self, completed: int, total: int, succeeded: int) -> None:
        if completed % self.every == 0 or completed == total:
            logger.info("Checked %d/%d packages (%d with results)", completed, total, succeeded)


class TerminalProgressObserver(ProgressObserver):
    """Redraw a single ``[n/total] [pct%]`` line on a terminal stream."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream if stream is not None else sys.stderr

    def on_progress(self, completed: int, total: int, succeeded: int) -> None:
        percent = int(completed * 100 / total) if total else 100
        self.stream.write(f"\r[{completed}/{total}] [{percent}%]")
        self.stream.flush()

    def on_finish(self, completed: int, total: int, succeeded: int) -> None:
        if total:
            self.stream.write("\n")
            self.stream.flush()
