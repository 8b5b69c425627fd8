"""Centralized logging helpers.

Provides one place to configure the root logger and a handful of small
utilities used across the codebase to emit structured DEBUG traces:

- configure_logging(): root logger setup honoring MOBILEWHEELS_LOG_LEVEL
- extra_context(): build an ``extra=`` payload for structured records
- is_debug_enabled(): cheap guard before building DEBUG payloads
- Timer: wall-clock timing context manager
- safe_url(): strip credentials and query strings before logging a URL
"""
from __future__ import annotations

import logging
import os
import sys
import time
import urllib.parse
from typing import Any, Dict, Optional

from constants import Constants

_CONTEXT_KEYS = (
    "event",
    "component",
    "action",
    "outcome",
    "target",
    "context",
    "status_code",
    "duration_ms",
    "count",
    "package",
)


class _ContextFormatter(logging.Formatter):
    """Formatter appending structured context fields when present."""

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        if record.levelno > logging.DEBUG:
            return base
        parts = []
        for key in _CONTEXT_KEYS:
            value = getattr(record, key, None)
            if value is not None:
                parts.append(f"{key}={value}")
        if not parts:
            return base
        return f"{base} ({', '.join(parts)})"


def configure_logging(level: Optional[str] = None) -> None:
    """Configure the root logger once.

    The level comes from ``level`` if given, else the MOBILEWHEELS_LOG_LEVEL
    environment variable, else INFO. Calling this more than once replaces
    the stream handler rather than stacking duplicates.
    """
    level_name = (level or os.environ.get(Constants.ENV_LOG_LEVEL) or "INFO").upper()
    level_value = getattr(logging, level_name, logging.INFO)

    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_mobilewheels", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(_ContextFormatter(Constants.LOG_FORMAT))
    handler._mobilewheels = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    root.setLevel(level_value)


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Return an ``extra`` mapping with None values dropped."""
    return {k: v for k, v in fields.items() if v is not None}


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when DEBUG records from ``logger`` would be emitted."""
    return logger.isEnabledFor(logging.DEBUG)


class Timer:
    """Measure elapsed wall-clock time for a block."""

    def __init__(self) -> None:
        self._start: Optional[float] = None
        self._end: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        self._end = None
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self._end = time.perf_counter()

    def duration_ms(self) -> int:
        """Elapsed milliseconds; live value while the block is still running."""
        if self._start is None:
            return 0
        end = self._end if self._end is not None else time.perf_counter()
        return int((end - self._start) * 1000)


def safe_url(url: str) -> str:
    """Drop userinfo and query string from a URL for logging."""
    try:
        parts = urllib.parse.urlsplit(url)
    except ValueError:
        return url
    host = parts.hostname or ""
    if parts.port:
        host = f"{host}:{parts.port}"
    return urllib.parse.urlunsplit((parts.scheme, host, parts.path, "", ""))
