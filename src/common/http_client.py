"""Shared async HTTP helpers used by the index clients.

Encapsulates the aiohttp session lifecycle and the common request/timeout
error handling so the individual index clients avoid duplicating
try/except blocks. Transport failures surface as IndexFetchError; HTTP
status handling is left to the caller.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Dict, Optional, Tuple

import aiohttp

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer

logger = logging.getLogger(__name__)


class IndexFetchError(Exception):
    """A request to one package index could not be completed."""

    def __init__(self, context: str, url: str, reason: str):
        super().__init__(f"{context} request to {safe_url(url)} failed: {reason}")
        self.context = context
        self.url = url
        self.reason = reason


class HttpClient:
    """Thin wrapper around one aiohttp session shared by all index clients."""

    def __init__(
        self,
        timeout: int = Constants.REQUEST_TIMEOUT,
        headers: Optional[Dict[str, str]] = None,
        connection_limit: int = Constants.CONNECTION_LIMIT,
    ):
        """Initialize the client.

        Args:
            timeout: Total request timeout in seconds.
            headers: Default headers sent with every request.
            connection_limit: Maximum simultaneous connections.
        """
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._headers = {"User-Agent": Constants.USER_AGENT}
        if headers:
            self._headers.update(headers)
        self._connection_limit = connection_limit
        self._session: Optional[aiohttp.ClientSession] = None

    async def start(self) -> None:
        """Start the HTTP session."""
        if self._session is None:
            connector = aiohttp.TCPConnector(limit=self._connection_limit)
            self._session = aiohttp.ClientSession(
                timeout=self._timeout,
                connector=connector,
                headers=self._headers,
            )

    async def stop(self) -> None:
        """Stop the HTTP session."""
        if self._session:
            await self._session.close()
            self._session = None

    async def get_text(
        self,
        url: str,
        *,
        context: str,
        headers: Optional[Dict[str, str]] = None,
    ) -> Tuple[int, str]:
        """Perform a GET request and return (status, body text).

        Args:
            url: Target URL.
            context: Human-readable source tag for logs (e.g., "pypi").
            headers: Extra request headers.

        Returns:
            Tuple of HTTP status code and decoded body.

        Raises:
            IndexFetchError: On connection errors and timeouts.
        """
        if self._session is None:
            await self.start()
        assert self._session is not None

        target = safe_url(url)
        with Timer() as t:
            if is_debug_enabled(logger):
                logger.debug(
                    "HTTP request",
                    extra=extra_context(
                        event="http_request",
                        component="http_client",
                        action="GET",
                        target=target,
                        context=context,
                    ),
                )
            try:
                async with self._session.get(url, headers=headers) as response:
                    body = await response.text(errors="replace")
                    status = response.status
            except asyncio.TimeoutError as exc:
                logger.warning(
                    "%s request timed out after %s seconds",
                    context,
                    self._timeout.total,
                )
                raise IndexFetchError(context, url, "timeout") from exc
            except aiohttp.ClientError as exc:
                logger.warning("%s connection error: %s", context, exc)
                raise IndexFetchError(context, url, str(exc)) from exc

        if is_debug_enabled(logger):
            logger.debug(
                "HTTP response",
                extra=extra_context(
                    event="http_response",
                    component="http_client",
                    action="GET",
                    outcome="success" if status == 200 else "non_200",
                    status_code=status,
                    duration_ms=t.duration_ms(),
                    target=target,
                    context=context,
                ),
            )
        return status, body

    async def __aenter__(self) -> "HttpClient":
        """Async context manager entry."""
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.stop()
