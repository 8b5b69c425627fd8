"""PyPI JSON API client: wheel listings, release version and requires_dist."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from constants import Constants
from common.http_client import HttpClient, IndexFetchError
from common.logging_utils import extra_context, is_debug_enabled
from analysis.dependencies import extract_dependencies
from wheels.naming import normalize_name

from .base import IndexClient
from .sources import IndexSource

logger = logging.getLogger(__name__)

HEADERS_JSON = {"Accept": "application/json"}


@dataclass(frozen=True)
class PackageMetadata:
    """The parts of a PyPI JSON document the checker uses."""

    filenames: Tuple[str, ...] = ()
    requires_dist: Tuple[str, ...] = ()
    version: Optional[str] = None
    found: bool = False


EMPTY_METADATA = PackageMetadata()


def parse_package_document(document: Dict[str, Any]) -> PackageMetadata:
    """Pull wheel filenames, requires_dist and version out of a JSON document."""
    filenames = []
    for download in document.get("urls") or []:
        if not isinstance(download, dict):
            continue
        if download.get("packagetype") != Constants.WHEEL_PACKAGE_TYPE:
            continue
        filename = download.get("filename")
        if isinstance(filename, str) and filename:
            filenames.append(filename)

    info = document.get("info") or {}
    if not isinstance(info, dict):
        info = {}
    requires = info.get("requires_dist") or []
    version = info.get("version")
    return PackageMetadata(
        filenames=tuple(filenames),
        requires_dist=tuple(r for r in requires if isinstance(r, str)),
        version=version if isinstance(version, str) and version else None,
        found=True,
    )


class PyPIJsonClient(IndexClient):
    """Client for ``{base}/{name}/json``.

    Non-200 responses and undecodable bodies count as "no data" and yield
    empty metadata. Transport failures raise IndexFetchError. Every answer
    the server gave, including the empty ones, is memoized for the lifetime
    of the client so later lookups for the same package do not refetch.
    """

    def __init__(self, source: IndexSource, http: HttpClient):
        super().__init__(source, http)
        self._metadata: Dict[str, PackageMetadata] = {}

    def package_url(self, name: str) -> str:
        return f"{self.source.url}/{normalize_name(name)}/json"

    async def fetch_metadata(self, name: str) -> PackageMetadata:
        """Fetch and parse the JSON document for one package.

        Raises:
            IndexFetchError: On connection errors and timeouts.
        """
        key = normalize_name(name)
        cached = self._metadata.get(key)
        if cached is not None:
            return cached

        url = self.package_url(key)
        status, body = await self._http.get_text(url, context="pypi", headers=HEADERS_JSON)
        if status != 200:
            logger.debug(
                "PyPI returned HTTP %s for %s",
                status,
                key,
                extra=extra_context(
                    event="http_response",
                    outcome="handled_non_200",
                    status_code=status,
                    package=key,
                ),
            )
            self._metadata[key] = EMPTY_METADATA
            return EMPTY_METADATA

        try:
            document = json.loads(body)
        except json.JSONDecodeError:
            logger.warning("Couldn't decode JSON for %s, assuming no data.", key)
            document = None
        if not isinstance(document, dict):
            self._metadata[key] = EMPTY_METADATA
            return EMPTY_METADATA

        metadata = parse_package_document(document)
        self._metadata[key] = metadata
        if is_debug_enabled(logger):
            logger.debug(
                "PyPI metadata parsed",
                extra=extra_context(
                    event="parse",
                    component="pypi_json",
                    package=key,
                    count=len(metadata.filenames),
                ),
            )
        return metadata

    async def fetch_listing(self, name: str) -> List[str]:
        metadata = await self.fetch_metadata(name)
        return list(metadata.filenames)

    async def fetch_release_version(self, name: str) -> Optional[str]:
        metadata = await self.fetch_metadata(name)
        return metadata.version

    async def fetch_dependencies(self, name: str) -> List[str]:
        """Return dependency names; any failure yields an empty list."""
        try:
            metadata = await self.fetch_metadata(name)
        except IndexFetchError as exc:
            logger.warning("Could not fetch dependencies for %s: %s", name, exc)
            return []
        return extract_dependencies(metadata.requires_dist)
