"""Client for PEP 503 simple HTML indexes (PySwift, KivySchool).

These indexes expose no dependency metadata, only anchors naming files.
Membership is checked against the index catalog (the root page listing
every project), which is fetched once per run through a CatalogCache.
"""
from __future__ import annotations

import logging
import re
from html import unescape
from typing import FrozenSet, List

from constants import Constants
from common.http_client import HttpClient, IndexFetchError
from wheels.naming import normalize_name

from .base import IndexClient
from .catalog import CatalogCache
from .sources import IndexSource

logger = logging.getLogger(__name__)

_ANCHOR = re.compile(
    r"<a\s[^>]*?href\s*=\s*[\"'][^\"']*[\"'][^>]*>(.*?)</a\s*>",
    re.IGNORECASE | re.DOTALL,
)


def extract_anchor_texts(html: str) -> List[str]:
    """Return the text of every ``<a href="...">text</a>`` pair, in order."""
    texts = []
    for match in _ANCHOR.finditer(html):
        text = unescape(match.group(1)).strip()
        if text:
            texts.append(text)
    return texts


def extract_wheel_filenames(html: str) -> List[str]:
    """Return anchor texts naming wheel files."""
    return [t for t in extract_anchor_texts(html) if t.endswith(Constants.WHEEL_EXTENSION)]


class SimpleIndexClient(IndexClient):
    """Client for ``{base}/`` (catalog) and ``{base}/{name}/`` (file listing)."""

    def __init__(self, source: IndexSource, http: HttpClient, catalog_cache: CatalogCache):
        super().__init__(source, http)
        self._catalog_cache = catalog_cache

    @property
    def context(self) -> str:
        return self.source.index.value

    def catalog_url(self) -> str:
        return f"{self.source.url}/"

    def package_url(self, name: str) -> str:
        return f"{self.source.url}/{normalize_name(name)}/"

    async def _load_catalog(self) -> FrozenSet[str]:
        url = self.catalog_url()
        status, body = await self._http.get_text(url, context=self.context)
        if status != 200:
            raise IndexFetchError(self.context, url, f"HTTP {status}")
        return frozenset(normalize_name(text) for text in extract_anchor_texts(body))

    async def fetch_catalog(self) -> FrozenSet[str]:
        """Return every normalized project name in the index.

        Raises:
            IndexFetchError: If the catalog page cannot be fetched.
        """
        return await self._catalog_cache.get_or_load(self.source.url, self._load_catalog)

    async def contains(self, name: str) -> bool:
        catalog = await self.fetch_catalog()
        return normalize_name(name) in catalog

    async def fetch_listing(self, name: str) -> List[str]:
        """Return wheel filenames on the package page; non-200 yields an empty list."""
        url = self.package_url(name)
        status, body = await self._http.get_text(url, context=self.context)
        if status != 200:
            logger.debug("%s returned HTTP %s for %s", self.source.label, status, name)
            return []
        return extract_wheel_filenames(body)
