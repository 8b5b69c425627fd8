"""Common interface for package index clients."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional

from common.http_client import HttpClient
from .sources import IndexSource, SourceIndex


class IndexClient(ABC):
    """Fetches raw wheel listings for one package from one index."""

    def __init__(self, source: IndexSource, http: HttpClient):
        self.source = source
        self._http = http

    @property
    def index(self) -> SourceIndex:
        return self.source.index

    @property
    def supports_dependency_metadata(self) -> bool:
        return self.source.supports_dependency_metadata

    async def contains(self, name: str) -> bool:
        """Return True if the index may hold the package.

        Indexes without a cheap membership check always answer True and
        let fetch_listing() come back empty.
        """
        return True

    @abstractmethod
    async def fetch_listing(self, name: str) -> List[str]:
        """Return wheel filenames for a normalized package name."""

    async def fetch_dependencies(self, name: str) -> List[str]:
        """Return declared dependency names; empty when unsupported."""
        return []

    async def fetch_release_version(self, name: str) -> Optional[str]:
        """Return the index's declared latest release, if it publishes one."""
        return None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.source.label}, {self.source.url})"
