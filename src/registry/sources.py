"""Package index descriptors.

The checker consults several indexes in a fixed trust order. Each one is
described as data (an IndexSource) rather than with per-index code paths;
the order of the list returned by default_sources() is the priority order.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from constants import Constants


class SourceIndex(Enum):
    """Indexes a package can be found in."""

    PYPI = "pypi"
    PYSWIFT = "pyswift"
    KIVYSCHOOL = "kivy-school"


class IndexKind(Enum):
    """Wire format an index speaks."""

    JSON_API = "json"
    SIMPLE = "simple"


@dataclass(frozen=True)
class IndexSource:
    """One index: where it lives, how to talk to it, and what it can tell us."""

    index: SourceIndex
    label: str
    base_url: str
    kind: IndexKind
    supports_dependency_metadata: bool = False

    @property
    def url(self) -> str:
        return self.base_url.rstrip("/")


def default_sources(
    pypi_url: Optional[str] = None,
    pyswift_url: Optional[str] = None,
    kivyschool_url: Optional[str] = None,
) -> List[IndexSource]:
    """Return the index descriptors in trust-priority order, PyPI first."""
    return [
        IndexSource(
            index=SourceIndex.PYPI,
            label="PyPI",
            base_url=pypi_url or Constants.REGISTRY_URL_PYPI,
            kind=IndexKind.JSON_API,
            supports_dependency_metadata=True,
        ),
        IndexSource(
            index=SourceIndex.PYSWIFT,
            label="PySwift",
            base_url=pyswift_url or Constants.SIMPLE_URL_PYSWIFT,
            kind=IndexKind.SIMPLE,
        ),
        IndexSource(
            index=SourceIndex.KIVYSCHOOL,
            label="KivySchool",
            base_url=kivyschool_url or Constants.SIMPLE_URL_KIVYSCHOOL,
            kind=IndexKind.SIMPLE,
        ),
    ]
