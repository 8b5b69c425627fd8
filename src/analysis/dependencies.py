"""Extract dependency names from ``requires_dist`` requirement strings."""
from __future__ import annotations

import re
from typing import Iterable, List, Optional

from analysis.exclusions import is_known_unsupported
from wheels.naming import normalize_name

# Optional dependencies gated behind an extra are not part of the closure.
_EXTRA_MARKER = re.compile(r"extra\s*==")
_NAME_DELIMITERS = re.compile(r"[ (\[;]")
_VERSION_OPERATORS = re.compile(r"[>=<!~]")


def parse_requirement_name(requirement: str) -> Optional[str]:
    """Return the normalized package name of one requirement string.

    Returns None for extra-gated requirements and for strings that yield
    an empty name.

    Examples:
        "requests>=2.0.0"           -> "requests"
        "numpy (>=1.19.0)"          -> "numpy"
        "pytest; extra == 'test'"   -> None
    """
    if _EXTRA_MARKER.search(requirement):
        return None
    head = _NAME_DELIMITERS.split(requirement.strip(), maxsplit=1)[0]
    name = _VERSION_OPERATORS.split(head, maxsplit=1)[0].strip()
    if not name:
        return None
    return normalize_name(name)


def extract_dependencies(requires_dist: Optional[Iterable[str]]) -> List[str]:
    """Return sorted, de-duplicated dependency names worth resolving.

    Known deprecated and non-mobile names are dropped here as well, since
    the resolver would skip them anyway.
    """
    if not requires_dist:
        return []
    names = set()
    for requirement in requires_dist:
        if not isinstance(requirement, str):
            continue
        name = parse_requirement_name(requirement)
        if name and not is_known_unsupported(name):
            names.add(name)
    return sorted(names)
