"""Wheel filename parsing and lightweight version comparison.

Wheel filename format::

    {distribution}-{version}(-{build tag})?-{python tag}-{abi tag}-{platform tag}.whl

Parsing here is intentionally forgiving: any filename yields a result,
malformed names degrade to platform ``any`` with no version.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional

from constants import Constants, PlatformTags


@dataclass(frozen=True)
class WheelFilenameInfo:
    """Fields extracted from one wheel filename."""

    platform_tag: str
    version: Optional[str]
    runtime_version: Optional[int]


def _components(filename: str) -> List[str]:
    stem = filename
    if stem.endswith(Constants.WHEEL_EXTENSION):
        stem = stem[: -len(Constants.WHEEL_EXTENSION)]
    return [part for part in stem.split("-") if part]


def extract_platform_tag(filename: str) -> str:
    """Return the platform family of a wheel, e.g. ``ios`` for ``ios_13_0_arm64``."""
    components = _components(filename)
    if not components:
        return PlatformTags.ANY
    family = components[-1].split("_")[0]
    return family or PlatformTags.ANY


def extract_runtime_version(components: Iterable[str]) -> Optional[int]:
    """Return the numeric part of the first ``cpNNN`` tag, if any."""
    prefix = Constants.RUNTIME_TAG_PREFIX
    for component in components:
        if component.startswith(prefix):
            digits = component[len(prefix):]
            if digits.isdigit():
                return int(digits)
    return None


def parse_wheel_filename(filename: str) -> WheelFilenameInfo:
    """Parse a wheel filename into platform tag, version and runtime version.

    Never raises. The version is the second hyphen-separated field taken
    verbatim; the runtime version comes from the first ``cpNNN`` field.
    """
    components = _components(filename)
    version = components[1] if len(components) >= 2 else None
    return WheelFilenameInfo(
        platform_tag=extract_platform_tag(filename),
        version=version,
        runtime_version=extract_runtime_version(components),
    )


def version_parts(version: str) -> List[int]:
    """Split a version into integer components.

    Only components that are whole integers count; anything else is
    skipped (``1.0.post1`` -> ``[1, 0]``, ``2.0rc1`` -> ``[2]``).
    """
    return [int(piece) for piece in version.split(".") if piece.isascii() and piece.isdigit()]


def compare_versions(left: str, right: str) -> int:
    """Compare two versions numerically; returns -1, 0 or 1.

    Missing trailing components count as zero, so ``1.0`` equals ``1.0.0``
    and ``1.10.0`` is greater than ``1.9.0``.
    """
    lparts = version_parts(left)
    rparts = version_parts(right)
    for i in range(max(len(lparts), len(rparts))):
        lv = lparts[i] if i < len(lparts) else 0
        rv = rparts[i] if i < len(rparts) else 0
        if lv != rv:
            return 1 if lv > rv else -1
    return 0


def is_version_greater(left: str, right: str) -> bool:
    """Return True if ``left`` is strictly greater than ``right``."""
    return compare_versions(left, right) > 0


def max_version(versions: Iterable[str]) -> Optional[str]:
    """Return the greatest version; the first one seen wins ties."""
    best: Optional[str] = None
    for version in versions:
        if best is None or is_version_greater(version, best):
            best = version
    return best
