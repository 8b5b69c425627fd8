"""Wheel filename parsing and package name normalization."""

from .filename import (
    WheelFilenameInfo,
    compare_versions,
    is_version_greater,
    max_version,
    parse_wheel_filename,
)
from .naming import normalize_name

__all__ = [
    "WheelFilenameInfo",
    "compare_versions",
    "is_version_greater",
    "max_version",
    "normalize_name",
    "parse_wheel_filename",
]
