"""Report categories derived from resolved package records."""
from __future__ import annotations

from enum import Enum
from typing import Mapping, Optional

from registry.sources import SourceIndex
from resolution.models import PackageRecord, PlatformSupportStatus

_SUPPORTED = PlatformSupportStatus.SUPPORTED
_PURE = PlatformSupportStatus.PURE_PYTHON
_UNAVAILABLE = PlatformSupportStatus.UNAVAILABLE


class ReportCategory(Enum):
    """Section of the console report a package lands in."""

    OFFICIAL_BINARY = "official_binary"
    PYSWIFT_BINARY = "pyswift_binary"
    KIVYSCHOOL_BINARY = "kivyschool_binary"
    PURE_PYTHON = "pure_python"
    BINARY_WITHOUT_MOBILE = "binary_without_mobile"


class PlatformCategory(Enum):
    """Compact platform summary written to exports."""

    PURE_PYTHON = "pure-python"
    BOTH_PLATFORMS = "both-platforms"
    ANDROID_ONLY = "android-only"
    IOS_ONLY = "ios-only"
    NO_MOBILE_SUPPORT = "no-mobile-support"


BINARY_CATEGORIES = {
    SourceIndex.PYPI: ReportCategory.OFFICIAL_BINARY,
    SourceIndex.PYSWIFT: ReportCategory.PYSWIFT_BINARY,
    SourceIndex.KIVYSCHOOL: ReportCategory.KIVYSCHOOL_BINARY,
}


def report_category(record: PackageRecord) -> ReportCategory:
    """Binary wheels go by winning index; the rest split into pure/none."""
    android = record.android.status
    ios = record.ios.status
    if android is _SUPPORTED or ios is _SUPPORTED:
        return BINARY_CATEGORIES[record.source]
    if android is _PURE or ios is _PURE:
        return ReportCategory.PURE_PYTHON
    return ReportCategory.BINARY_WITHOUT_MOBILE


def platform_category(record: PackageRecord) -> PlatformCategory:
    android = record.android.status
    ios = record.ios.status
    if android is _PURE and ios is _PURE:
        return PlatformCategory.PURE_PYTHON
    if android.is_acceptable and ios.is_acceptable:
        return PlatformCategory.BOTH_PLATFORMS
    if android.is_acceptable:
        return PlatformCategory.ANDROID_ONLY
    if ios.is_acceptable:
        return PlatformCategory.IOS_ONLY
    return PlatformCategory.NO_MOBILE_SUPPORT


def lacks_mobile_support(record: PackageRecord) -> bool:
    """True if the package is unavailable on at least one tracked platform."""
    return _UNAVAILABLE in (record.android.status, record.ios.status)


def all_dependencies_acceptable(
    closure: Mapping[str, PackageRecord],
    root: Optional[str] = None,
) -> bool:
    """True if every record in the closure other than ``root`` is usable on both platforms."""
    return all(record.is_acceptable for name, record in closure.items() if name != root)
