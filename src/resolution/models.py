"""Data models for mobile platform support resolution."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from constants import PlatformTags
from registry.sources import SourceIndex


class MobilePlatform(Enum):
    """Mobile platforms tracked by the checker."""

    ANDROID = PlatformTags.ANDROID
    IOS = PlatformTags.IOS


class PlatformSupportStatus(Enum):
    """Support classification of one package on one platform."""

    SUPPORTED = "supported"        # binary wheel exists for the platform
    PURE_PYTHON = "pure_python"    # universal wheel, or no wheels at all
    UNAVAILABLE = "not_available"  # binary package without a wheel for the platform
    UNKNOWN = "unknown"            # not resolved

    @property
    def is_acceptable(self) -> bool:
        return self in (PlatformSupportStatus.SUPPORTED, PlatformSupportStatus.PURE_PYTHON)


@dataclass(frozen=True)
class PlatformSupport:
    """Status on one platform plus the wheel version backing it."""

    status: PlatformSupportStatus = PlatformSupportStatus.UNKNOWN
    version: Optional[str] = None


@dataclass(frozen=True)
class PackageRecord:
    """Resolution result for one package.

    Records are immutable; dependency information is attached by building
    a new record with with_dependencies().
    """

    name: str
    android: PlatformSupport = field(default_factory=PlatformSupport)
    ios: PlatformSupport = field(default_factory=PlatformSupport)
    source: SourceIndex = SourceIndex.PYPI
    version: Optional[str] = None
    dependencies: Optional[Tuple[str, ...]] = None
    all_dependencies_supported: Optional[bool] = None

    @property
    def is_acceptable(self) -> bool:
        """True if usable on both tracked platforms."""
        return self.android.status.is_acceptable and self.ios.status.is_acceptable

    def with_dependencies(self, names, all_supported: bool) -> "PackageRecord":
        return replace(
            self,
            dependencies=tuple(names),
            all_dependencies_supported=all_supported,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Flat dict in the export format."""
        data: Dict[str, Any] = {
            "name": self.name,
            "android": self.android.status.value,
            "ios": self.ios.status.value,
            "source": self.source.value,
        }
        if self.android.version:
            data["androidVersion"] = self.android.version
        if self.ios.version:
            data["iosVersion"] = self.ios.version
        if self.version:
            data["version"] = self.version
        if self.dependencies is not None:
            data["dependencies"] = list(self.dependencies)
            data["allDepsSupported"] = self.all_dependencies_supported
        return data
