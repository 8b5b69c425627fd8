"""Package resolver: combine index listings into one PackageRecord.

For one package the resolver reads the wheel listing from every index,
collects per-index platform tags and the best wheel version per platform,
then applies the classification rules:

1. No wheels anywhere: pure Python on both platforms.
2. Only universal (``any``) wheels: pure Python on both platforms.
3. A wheel for the platform: supported.
4. Otherwise a universal wheel next to other binaries: pure Python.
5. Otherwise: not available.

The winning index is the first one, in priority order, that carries a
mobile wheel; versions reported per platform come only from that index.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Set, Tuple

from constants import PlatformTags
from common.http_client import IndexFetchError
from common.logging_utils import extra_context, is_debug_enabled
from analysis.exclusions import is_known_unsupported
from registry.base import IndexClient
from registry.sources import IndexSource
from wheels.filename import is_version_greater, max_version, parse_wheel_filename
from wheels.naming import normalize_name

from .models import MobilePlatform, PackageRecord, PlatformSupport, PlatformSupportStatus

logger = logging.getLogger(__name__)


class ResolutionError(Exception):
    """Every index failed for a package, so no record can be produced."""

    def __init__(self, name: str, errors: Sequence[Exception]):
        reasons = "; ".join(str(e) for e in errors) or "no sources configured"
        super().__init__(f"could not resolve {name}: {reasons}")
        self.name = name
        self.errors = list(errors)


@dataclass
class SourceAccumulator:
    """Platform tags and best versions seen in one index for one package."""

    source: IndexSource
    platforms: Set[str] = field(default_factory=set)
    versions: Dict[str, Tuple[str, int]] = field(default_factory=dict)
    present: bool = False
    error: Optional[Exception] = None

    @property
    def failed(self) -> bool:
        return self.error is not None

    @property
    def has_mobile_wheels(self) -> bool:
        return any(tag in self.platforms for tag in PlatformTags.MOBILE)

    def add(self, filename: str) -> None:
        """Fold one wheel filename into the accumulator.

        Per platform the wheel with the highest runtime tag wins; equal
        runtime tags are broken by the higher package version.
        """
        info = parse_wheel_filename(filename)
        self.platforms.add(info.platform_tag)
        if info.version is None or info.runtime_version is None:
            return
        existing = self.versions.get(info.platform_tag)
        if (
            existing is None
            or info.runtime_version > existing[1]
            or (info.runtime_version == existing[1] and is_version_greater(info.version, existing[0]))
        ):
            self.versions[info.platform_tag] = (info.version, info.runtime_version)

    def version_for(self, platform_tag: str) -> Optional[str]:
        entry = self.versions.get(platform_tag)
        return entry[0] if entry else None

    def latest_version(self) -> Optional[str]:
        return max_version(version for version, _ in self.versions.values())


def classify_platform(available: Set[str], platform_tag: str) -> PlatformSupportStatus:
    """Apply the per-platform status rules to the union of platform tags."""
    if not available or available == {PlatformTags.ANY}:
        return PlatformSupportStatus.PURE_PYTHON
    if platform_tag in available:
        return PlatformSupportStatus.SUPPORTED
    if PlatformTags.ANY in available:
        return PlatformSupportStatus.PURE_PYTHON
    return PlatformSupportStatus.UNAVAILABLE


def build_record(name: str, accumulators: Sequence[SourceAccumulator]) -> PackageRecord:
    """Combine per-index accumulators (in priority order) into a record."""
    available: Set[str] = set()
    for acc in accumulators:
        available |= acc.platforms

    winner = next((acc for acc in accumulators if acc.has_mobile_wheels), accumulators[0])
    latest = next((acc.latest_version() for acc in accumulators if acc.versions), None)

    support: Dict[MobilePlatform, PlatformSupport] = {}
    for platform in MobilePlatform:
        status = classify_platform(available, platform.value)
        support[platform] = PlatformSupport(status=status, version=winner.version_for(platform.value))

    return PackageRecord(
        name=name,
        android=support[MobilePlatform.ANDROID],
        ios=support[MobilePlatform.IOS],
        source=winner.source.index,
        version=latest,
    )


class PackageResolver:
    """Resolve packages against an ordered list of index clients.

    Completed records are memoized per normalized name for the lifetime
    of the resolver, and concurrent requests for the same name share one
    in-flight resolution.
    """

    def __init__(self, clients: Sequence[IndexClient]):
        if not clients:
            raise ValueError("at least one index client is required")
        self._clients: List[IndexClient] = list(clients)
        self._records: Dict[str, Optional[PackageRecord]] = {}
        self._inflight: Dict[str, "asyncio.Future[Optional[PackageRecord]]"] = {}

    @property
    def primary(self) -> IndexClient:
        """The client that provides dependency metadata (PyPI by default)."""
        for client in self._clients:
            if client.supports_dependency_metadata:
                return client
        return self._clients[0]

    async def resolve(self, name: str) -> Optional[PackageRecord]:
        """Return the record for a package, or None if it is skipped.

        Raises:
            ResolutionError: If every index failed for this package.
        """
        key = normalize_name(name)
        if key in self._records:
            return self._records[key]

        pending = self._inflight.get(key)
        if pending is not None:
            return await pending

        task = asyncio.ensure_future(self._resolve(key))
        self._inflight[key] = task
        try:
            record = await task
        finally:
            self._inflight.pop(key, None)
        self._records[key] = record
        return record

    async def dependencies(self, name: str) -> List[str]:
        """Declared dependency names from the metadata-capable index."""
        return await self.primary.fetch_dependencies(normalize_name(name))

    async def _collect(self, client: IndexClient, name: str) -> SourceAccumulator:
        acc = SourceAccumulator(source=client.source)
        try:
            if not await client.contains(name):
                return acc
            filenames = await client.fetch_listing(name)
        except IndexFetchError as exc:
            logger.warning("%s lookup failed for %s: %s", client.source.label, name, exc)
            acc.error = exc
            return acc
        acc.present = True
        for filename in filenames:
            acc.add(filename)
        return acc

    async def _release_version(self, name: str, primary: SourceAccumulator) -> Optional[str]:
        if primary.failed:
            return None
        try:
            return await self.primary.fetch_release_version(name)
        except IndexFetchError:
            return None

    async def _resolve(self, name: str) -> Optional[PackageRecord]:
        if is_known_unsupported(name):
            logger.debug("Skipping %s: deprecated or non-mobile", name)
            return None

        accumulators = await asyncio.gather(
            *(self._collect(client, name) for client in self._clients)
        )
        if all(acc.failed for acc in accumulators):
            raise ResolutionError(name, [acc.error for acc in accumulators if acc.error])

        record = build_record(name, accumulators)
        if record.version is None:
            primary_acc = next(
                (acc for acc in accumulators if acc.source == self.primary.source),
                accumulators[0],
            )
            version = await self._release_version(name, primary_acc)
            if version:
                record = PackageRecord(
                    name=record.name,
                    android=record.android,
                    ios=record.ios,
                    source=record.source,
                    version=version,
                )

        if is_debug_enabled(logger):
            logger.debug(
                "Resolved %s",
                name,
                extra=extra_context(
                    event="resolution",
                    component="resolver",
                    package=name,
                    outcome=f"android={record.android.status.value} ios={record.ios.status.value}",
                    target=record.source.value,
                    count=sum(1 for acc in accumulators if acc.present),
                ),
            )
        return record
