"""Async wiring for one checker run.

Opens the shared HTTP session, builds one client per index, then runs the
batch orchestrator over the input names. With dependency checking on,
each package is walked through its dependency closure and the record is
annotated with the closure members and whether all of them are usable.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from config import CheckerConfig
from common.http_client import HttpClient
from common.logging_utils import Timer, extra_context, is_debug_enabled
from analysis.categories import all_dependencies_acceptable
from registry.base import IndexClient
from registry.catalog import CatalogCache
from registry.pypi_json import PyPIJsonClient
from registry.simple_index import SimpleIndexClient
from registry.sources import IndexKind, IndexSource
from resolution.batch import BatchOrchestrator
from resolution.closure import DependencyClosureWalker
from resolution.models import PackageRecord
from resolution.progress import ProgressObserver
from resolution.resolver import PackageResolver
from wheels.naming import normalize_name

logger = logging.getLogger(__name__)


@dataclass
class CheckResult:
    """Outcome of a run: records in input order plus omitted packages."""

    records: List[PackageRecord] = field(default_factory=list)
    failures: List[Tuple[str, BaseException]] = field(default_factory=list)
    total: int = 0

    @property
    def all_failed(self) -> bool:
        return self.total > 0 and len(self.failures) == self.total


def build_index_clients(
    sources: Sequence[IndexSource],
    http: HttpClient,
    catalog_cache: CatalogCache,
) -> List[IndexClient]:
    """One client per source, keeping the priority order of ``sources``."""
    clients: List[IndexClient] = []
    for source in sources:
        if source.kind is IndexKind.JSON_API:
            clients.append(PyPIJsonClient(source, http))
        else:
            clients.append(SimpleIndexClient(source, http, catalog_cache))
    return clients


class PackageChecker:
    """Per-package work item handed to the batch orchestrator."""

    def __init__(self, resolver: PackageResolver, config: CheckerConfig):
        self.resolver = resolver
        self.config = config
        # Shared by every walk in the batch; caps in-flight resolutions.
        self.walker = DependencyClosureWalker(resolver, concurrency=config.concurrency)

    async def check(self, name: str) -> Optional[PackageRecord]:
        if not self.config.check_dependencies:
            return await self.resolver.resolve(name)

        root = normalize_name(name)
        closure = await self.walker.walk(root, self.config.depth)
        record = closure.get(root)
        if record is None:
            return None
        members = sorted(member for member in closure if member != root)
        return record.with_dependencies(members, all_dependencies_acceptable(closure, root))


async def check_packages(
    names: Sequence[str],
    config: CheckerConfig,
    observer: Optional[ProgressObserver] = None,
    clients: Optional[Sequence[IndexClient]] = None,
) -> CheckResult:
    """Check every name and return records in input order.

    Args:
        names: Package names, already filtered for exclusions.
        config: Run configuration.
        observer: Progress observer for the batch.
        clients: Pre-built index clients; when omitted, clients for
            ``config.sources()`` are built over a fresh HTTP session.
    """
    if clients is not None:
        return await _run(names, config, observer, clients)

    async with HttpClient(timeout=config.timeout) as http:
        built = build_index_clients(config.sources(), http, CatalogCache())
        return await _run(names, config, observer, built)


async def _run(
    names: Sequence[str],
    config: CheckerConfig,
    observer: Optional[ProgressObserver],
    clients: Sequence[IndexClient],
) -> CheckResult:
    resolver = PackageResolver(clients)
    checker = PackageChecker(resolver, config)
    batch = BatchOrchestrator(checker.check, concurrency=config.concurrency, observer=observer)

    if is_debug_enabled(logger):
        logger.debug(
            "Starting batch",
            extra=extra_context(
                event="function_entry",
                component="checker",
                action="check_packages",
                count=len(names),
            ),
        )
    with Timer() as t:
        records = await batch.run(names)
    logger.info(
        "Checked %d packages in %.1fs: %d records, %d failed",
        len(names),
        t.duration_ms() / 1000.0,
        len(records),
        len(batch.failures),
    )
    return CheckResult(records=records, failures=list(batch.failures), total=len(names))
