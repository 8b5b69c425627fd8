"""Depth-limited dependency closure walk over the resolver."""
from __future__ import annotations

import asyncio
import logging
from typing import Dict, List, Optional, Set

from wheels.naming import normalize_name

from .models import PackageRecord
from .resolver import PackageResolver, ResolutionError

logger = logging.getLogger(__name__)


class DependencyClosureWalker:
    """Breadth-first walk of a package's dependency graph.

    The walk proceeds one level at a time from an explicit frontier. A
    name is added to ``visited`` as soon as it is queued, so cycles and
    diamonds are resolved once per top-level call. Packages in the same
    level are resolved concurrently; ``visited`` is only touched between
    levels.
    """

    def __init__(self, resolver: PackageResolver, concurrency: Optional[int] = None):
        self._resolver = resolver
        self._concurrency = concurrency
        self._semaphore: Optional[asyncio.Semaphore] = None

    async def _guarded(self, coro):
        if not self._concurrency:
            return await coro
        if self._semaphore is None:
            self._semaphore = asyncio.Semaphore(self._concurrency)
        async with self._semaphore:
            return await coro

    async def _resolve_member(self, name: str, is_root: bool) -> Optional[PackageRecord]:
        try:
            return await self._guarded(self._resolver.resolve(name))
        except ResolutionError as exc:
            if is_root:
                raise
            logger.warning("Skipping dependency %s: %s", name, exc)
            return None

    async def walk(
        self,
        name: str,
        depth: int,
        visited: Optional[Set[str]] = None,
    ) -> Dict[str, PackageRecord]:
        """Resolve ``name`` and its dependencies down to ``depth`` levels.

        ``depth=1`` resolves only the package itself. Returned records are
        keyed by normalized name; the first level to reach a name wins.

        Raises:
            ResolutionError: If the root package itself cannot be resolved.
        """
        if visited is None:
            visited = set()
        root = normalize_name(name)
        if depth <= 0 or root in visited:
            return {}
        visited.add(root)

        records: Dict[str, PackageRecord] = {}
        frontier: List[str] = [root]
        remaining = depth
        while frontier and remaining > 0:
            resolved = await asyncio.gather(
                *(self._resolve_member(member, member == root) for member in frontier)
            )
            expand = []
            for member, record in zip(frontier, resolved):
                if record is None:
                    continue
                records.setdefault(member, record)
                if remaining > 1:
                    expand.append(member)

            next_frontier: List[str] = []
            if expand:
                dependency_lists = await asyncio.gather(
                    *(self._guarded(self._resolver.dependencies(member)) for member in expand)
                )
                for dependencies in dependency_lists:
                    for dependency in dependencies:
                        key = normalize_name(dependency)
                        if key in visited:
                            continue
                        visited.add(key)
                        next_frontier.append(key)

            frontier = next_frontier
            remaining -= 1

        logger.debug("Closure of %s: %d packages", root, len(records))
        return records
