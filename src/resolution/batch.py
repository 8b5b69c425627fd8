"""Bounded-concurrency batch orchestration with input-order results."""
from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Dict, Generic, Iterable, List, Optional, Tuple, TypeVar

from constants import Constants

from .progress import ProgressObserver

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BatchOrchestrator(Generic[T]):
    """Run ``worker`` over a list of names with at most ``concurrency`` in flight.

    The window refills as soon as any task completes. A task that raises or
    returns None is omitted from the output; results come back in input
    order. Failures from the most recent run are kept in ``failures``.
    """

    def __init__(
        self,
        worker: Callable[[str], Awaitable[Optional[T]]],
        concurrency: int = Constants.DEFAULT_CONCURRENCY,
        observer: Optional[ProgressObserver] = None,
    ):
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")
        self._worker = worker
        self.concurrency = concurrency
        self._observer = observer if observer is not None else ProgressObserver()
        self.failures: List[Tuple[str, BaseException]] = []

    async def run(self, names: Iterable[str]) -> List[T]:
        queue = list(enumerate(names))
        total = len(queue)
        self.failures = []
        self._observer.on_start(total)

        results: Dict[int, T] = {}
        in_flight: Dict["asyncio.Future[Optional[T]]", Tuple[int, str]] = {}
        position = 0
        completed = 0

        def launch() -> None:
            nonlocal position
            index, name = queue[position]
            position += 1
            in_flight[asyncio.ensure_future(self._worker(name))] = (index, name)

        while position < total and len(in_flight) < self.concurrency:
            launch()

        while in_flight:
            done, _ = await asyncio.wait(list(in_flight), return_when=asyncio.FIRST_COMPLETED)
            for task in done:
                index, name = in_flight.pop(task)
                completed += 1
                try:
                    value = task.result()
                except Exception as exc:
                    logger.warning("Failed to check %s: %s", name, exc)
                    self.failures.append((name, exc))
                else:
                    if value is not None:
                        results[index] = value
                self._observer.on_progress(completed, total, len(results))
                if position < total:
                    launch()

        self._observer.on_finish(completed, total, len(results))
        return [results[index] for index in sorted(results)]
