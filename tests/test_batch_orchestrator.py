"""Tests for bounded-concurrency batch execution."""

import asyncio

import pytest

from resolution.batch import BatchOrchestrator
from resolution.progress import ProgressObserver


class _RecordingObserver(ProgressObserver):
    def __init__(self):
        self.started = None
        self.events = []
        self.finished = None

    def on_start(self, total):
        self.started = total

    def on_progress(self, completed, total, succeeded):
        self.events.append((completed, total, succeeded))

    def on_finish(self, completed, total, succeeded):
        self.finished = (completed, total, succeeded)


class _Worker:
    """Tracks peak concurrency; finishes later inputs first."""

    def __init__(self, fail=(), skip=()):
        self.fail = set(fail)
        self.skip = set(skip)
        self.active = 0
        self.peak = 0
        self.started = []

    async def __call__(self, name):
        self.started.append(name)
        self.active += 1
        self.peak = max(self.peak, self.active)
        try:
            await asyncio.sleep(0.001 * (10 - int(name[1:])))
            if name in self.fail:
                raise RuntimeError(f"{name} failed")
            if name in self.skip:
                return None
            return name.upper()
        finally:
            self.active -= 1


NAMES = [f"p{i}" for i in range(10)]


class TestBatchOrchestrator:
    """Window, ordering and failure isolation."""

    def test_failure_is_omitted_and_order_preserved(self):
        worker = _Worker(fail={"p4"})
        batch = BatchOrchestrator(worker, concurrency=3)
        results = asyncio.run(batch.run(NAMES))
        assert results == [n.upper() for n in NAMES if n != "p4"]
        assert len(results) == 9
        assert [name for name, _ in batch.failures] == ["p4"]

    def test_never_exceeds_concurrency(self):
        worker = _Worker()
        asyncio.run(BatchOrchestrator(worker, concurrency=3).run(NAMES))
        assert worker.peak == 3
        assert worker.started == NAMES

    def test_none_results_are_dropped(self):
        worker = _Worker(skip={"p0", "p9"})
        results = asyncio.run(BatchOrchestrator(worker, concurrency=4).run(NAMES))
        assert results == [n.upper() for n in NAMES[1:9]]

    def test_progress_is_monotonic(self):
        observer = _RecordingObserver()
        worker = _Worker(fail={"p1"})
        asyncio.run(BatchOrchestrator(worker, concurrency=2, observer=observer).run(NAMES))
        assert observer.started == 10
        assert [e[0] for e in observer.events] == list(range(1, 11))
        assert all(total == 10 for _, total, _ in observer.events)
        assert observer.finished == (10, 10, 9)

    def test_empty_input(self):
        observer = _RecordingObserver()
        results = asyncio.run(BatchOrchestrator(_Worker(), observer=observer).run([]))
        assert results == []
        assert observer.events == []

    def test_invalid_concurrency(self):
        with pytest.raises(ValueError):
            BatchOrchestrator(_Worker(), concurrency=0)
