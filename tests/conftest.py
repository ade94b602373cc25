"""Shared test fixtures and configuration.

Time is fully controlled: ``FakeTime`` replaces the wall clock and
``ManualScheduler`` runs scheduled callbacks only when the fake time passes
their due point, so deadline handling can be tested without sleeping.
"""

from __future__ import annotations

import heapq
import itertools
import logging
from collections.abc import Callable
from datetime import datetime
from unittest.mock import patch

import pytest

from slothodoro.models.state import PersistentState
from slothodoro.services.engine import TimerEngine
from slothodoro.services.storage_service import MemoryStore, StateRepository

MINUTE_MS = 60_000

# 2026-10-19 09:00 local time
DAY_ONE_MS = int(datetime(2026, 10, 19, 9, 0).timestamp() * 1000)


class FakeTime:
    """Instantly advanceable wall clock in epoch milliseconds."""

    def __init__(self, start_ms: int = DAY_ONE_MS):
        self.ms = start_ms

    def __call__(self) -> int:
        return self.ms

    def advance(self, ms: int = 0, *, minutes: float = 0) -> None:
        self.ms += int(ms + minutes * MINUTE_MS)


class ManualScheduler:
    """Scheduler whose callbacks run only when ``run_due`` is called."""

    def __init__(self, time: FakeTime):
        self.time = time
        self._queue: list[tuple[int, int, Callable[[], None]]] = []
        self._cancelled: set[int] = set()
        self._ids = itertools.count(1)

    def schedule_next(self, callback, interval_hint: float) -> int:
        handle = next(self._ids)
        due = self.time.ms + int(interval_hint * 1000)
        heapq.heappush(self._queue, (due, handle, callback))
        return handle

    def cancel(self, handle: int) -> None:
        self._cancelled.add(handle)

    def pending(self) -> int:
        return sum(1 for _, h, _ in self._queue if h not in self._cancelled)

    def run_due(self) -> int:
        ran = 0
        while self._queue and self._queue[0][0] <= self.time.ms:
            _, handle, callback = heapq.heappop(self._queue)
            if handle in self._cancelled:
                continue
            callback()
            ran += 1
        return ran

    def run(self, until: Callable[[], bool]) -> None:
        """Jump straight to each next due callback until ``until()`` holds."""
        while not until():
            live = [due for due, handle, _ in self._queue if handle not in self._cancelled]
            if not live:
                return
            self.time.ms = max(self.time.ms, min(live))
            self.run_due()

    def advance(self, *, minutes: float = 0, ms: int = 0) -> None:
        """Jump time forward, then run whatever became due (one coalesced callback)."""
        self.time.advance(ms, minutes=minutes)
        self.run_due()


@pytest.fixture(autouse=True)
def isolated_logger(tmp_path_factory):
    """Send the application log to a temp dir and reset the singleton."""
    import slothodoro.utils.logger as logger_mod

    log_dir = tmp_path_factory.mktemp("logs")
    logger_mod._logger = None
    logging.getLogger("slothodoro").handlers.clear()
    with patch("slothodoro.utils.logger.user_log_dir", return_value=str(log_dir)):
        yield
    logger_mod._logger = None
    logging.getLogger("slothodoro").handlers.clear()


@pytest.fixture()
def fake_time() -> FakeTime:
    return FakeTime()


@pytest.fixture()
def scheduler(fake_time) -> ManualScheduler:
    return ManualScheduler(fake_time)


@pytest.fixture()
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture()
def repository(store) -> StateRepository:
    return StateRepository(store)


@pytest.fixture()
def make_engine(repository, scheduler, fake_time):
    """Factory for engines sharing the fake clock, scheduler and store."""

    def _make(state: PersistentState | None = None, observers=None, **settings) -> TimerEngine:
        engine = TimerEngine(
            repository=repository,
            scheduler=scheduler,
            now=fake_time,
            observers=observers,
            state=state,
        )
        if settings:
            engine.update_settings(**settings)
        return engine

    return _make


@pytest.fixture()
def engine(make_engine) -> TimerEngine:
    return make_engine()
