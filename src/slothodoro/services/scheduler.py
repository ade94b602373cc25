"""Cooperative, single-threaded callback scheduling.

The engine never sleeps or loops on its own. It asks a scheduler to run a
callback again after roughly ``interval_hint`` seconds, and cancels that
request when the clock is paused. Timing accuracy does not depend on the
scheduler honouring the hint: completion is judged from the clock's deadline.
"""

import heapq
import itertools
import time
from collections.abc import Callable
from typing import Protocol

Handle = int


class Scheduler(Protocol):
    """What the engine needs from a host event loop."""

    def schedule_next(self, callback: Callable[[], None], interval_hint: float) -> Handle: ...

    def cancel(self, handle: Handle) -> None: ...


class LoopScheduler:
    """Runs scheduled callbacks on the calling thread.

    Args:
        monotonic: Time source for due times, in seconds
        sleep: Blocking sleep used between callbacks
    """

    def __init__(
        self,
        monotonic: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._monotonic = monotonic
        self._sleep = sleep
        self._queue: list[tuple[float, Handle, Callable[[], None]]] = []
        self._cancelled: set[Handle] = set()
        self._ids = itertools.count(1)

    def schedule_next(self, callback: Callable[[], None], interval_hint: float) -> Handle:
        handle = next(self._ids)
        due = self._monotonic() + max(0.0, interval_hint)
        heapq.heappush(self._queue, (due, handle, callback))
        return handle

    def cancel(self, handle: Handle) -> None:
        self._cancelled.add(handle)

    def pending(self) -> int:
        return sum(1 for _, handle, _ in self._queue if handle not in self._cancelled)

    def run_pending(self) -> int:
        """Run every callback that is due now. Returns how many ran."""
        ran = 0
        now = self._monotonic()
        while self._queue and self._queue[0][0] <= now:
            _, handle, callback = heapq.heappop(self._queue)
            if handle in self._cancelled:
                self._cancelled.discard(handle)
                continue
            callback()
            ran += 1
        return ran

    def run(self, until: Callable[[], bool]) -> None:
        """Pump callbacks until ``until()`` is true or nothing is left to run."""
        while not until():
            self._drop_cancelled_head()
            if not self._queue:
                return
            delay = self._queue[0][0] - self._monotonic()
            if delay > 0:
                self._sleep(delay)
            self.run_pending()

    def _drop_cancelled_head(self) -> None:
        while self._queue and self._queue[0][1] in self._cancelled:
            _, handle, _ = heapq.heappop(self._queue)
            self._cancelled.discard(handle)
