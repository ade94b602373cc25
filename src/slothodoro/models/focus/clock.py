"""Deadline-based countdown clock.

While running, the clock stores only an absolute wall-clock deadline and
derives the remaining time from it on every read, so ``sample()`` is
``deadline - now`` regardless of how often it is called.
"""

import time
from collections.abc import Callable
from dataclasses import dataclass

from slothodoro.exceptions import InvalidDuration

MAX_REMAINING_MS = 6 * 60 * 60 * 1000
MS_PER_MINUTE = 60_000


def wall_clock_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


@dataclass(frozen=True)
class ClockState:
    """Point-in-time view of the clock."""

    remaining_ms: int
    running: bool
    deadline: int | None = None


class Clock:
    """Countdown for a single phase."""

    def __init__(
        self,
        now: Callable[[], int] = wall_clock_ms,
        on_expire: Callable[[], None] | None = None,
    ):
        self._now = now
        self.on_expire = on_expire
        self._remaining_ms = 0
        self._running = False
        self._deadline: int | None = None

    @property
    def running(self) -> bool:
        return self._running

    @property
    def state(self) -> ClockState:
        return ClockState(
            remaining_ms=self.sample(),
            running=self._running,
            deadline=self._deadline,
        )

    def load(self, duration_ms: int) -> None:
        """Arm the clock idle with a full phase duration."""
        if duration_ms <= 0:
            raise InvalidDuration(f"Phase duration must be positive, got {duration_ms}")
        self._running = False
        self._deadline = None
        self._remaining_ms = int(duration_ms)

    def start(self, duration_ms: int) -> None:
        """Start counting down ``duration_ms`` from now."""
        if duration_ms <= 0:
            raise InvalidDuration(f"Phase duration must be positive, got {duration_ms}")
        self._remaining_ms = int(duration_ms)
        self._deadline = self._now() + self._remaining_ms
        self._running = True

    def pause(self) -> None:
        if not self._running:
            return
        self._remaining_ms = max(0, self._deadline - self._now())
        self._deadline = None
        self._running = False

    def resume(self) -> None:
        if self._running or self._remaining_ms == 0:
            return
        self._deadline = self._now() + self._remaining_ms
        self._running = True

    def stop(self) -> None:
        """Freeze the clock at its current value without completing the phase."""
        self.pause()

    def sample(self) -> int:
        """Remaining milliseconds; never mutates state and never negative."""
        if self._running:
            return max(0, self._deadline - self._now())
        return self._remaining_ms

    def nudge(self, delta_minutes: int) -> bool:
        """Add (or remove) whole minutes, clamped to ``[0, 6h]``.

        Returns True if the nudge completed the phase.
        """
        before = self.sample()
        after = min(MAX_REMAINING_MS, max(0, before + delta_minutes * MS_PER_MINUTE))

        if self._running:
            self._deadline += after - before
            return self.check()

        self._remaining_ms = after
        if before > 0 and after == 0:
            self._fire()
            return True
        return False

    def check(self) -> bool:
        """Detect expiry. Fires ``on_expire`` at most once per armed phase."""
        if not self._running or self.sample() > 0:
            return False
        self._fire()
        return True

    def _fire(self) -> None:
        # stop first so a re-entrant check() from the callback is a no-op
        self._running = False
        self._deadline = None
        self._remaining_ms = 0
        if self.on_expire is not None:
            self.on_expire()
