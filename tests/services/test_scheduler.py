"""Tests for LoopScheduler."""

from slothodoro.services.scheduler import LoopScheduler


class FakeMonotonic:
    def __init__(self):
        self.now = 100.0
        self.sleeps = []

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


def _scheduler():
    clock = FakeMonotonic()
    return LoopScheduler(monotonic=clock, sleep=clock.sleep), clock


def test_callback_runs_when_due():
    scheduler, clock = _scheduler()
    calls = []
    scheduler.schedule_next(lambda: calls.append(clock.now), 0.5)

    assert scheduler.run_pending() == 0
    clock.now += 0.5
    assert scheduler.run_pending() == 1
    assert calls == [100.5]


def test_callbacks_run_in_due_order():
    scheduler, clock = _scheduler()
    calls = []
    scheduler.schedule_next(lambda: calls.append("late"), 2)
    scheduler.schedule_next(lambda: calls.append("early"), 1)

    clock.now += 5
    scheduler.run_pending()

    assert calls == ["early", "late"]


def test_cancelled_callback_never_runs():
    scheduler, clock = _scheduler()
    calls = []
    handle = scheduler.schedule_next(lambda: calls.append(1), 0)
    scheduler.cancel(handle)

    assert scheduler.pending() == 0
    clock.now += 1
    assert scheduler.run_pending() == 0
    assert calls == []


def test_negative_hint_is_due_now():
    scheduler, _ = _scheduler()
    calls = []
    scheduler.schedule_next(lambda: calls.append(1), -3)

    assert scheduler.run_pending() == 1


def test_run_sleeps_until_due_and_stops():
    scheduler, clock = _scheduler()
    calls = []

    def tick():
        calls.append(clock.now)
        if len(calls) < 3:
            scheduler.schedule_next(tick, 0.25)

    scheduler.schedule_next(tick, 0.25)
    scheduler.run(until=lambda: False)

    assert calls == [100.25, 100.5, 100.75]
    assert clock.sleeps == [0.25, 0.25, 0.25]


def test_run_stops_when_condition_met():
    scheduler, clock = _scheduler()
    calls = []

    def tick():
        calls.append(1)
        scheduler.schedule_next(tick, 1)

    scheduler.schedule_next(tick, 1)
    scheduler.run(until=lambda: len(calls) >= 2)

    assert len(calls) == 2
    assert scheduler.pending() == 1


def test_run_returns_when_only_cancelled_work_left():
    scheduler, clock = _scheduler()
    handle = scheduler.schedule_next(lambda: None, 10)
    scheduler.cancel(handle)

    scheduler.run(until=lambda: False)

    assert clock.sleeps == []
