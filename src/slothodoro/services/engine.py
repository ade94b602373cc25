"""Timer engine: the single owner of clock, phase machine, ledger and state.

Every operation goes through a :class:`TimerEngine` instance. Mutations of the
persistent aggregate are written through to the repository immediately, then
observers are told about the change.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from pydantic import ValidationError

from slothodoro.exceptions import DecodeError
from slothodoro.models.focus.clock import Clock, wall_clock_ms
from slothodoro.models.focus.cycling import PhaseStateMachine, Phase, Transition
from slothodoro.models.focus.ledger import StatsLedger, TodaySummary
from slothodoro.models.settings import Settings
from slothodoro.models.state import PersistentState, SessionResult, Stats
from slothodoro.services.callouts import EngineEvent, EventKind, Observer, dispatch
from slothodoro.services.scheduler import Handle, LoopScheduler, Scheduler
from slothodoro.services.storage_service import StateRepository
from slothodoro.utils import result_codec
from slothodoro.utils.logger import get_logger

FAST_INTERVAL = 1 / 20
SLOW_INTERVAL = 0.25


@dataclass(frozen=True)
class CardSnapshot:
    """Read-only input for share-card renderers."""

    last_result: SessionResult | None
    stats: Stats
    settings: Settings
    streak_today: int


class TimerEngine:
    """Explicit context for one timer session.

    Args:
        repository: Where the persistent aggregate is loaded from and saved to
        scheduler: Host loop that drives ``advance``
        now: Wall-clock source in epoch milliseconds
        observers: Side-channel callbacks, see ``slothodoro.services.callouts``
        state: Pre-loaded state; read from ``repository`` when omitted
    """

    def __init__(
        self,
        repository: StateRepository | None = None,
        scheduler: Scheduler | None = None,
        now: Callable[[], int] = wall_clock_ms,
        observers: list[Observer] | None = None,
        state: PersistentState | None = None,
    ):
        self.logger = get_logger()
        self.repository = repository if repository is not None else StateRepository()
        self.state = state if state is not None else self.repository.load()
        self.scheduler = scheduler if scheduler is not None else LoopScheduler()
        self.observers: list[Observer] = list(observers or [])
        self._now = now

        self.clock = Clock(now=now, on_expire=self._on_expire)
        self.ledger = StatsLedger()
        self.machine = PhaseStateMachine(self.state, self.clock, self.ledger)

        self.share_fragment: str | None = None
        self._advance_handle: Handle | None = None
        self._last_whole_second = self._whole_seconds()

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def phase(self) -> Phase:
        return self.machine.phase

    @property
    def running(self) -> bool:
        return self.clock.running

    @property
    def settings(self) -> Settings:
        return self.state.settings

    @property
    def tick_interval(self) -> float:
        return SLOW_INTERVAL if self.settings.slow_mode else FAST_INTERVAL

    def sample(self) -> int:
        return self.clock.sample()

    def now(self) -> datetime:
        return datetime.fromtimestamp(self._now() / 1000).astimezone()

    def today(self) -> date:
        return self.now().date()

    def displayed_streak(self) -> int:
        return self.ledger.displayed_streak(self.state.stats, self.today())

    def today_summary(self) -> TodaySummary:
        return self.ledger.today_summary(self.state.history, self.today())

    def card_snapshot(self) -> CardSnapshot:
        return CardSnapshot(
            last_result=self.state.last_result,
            stats=self.state.stats.model_copy(),
            settings=self.state.settings.model_copy(),
            streak_today=self.displayed_streak(),
        )

    def share_link(self) -> str | None:
        """Share URL for the last result, or None before the first completion."""
        if self.state.last_result is None:
            return None
        return result_codec.share_url(self.state.last_result.to_record())

    # ------------------------------------------------------------------
    # Clock control
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start or resume the current phase."""
        if self.running:
            return
        if self.clock.sample() > 0:
            self.clock.resume()
        else:
            self.clock.start(self.machine.duration_ms())
        self._last_whole_second = self._whole_seconds()
        self._schedule_advance()
        self._emit("started")

    def pause(self) -> None:
        if not self.running:
            return
        self.clock.pause()
        self._cancel_advance()
        self._last_whole_second = self._whole_seconds()
        self._emit("paused")

    def toggle(self) -> None:
        if self.running:
            self.pause()
        else:
            self.start()

    def reset(self) -> None:
        """Re-arm the current phase with its full duration, leaving it idle."""
        self._cancel_advance()
        self.machine.reset()
        self._last_whole_second = self._whole_seconds()
        self._emit("reset")

    def nudge(self, delta_minutes: int) -> bool:
        """Shift the remaining time; returns True if that completed the phase."""
        completed = self.clock.nudge(delta_minutes)
        if not completed:
            self._last_whole_second = self._whole_seconds()
        return completed

    def skip(self) -> Transition:
        """Move to the next phase now. A skipped focus phase is not counted."""
        self._cancel_advance()
        transition = self.machine.skip()
        self._commit(transition)
        return transition

    def set_phase(self, phase: Phase) -> None:
        """Manual override of the current phase (armed, idle)."""
        self._cancel_advance()
        self.machine.set_phase(phase)
        self._last_whole_second = self._whole_seconds()
        self._emit("phase_changed")

    def advance(self) -> None:
        """Scheduled callback: detect expiry and fire the per-second tick."""
        self._advance_handle = None
        if not self.running:
            return
        if self.clock.check():
            return

        remaining = self.clock.sample()
        whole = self._whole_seconds(remaining)
        if whole != self._last_whole_second and remaining > 0:
            self._emit("tick")
        self._last_whole_second = whole
        self._schedule_advance()

    # ------------------------------------------------------------------
    # Settings and data
    # ------------------------------------------------------------------

    def update_settings(self, **changes: Any) -> Settings:
        """Apply setting changes (clamped), persist, and re-arm an idle clock."""
        unknown = [key for key in changes if key not in Settings.model_fields]
        if unknown:
            raise KeyError(unknown[0])

        settings = self.state.settings
        for key, value in changes.items():
            setattr(settings, key, value)
        self._persist()
        if not self.running:
            self.machine.reset()
            self._last_whole_second = self._whole_seconds()
        self._emit("settings_changed")
        return settings

    def apply_preset(self, name: str) -> Settings:
        self.state.settings.apply_preset(name)
        return self.update_settings()

    def clear(self) -> None:
        """Forget all local stats and settings and start over on focus."""
        self._cancel_advance()
        self.repository.clear()
        self.state = PersistentState()
        self.machine.state = self.state
        self.machine.set_phase("focus")
        self.share_fragment = None
        self._last_whole_second = self._whole_seconds()
        self.logger.info("local data cleared")
        self._emit("cleared")

    def load_shared_result(self, text: str) -> SessionResult | None:
        """Seed ``last_result`` from a share URL, fragment or token.

        Undecodable input is ignored and returns None.
        """
        token = result_codec.token_from_fragment(text)
        try:
            result = SessionResult.model_validate(result_codec.decode(token))
        except (DecodeError, ValidationError) as e:
            self.logger.info("ignoring share token: %s", e)
            return None

        self.state.last_result = result
        self.share_fragment = f"#r={token}"
        self._persist()
        return result

    def close(self) -> None:
        """Stop driving the clock and release side-channel resources."""
        self._cancel_advance()
        self._emit("closed")

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _on_expire(self) -> None:
        self._cancel_advance()
        transition = self.machine.complete(counted=True, at=self.now())
        self._commit(transition)

    def _commit(self, transition: Transition) -> None:
        if transition.result is not None:
            self.share_fragment = result_codec.share_fragment(
                transition.result.to_record()
            )
        self._persist()
        self._last_whole_second = self._whole_seconds()
        self.logger.info(
            "phase %s -> %s (counted=%s)",
            transition.previous,
            transition.next,
            transition.counted,
        )

        self._emit("phase_complete", transition)
        self._emit("phase_changed", transition)
        if self.settings.auto_start:
            self.start()

    def _persist(self) -> None:
        self.repository.save(self.state)

    def _schedule_advance(self) -> None:
        self._cancel_advance()
        self._advance_handle = self.scheduler.schedule_next(
            self.advance, self.tick_interval
        )

    def _cancel_advance(self) -> None:
        if self._advance_handle is not None:
            self.scheduler.cancel(self._advance_handle)
            self._advance_handle = None

    def _whole_seconds(self, remaining_ms: int | None = None) -> int:
        if remaining_ms is None:
            remaining_ms = self.clock.sample()
        return math.ceil(remaining_ms / 1000)

    def _emit(self, kind: EventKind, transition: Transition | None = None) -> None:
        event = EngineEvent(
            kind=kind,
            phase=self.phase,
            settings=self.state.settings,
            running=self.running,
            remaining_ms=self.clock.sample(),
            transition=transition,
        )
        dispatch(self.observers, event, self.logger)
