"""Focus / break / long-break phase cycling."""

from dataclasses import dataclass
from datetime import datetime
from typing import Literal

from slothodoro.models.state import PersistentState, SessionResult

from .clock import Clock
from .ledger import StatsLedger

Phase = Literal["focus", "break", "long_break"]

PHASES: tuple[Phase, ...] = ("focus", "break", "long_break")

PHASE_LABELS: dict[Phase, str] = {
    "focus": "Focus",
    "break": "Break",
    "long_break": "Long break",
}

PHASE_HINTS: dict[Phase, str] = {
    "focus": "Back to focus. Slow and steady.",
    "break": "Break time. Blink slowly. Hydrate.",
    "long_break": "Long break time. You earned it.",
}


@dataclass(frozen=True)
class Transition:
    """Outcome of finishing (or skipping) a phase."""

    previous: Phase
    next: Phase
    counted: bool
    result: SessionResult | None = None


class PhaseStateMachine:
    """Owns the current phase and the cadence toward a long break."""

    def __init__(self, state: PersistentState, clock: Clock, ledger: StatsLedger):
        self.state = state
        self.clock = clock
        self.ledger = ledger
        self.phase: Phase = "focus"
        self.clock.load(self.duration_ms("focus"))

    def duration_ms(self, phase: Phase | None = None) -> int:
        """Full duration of ``phase`` (default: current) under the current settings."""
        settings = self.state.settings
        phase = phase or self.phase
        if phase == "focus":
            return settings.focus_ms()
        elif phase == "break":
            return settings.break_ms()
        else:  # long_break
            return settings.long_break_ms()

    def next_phase(self, counted: bool = True) -> Phase:
        """Phase that would follow the current one, without changing anything."""
        if self.phase != "focus":
            return "focus"
        if not counted:
            return "break"

        long_every = self.state.settings.long_every
        if long_every > 0 and self.state.cycles_since_long + 1 >= long_every:
            return "long_break"
        return "break"

    def complete(self, counted: bool = True, at: datetime | None = None) -> Transition:
        """Finish the current phase and arm the next one (idle).

        A counted focus completion is recorded by the ledger before the
        cadence advances. Skipped focus phases touch neither.
        """
        previous = self.phase
        result = None
        counted = counted and previous == "focus"

        if counted:
            result = self.ledger.record_focus(self.state, at=at)
            next_phase = self.next_phase(counted=True)
            if self.state.settings.long_every > 0:
                self.state.cycles_since_long += 1
                if next_phase == "long_break":
                    self.state.cycles_since_long = 0
        else:
            next_phase = self.next_phase(counted=False)

        self.phase = next_phase
        self.clock.load(self.duration_ms(next_phase))
        return Transition(previous=previous, next=next_phase, counted=counted, result=result)

    def skip(self) -> Transition:
        """End the current phase early. Focus skipped this way is never counted."""
        self.clock.stop()
        return self.complete(counted=False)

    def reset(self) -> None:
        """Re-arm the current phase with its full duration."""
        self.clock.load(self.duration_ms())

    def set_phase(self, phase: Phase) -> None:
        """Manual override: switch to ``phase`` and arm it idle."""
        if phase not in PHASES:
            raise ValueError(f"Unknown phase: {phase}")
        self.phase = phase
        self.clock.load(self.duration_ms(phase))

    def get_progress_dots(self) -> str:
        """Dots showing the position inside the current long-break cycle."""
        long_every = self.state.settings.long_every
        if long_every <= 0:
            return ""

        done = self.state.cycles_since_long
        dots = []
        for i in range(long_every):
            if i < done:
                dots.append("●")  # completed
            elif i == done and self.phase == "focus":
                dots.append("◉")  # current
            else:
                dots.append("○")  # upcoming
        return " ".join(dots)
