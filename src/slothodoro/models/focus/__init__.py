"""Focus mode - timer engine building blocks."""

from .clock import Clock, ClockState
from .cycling import PHASE_LABELS, Phase, PhaseStateMachine, Transition
from .ledger import StatsLedger, TodaySummary
from .ui import TimerDisplay, show_completion_message, show_share_card

__all__ = [
    "Clock",
    "ClockState",
    "Phase",
    "PHASE_LABELS",
    "PhaseStateMachine",
    "Transition",
    "StatsLedger",
    "TodaySummary",
    "TimerDisplay",
    "show_completion_message",
    "show_share_card",
]
