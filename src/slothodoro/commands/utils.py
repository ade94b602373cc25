"""Shared helpers for command modules."""

from rich.console import Console

from slothodoro.services.callouts import AudioCue, DesktopNotifier, WakeLock
from slothodoro.services.engine import TimerEngine
from slothodoro.services.storage_service import StateRepository


def get_repository() -> StateRepository:
    """Repository backed by the default on-disk store."""
    return StateRepository()


def build_engine(console: Console | None = None) -> TimerEngine:
    """
    Create a TimerEngine over the default repository.

    When a console is given the engine is wired for an interactive run:
    audio cues go to that console, and desktop notifications and the
    wake-lock are enabled (each still gated by the user's settings).
    """
    observers = []
    if console is not None:
        observers = [AudioCue(console), DesktopNotifier(), WakeLock()]
    return TimerEngine(repository=get_repository(), observers=observers)
