"""Best-effort side channels fired after engine transitions.

Observers receive an :class:`EngineEvent` once the engine has committed (and
persisted) the change. They are fire-and-forget: :func:`dispatch` isolates each
one, so a failing observer is logged and skipped while the rest still run.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Literal

from rich.console import Console

from slothodoro.models.focus.cycling import PHASE_HINTS, Phase, Transition
from slothodoro.models.settings import Settings

EventKind = Literal[
    "started",
    "paused",
    "reset",
    "tick",
    "phase_complete",
    "phase_changed",
    "settings_changed",
    "cleared",
    "closed",
]


@dataclass(frozen=True)
class EngineEvent:
    """Something that just happened to the engine."""

    kind: EventKind
    phase: Phase
    settings: Settings
    running: bool = False
    remaining_ms: int = 0
    transition: Transition | None = None


Observer = Callable[[EngineEvent], None]


def dispatch(observers: Iterable[Observer], event: EngineEvent, logger: logging.Logger) -> None:
    """Call every observer; failures are logged and never propagate."""
    for observer in observers:
        try:
            observer(event)
        except Exception:
            logger.warning(
                "observer %r failed on %s", observer, event.kind, exc_info=True
            )


def notification_text(transition: Transition) -> tuple[str, str]:
    """Title and body announcing the end of ``transition.previous``."""
    if transition.previous == "focus":
        return "Slothodoro: Focus finished", PHASE_HINTS[transition.next]
    return "Slothodoro: Break finished", PHASE_HINTS["focus"]


class AudioCue:
    """Terminal bell as completion chime and optional per-second focus tick."""

    def __init__(self, console: Console):
        self.console = console

    def __call__(self, event: EngineEvent) -> None:
        settings = event.settings
        if event.kind == "phase_complete" and settings.sound_enabled:
            self.console.bell()
        elif (
            event.kind == "tick"
            and event.phase == "focus"
            and settings.tick_enabled
            and settings.tick_volume > 0
        ):
            self.console.bell()


class DesktopNotifier:
    """Desktop notification when a phase ends while the terminal is not in front.

    Args:
        is_foreground: Reports whether the user is looking at the timer
        runner: Launches the notifier command (``subprocess.Popen`` by default)
    """

    def __init__(
        self,
        is_foreground: Callable[[], bool] = lambda: False,
        runner: Callable[..., object] = subprocess.Popen,
    ):
        self.is_foreground = is_foreground
        self.runner = runner

    @staticmethod
    def command(title: str, body: str) -> list[str] | None:
        """Platform notifier command, or None when no backend is installed."""
        if shutil.which("notify-send"):
            return ["notify-send", title, body]
        if shutil.which("osascript"):
            script = f'display notification "{body}" with title "{title}"'
            return ["osascript", "-e", script]
        return None

    def available(self) -> bool:
        return self.command("", "") is not None

    def __call__(self, event: EngineEvent) -> None:
        transition = event.transition
        if event.kind != "phase_complete" or transition is None:
            return
        # a skipped focus phase is not worth a notification
        if transition.previous == "focus" and not transition.counted:
            return
        if not event.settings.notify or self.is_foreground():
            return

        title, body = notification_text(transition)
        cmd = self.command(title, body)
        if cmd is None:
            return
        self.runner(cmd, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)


class WakeLock:
    """Keeps the machine awake while the clock runs, via an inhibitor child process."""

    RELEASE_ON = ("paused", "reset", "phase_complete", "phase_changed", "cleared", "closed")

    def __init__(self, runner: Callable[..., subprocess.Popen] = subprocess.Popen):
        self.runner = runner
        self.process: subprocess.Popen | None = None

    @staticmethod
    def command() -> list[str] | None:
        if shutil.which("systemd-inhibit"):
            return [
                "systemd-inhibit",
                "--what=idle:sleep",
                "--who=slothodoro",
                "--why=Focus timer running",
                "sleep",
                "infinity",
            ]
        if shutil.which("caffeinate"):
            return ["caffeinate", "-di"]
        return None

    @property
    def held(self) -> bool:
        return self.process is not None

    def acquire(self) -> None:
        if self.process is not None:
            return
        cmd = self.command()
        if cmd is None:
            return
        self.process = self.runner(
            cmd, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL
        )

    def release(self) -> None:
        process, self.process = self.process, None
        if process is None:
            return
        process.terminate()
        try:
            process.wait(timeout=1)
        except subprocess.TimeoutExpired:
            process.kill()
            process.wait()

    def __call__(self, event: EngineEvent) -> None:
        if event.kind == "started" and event.settings.keep_awake:
            self.acquire()
        elif event.kind == "settings_changed" and event.running:
            if event.settings.keep_awake:
                self.acquire()
            else:
                self.release()
        elif event.kind in self.RELEASE_ON:
            self.release()
