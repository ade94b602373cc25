"""Full-screen timer UI and result panels."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.align import Align
from rich.console import Console, Group
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.text import Text

from .cycling import PHASE_HINTS, PHASE_LABELS

if TYPE_CHECKING:
    from slothodoro.models.state import SessionResult
    from slothodoro.services.callouts import EngineEvent
    from slothodoro.services.engine import CardSnapshot, TimerEngine

PHASE_EMOJI = {
    "focus": "🦥",
    "break": "🍃",
    "long_break": "🌴",
}

NUDGE_KEYS = {"+": 1, "=": 1, "-": -1, "_": -1}


def format_clock(ms: int) -> str:
    """``MM:SS`` for a millisecond duration, floored to whole seconds."""
    seconds = max(0, ms // 1000)
    return f"{seconds // 60:02d}:{seconds % 60:02d}"


class TimerDisplay:
    """Manages the fullscreen timer display for a TimerEngine."""

    def __init__(self, engine: TimerEngine, console: Console | None = None):
        self.engine = engine
        self.console = console or Console()
        self.hint = "Press space to start. Slow and steady."
        self.show_card = False
        self._done = False
        self._result = "quit"

    def on_event(self, event: EngineEvent) -> None:
        """Observer hook: keep the hint line in step with the engine."""
        if event.kind == "phase_complete" and event.transition is not None:
            self.hint = PHASE_HINTS[event.transition.next]
        elif event.kind == "cleared":
            self.hint = "Local stats cleared."

    def create_layout(self) -> Layout:
        """Create the timer layout with all components."""
        layout = Layout()
        layout.split_column(
            Layout(name="header", size=3),
            Layout(name="body"),
            Layout(name="footer", size=3),
        )

        engine = self.engine
        label = PHASE_LABELS[engine.phase]
        if engine.running:
            title, color = label, "cyan" if engine.phase == "focus" else "green"
        else:
            title, color = f"{label} · paused", "yellow"

        header_text = Text(
            f"{PHASE_EMOJI[engine.phase]}  {title}", style=f"bold {color}", justify="center"
        )
        layout["header"].update(Align.center(header_text, vertical="middle"))

        if self.show_card:
            body = create_share_card(engine.card_snapshot(), engine.share_link())
        else:
            body = self._create_body_content()
        layout["body"].update(Align.center(body, vertical="middle"))

        layout["footer"].update(Align.center(self._create_footer_text(), vertical="middle"))
        return layout

    def _create_body_content(self) -> Group:
        engine = self.engine
        components = []

        remaining = engine.sample()
        if not engine.running:
            timer_color = "yellow"
        elif remaining < 60_000:
            timer_color = "red"
        else:
            timer_color = "cyan"

        components.append(
            Text(format_clock(remaining), style=f"bold {timer_color}", justify="center")
        )
        components.append(Text(""))

        total = engine.machine.duration_ms()
        progress_pct = min(100, int((total - remaining) * 100 / total)) if total > 0 else 0
        bar_width = 40
        filled = int(bar_width * progress_pct / 100)
        progress_text = Text(justify="center")
        progress_text.append("▓" * filled + "░" * (bar_width - filled), style="dim")
        progress_text.append(f"  {progress_pct}%", style="dim")
        components.append(progress_text)

        dots = engine.machine.get_progress_dots()
        if dots:
            components.append(Text(dots, style="dim", justify="center"))

        components.append(Text(""))
        components.append(Text(self.hint, style="italic", justify="center"))

        today = engine.today_summary()
        components.append(
            Text(
                f"Today: {today.sessions} sessions · {today.minutes} min · "
                f"streak {engine.displayed_streak()}",
                style="dim",
                justify="center",
            )
        )
        return Group(*components)

    def _create_footer_text(self) -> Text:
        if self.show_card:
            hints = "Press any key to close the card"
        elif self.engine.running:
            hints = "space pause  •  r reset  •  s skip  •  +/- 1 min  •  e share  •  q quit"
        else:
            hints = "space start  •  r reset  •  s skip  •  +/- 1 min  •  e share  •  q quit"
        return Text(hints, style="dim", justify="center")

    def handle_key(self, key: str | None) -> None:
        """Apply one keypress to the engine."""
        if key is None:
            return
        if self.show_card:
            self.show_card = False
            return

        engine = self.engine
        if key in (" ", "p"):
            engine.toggle()
        elif key == "r":
            engine.reset()
        elif key == "s":
            engine.skip()
        elif key in NUDGE_KEYS:
            engine.nudge(NUDGE_KEYS[key])
        elif key == "e":
            self.show_card = True
        elif key == "q":
            self._done = True

    def run(self, keyboard=None) -> str:
        """
        Run the fullscreen timer until the user quits.

        Returns 'quit' or 'interrupted'.
        """
        if keyboard is None:
            from .keyboard import KeyboardHandler

            keyboard = KeyboardHandler()

        engine = self.engine
        engine.observers.append(self.on_event)

        try:
            with Live(
                self.create_layout(),
                console=self.console,
                refresh_per_second=4,
                screen=True,
            ) as live:

                def frame() -> None:
                    self.handle_key(keyboard.get_key())
                    live.update(self.create_layout())
                    if not self._done:
                        engine.scheduler.schedule_next(frame, engine.tick_interval)

                engine.scheduler.schedule_next(frame, 0)
                engine.scheduler.run(until=lambda: self._done)
        except KeyboardInterrupt:
            self._result = "interrupted"
        finally:
            keyboard.stop()
            engine.observers.remove(self.on_event)
            engine.close()

        return self._result


def create_share_card(snapshot: CardSnapshot, link: str | None = None) -> Panel:
    """Text rendition of the share card."""
    focus_minutes = (
        snapshot.last_result.focus_minutes
        if snapshot.last_result is not None
        else snapshot.settings.focus_minutes
    )
    lines = [
        "[bold]Slothodoro[/bold]",
        "[dim]calm focus, sloth pace[/dim]",
        "",
        f"[bold white]{focus_minutes} min[/bold white]  🦥",
        "",
        f"Focus sessions (all time): {snapshot.stats.focus_sessions}",
        f"Streak today: {snapshot.streak_today}",
    ]
    if link:
        lines += ["", f"[dim]{link}[/dim]"]
    return Panel("\n".join(lines), border_style="cyan", padding=(1, 2))


def show_share_card(
    snapshot: CardSnapshot, link: str | None = None, console: Console | None = None
):
    console = console or Console()
    console.print(create_share_card(snapshot, link))


def show_completion_message(result: SessionResult, console: Console | None = None):
    """Show a message after a focus session completes."""
    console = console or Console()

    panel = Panel(
        f"""[bold green]🦥 Focus Session Complete![/bold green]

Focus: {result.focus_minutes} minutes
Next break: {result.break_minutes} minutes
Sessions (all time): {result.total_focus_sessions}
Streak today: {result.streak_today}""",
        border_style="green",
        padding=(1, 2),
    )

    console.print(panel)
