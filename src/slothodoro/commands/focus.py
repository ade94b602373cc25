"""Focus mode commands with the fullscreen timer."""

import typer

from slothodoro.models.focus.cycling import PHASE_LABELS, PHASES
from slothodoro.models.focus.ui import TimerDisplay, format_clock, show_completion_message
from slothodoro.utils.exit_codes import ERROR_INVALID_ARGS
from slothodoro.utils.ui.console import get_console

from .decorators import AppError, command_wrapper
from .utils import build_engine

console = get_console()
app = typer.Typer(help="Focus mode with the Pomodoro timer")


@app.command("start")
@command_wrapper
def start_focus(
    phase: str = typer.Option(
        "focus", "--phase", "-p", help="Phase to begin with: focus, break, long_break"
    ),
    now: bool = typer.Option(
        False, "--now", help="Start the countdown immediately instead of waiting for space"
    ),
):
    """Start the fullscreen focus timer."""
    if phase not in PHASES:
        raise AppError(
            f"Invalid phase '{phase}'. Must be one of: {', '.join(PHASES)}",
            exit_code=ERROR_INVALID_ARGS,
        )

    engine = build_engine(console)
    if phase != engine.phase:
        engine.set_phase(phase)

    sessions_before = engine.state.stats.focus_sessions
    display = TimerDisplay(engine, console)
    if now:
        engine.start()

    result = display.run()

    if engine.state.stats.focus_sessions > sessions_before and engine.state.last_result:
        show_completion_message(engine.state.last_result, console)
        link = engine.share_link()
        if link:
            console.print(f"[dim]Share: {link}[/dim]")

    if result == "interrupted":
        console.print("\n[yellow]Timer interrupted. Stats so far are saved.[/yellow]")
    else:
        console.print("[dim]See you next session. 🦥[/dim]")


@app.command("status")
@command_wrapper
def focus_status():
    """Show phase lengths, long-break cadence and the last result."""
    engine = build_engine()
    settings = engine.settings

    console.print("\n[bold cyan]Slothodoro[/bold cyan]\n")
    for phase in PHASES:
        duration = engine.machine.duration_ms(phase)
        console.print(f"  {PHASE_LABELS[phase]:<11} {format_clock(duration)}")

    if settings.long_every > 0:
        console.print(
            f"\nLong break after every {settings.long_every} focus sessions "
            f"({engine.state.cycles_since_long} done): {engine.machine.get_progress_dots()}"
        )
    else:
        console.print("\nLong breaks are off")

    console.print(f"Streak today: {engine.displayed_streak()}")

    result = engine.state.last_result
    if result is None:
        console.print("[dim]No completed focus sessions yet[/dim]")
    else:
        at = result.at.astimezone().strftime("%Y-%m-%d %H:%M")
        console.print(
            f"Last result: {result.focus_minutes} min focus at {at} "
            f"(session #{result.total_focus_sessions})"
        )
