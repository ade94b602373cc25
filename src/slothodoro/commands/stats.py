"""Statistics commands for focus sessions."""

import typer
from rich.table import Table

from slothodoro.utils.ui.console import get_console
from slothodoro.utils.ui.formatters import format_output

from .decorators import command_wrapper
from .utils import build_engine

console = get_console()
app = typer.Typer(help="Focus statistics and history")


def format_duration(minutes: float) -> str:
    """Format minutes as hours and minutes."""
    hours = int(minutes // 60)
    mins = int(minutes % 60)
    if hours > 0:
        return f"{hours}h {mins}m"
    return f"{mins}m"


def render_hour_chart(bins: list[int], current_hour: int | None = None) -> str:
    """One block character per hour, scaled to the busiest hour (at least 10 min)."""
    blocks = " ▁▂▃▄▅▆▇█"
    peak = max(10, *bins)
    chars = []
    for hour, minutes in enumerate(bins):
        if minutes <= 0:
            char = "·"
        else:
            char = blocks[max(1, round(minutes / peak * (len(blocks) - 1)))]
        if hour == current_hour:
            char = f"[bold green]{char}[/bold green]"
        chars.append(char)
    return "".join(chars)


@app.command("show")
@command_wrapper
def show_stats(
    output: str = typer.Option("pretty", "--output", "-o", help="Output format: pretty, json, yaml"),
):
    """Show all-time totals and today's streak."""
    engine = build_engine()
    stats = engine.state.stats
    data = {
        "focus_sessions": stats.focus_sessions,
        "focus_minutes": stats.focus_minutes,
        "focus_time": format_duration(stats.focus_minutes),
        "streak_today": engine.displayed_streak(),
        "cycles_since_long_break": engine.state.cycles_since_long,
    }
    if output == "pretty":
        console.print("\n[bold cyan]🦥 Focus Stats[/bold cyan]\n")
    format_output(data, output)


@app.command("today")
@command_wrapper
def show_today(
    output: str = typer.Option("pretty", "--output", "-o", help="Output format: pretty, json, yaml"),
):
    """Show today's focus summary."""
    engine = build_engine()
    summary = engine.today_summary()

    if output in ("json", "yaml"):
        format_output(
            {
                "date": summary.day,
                "sessions": summary.sessions,
                "minutes": summary.minutes,
                "hourly_minutes": summary.hourly_minutes,
                "recent": [
                    {"at": entry.at.isoformat(), "focus_minutes": entry.focus_minutes}
                    for entry in summary.recent
                ],
            },
            output,
        )
        return

    console.print(f"\n[bold cyan]🦥 Today - {summary.day}[/bold cyan]\n")
    console.print(f"Sessions: [bold]{summary.sessions}[/bold]")
    console.print(f"Focus time: [bold]{format_duration(summary.minutes)}[/bold]")
    console.print(f"Streak: [bold]{engine.displayed_streak()}[/bold]")
    console.print()
    console.print(render_hour_chart(summary.hourly_minutes, engine.now().hour))
    console.print("[dim]0h" + " " * 20 + "23h[/dim]\n")

    if not summary.recent:
        console.print("[dim]No sessions yet today. Slow and steady.[/dim]")
        return

    for entry in summary.recent:
        at = entry.at.astimezone().strftime("%H:%M")
        console.print(f"  {at}  {entry.focus_minutes} min focus")


@app.command("history")
@command_wrapper
def show_history(
    limit: int = typer.Option(20, "--limit", "-n", help="Number of sessions to show"),
):
    """Show recent completed focus sessions, newest first."""
    engine = build_engine()
    entries = list(reversed(engine.state.history))[: max(0, limit)]

    if not entries:
        console.print("[yellow]No focus sessions recorded yet[/yellow]")
        return

    table = Table(title=f"Recent Focus Sessions ({len(entries)})", show_header=True)
    table.add_column("Date", style="cyan")
    table.add_column("Focus", justify="right")
    for entry in entries:
        table.add_row(
            entry.at.astimezone().strftime("%Y-%m-%d %H:%M"),
            f"{entry.focus_minutes}m",
        )
    console.print(table)
