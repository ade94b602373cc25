"""Main entry point for Slothodoro."""

import typer
from rich.console import Console

from slothodoro import __version__
from slothodoro.commands import config, data, focus, share, stats
from slothodoro.commands.focus import start_focus
from slothodoro.utils.typer_helpers import SuggestingGroup

app = typer.Typer(
    name="slothodoro",
    cls=SuggestingGroup,
    help="Calm, sloth-paced Pomodoro timer. No accounts, local-only stats.",
    no_args_is_help=True,
)

console = Console()


# Add subcommands
app.add_typer(focus.app, name="focus", help="Focus timer")
app.add_typer(stats.app, name="stats", help="Focus statistics and history")
app.add_typer(config.app, name="config", help="Timer settings")
app.add_typer(share.app, name="share", help="Share your last result")
app.add_typer(data.app, name="data", help="Local data management")


# Top-level shortcut for the most common command
app.command("start", help="Start the fullscreen focus timer.")(start_focus)


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]Slothodoro[/bold] version [cyan]{__version__}[/cyan]")


# Main entry point
def main():
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
