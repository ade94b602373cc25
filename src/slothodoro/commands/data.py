"""Local data management."""

import typer
from rich.prompt import Confirm

from slothodoro.utils.ui.console import get_console
from slothodoro.utils.ui.formatters import format_success

from .decorators import command_wrapper
from .utils import build_engine

console = get_console()
app = typer.Typer(help="Local data management")


@app.command("clear")
@command_wrapper
def clear_data(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation prompt"),
):
    """Clear local stats and settings on this device."""
    if not yes and not Confirm.ask("Clear local stats and settings on this device?", default=False):
        console.print("[dim]Nothing changed[/dim]")
        return

    engine = build_engine()
    engine.clear()
    format_success("Local stats cleared.")
