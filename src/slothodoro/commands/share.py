"""Share commands: links, the text card, and loading a shared result."""

import typer

from slothodoro.models.focus.ui import show_share_card
from slothodoro.utils.exit_codes import ERROR_DECODE, ERROR_NOT_FOUND
from slothodoro.utils.ui.console import get_console
from slothodoro.utils.ui.formatters import format_success

from .decorators import AppError, command_wrapper
from .utils import build_engine

console = get_console()
app = typer.Typer(help="Share your last result")


@app.command("link")
@command_wrapper
def share_link():
    """Print a share link for the last completed focus session."""
    engine = build_engine()
    link = engine.share_link()
    if link is None:
        raise AppError(
            "No result to share yet. Finish a focus session first.",
            exit_code=ERROR_NOT_FOUND,
        )
    print(link)


@app.command("card")
@command_wrapper
def share_card():
    """Show the share card for the last result."""
    engine = build_engine()
    show_share_card(engine.card_snapshot(), engine.share_link(), console)


@app.command("load")
@command_wrapper
def load_result(
    link: str = typer.Argument(..., help="Share URL, '#r=...' fragment or bare token"),
):
    """Load a shared result as the last result."""
    engine = build_engine()
    result = engine.load_shared_result(link)
    if result is None:
        raise AppError("That share link could not be read.", exit_code=ERROR_DECODE)
    format_success(
        f"Loaded result: {result.focus_minutes} min focus, "
        f"{result.total_focus_sessions} sessions, streak {result.streak_today}"
    )
