"""Settings commands."""

import typer

from slothodoro.models.settings import PRESETS, SETTING_RANGES, Settings
from slothodoro.utils.exit_codes import ERROR_INVALID_ARGS
from slothodoro.utils.ui.console import get_console
from slothodoro.utils.ui.formatters import format_output, format_success

from .decorators import AppError, command_wrapper
from .utils import build_engine

console = get_console()
app = typer.Typer(help="Timer settings")


def resolve_setting_name(key: str) -> str:
    """Accept snake_case, kebab-case or the persisted camelCase name."""
    normalized = key.strip().replace("-", "_")
    for name, field in Settings.model_fields.items():
        if normalized == name or key.strip() == field.alias:
            return name
    raise AppError(
        f"Unknown setting '{key}'. Known settings: {', '.join(Settings.model_fields)}",
        exit_code=ERROR_INVALID_ARGS,
    )


@app.command("show")
@command_wrapper
def show_config(
    output: str = typer.Option("pretty", "--output", "-o", help="Output format: pretty, json, yaml"),
):
    """Show current settings."""
    engine = build_engine()
    format_output(engine.settings.model_dump(), output)


@app.command("set")
@command_wrapper
def set_config(
    key: str = typer.Argument(..., help="Setting name, e.g. focus_minutes"),
    value: str = typer.Argument(..., help="New value (clamped to the allowed range)"),
):
    """Change one setting."""
    name = resolve_setting_name(key)
    engine = build_engine()
    settings = engine.update_settings(**{name: value})

    new_value = getattr(settings, name)
    if name in SETTING_RANGES:
        low, high = SETTING_RANGES[name]
        format_success(f"{name} = {new_value} (allowed {low}-{high})")
    else:
        format_success(f"{name} = {new_value}")


@app.command("preset")
@command_wrapper
def apply_preset(
    name: str = typer.Argument(..., help="Preset name: classic, deep, gentle"),
):
    """Apply a preset for the phase lengths."""
    if name not in PRESETS:
        raise AppError(
            f"Unknown preset '{name}'. Available: {', '.join(PRESETS)}",
            exit_code=ERROR_INVALID_ARGS,
        )
    engine = build_engine()
    engine.apply_preset(name)
    format_success(f"Preset applied: {name} ({PRESETS[name]['description']})")


@app.command("presets")
def list_presets():
    """List available presets."""
    console.print("\n[bold]Presets:[/bold]\n")
    for name, preset in PRESETS.items():
        long_every = preset["long_every"]
        cadence = f"long break every {long_every}" if long_every else "no long breaks"
        console.print(
            f"  [cyan]{name:<8}[/cyan] {preset['focus_minutes']}/{preset['break_minutes']} min, "
            f"{cadence} ({preset['long_break_minutes']} min) - {preset['description']}"
        )
    console.print()
