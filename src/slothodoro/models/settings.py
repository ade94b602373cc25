"""Timer settings model.

Every numeric setting has a fixed range. Values outside the range are clamped
rather than rejected, both when a model is built from persisted data and when a
field is assigned later on.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# field name -> (minimum, maximum)
SETTING_RANGES: dict[str, tuple[int, int]] = {
    "focus_minutes": (1, 180),
    "break_minutes": (1, 60),
    "long_break_minutes": (5, 90),
    "long_every": (0, 12),
    "tick_volume": (0, 100),
}

PRESETS: dict[str, dict[str, Any]] = {
    "classic": {
        "focus_minutes": 25,
        "break_minutes": 5,
        "long_every": 4,
        "long_break_minutes": 15,
        "description": "Classic Pomodoro",
    },
    "deep": {
        "focus_minutes": 50,
        "break_minutes": 10,
        "long_every": 2,
        "long_break_minutes": 20,
        "description": "Long stretches of deep work",
    },
    "gentle": {
        "focus_minutes": 15,
        "break_minutes": 5,
        "long_every": 0,
        "long_break_minutes": 15,
        "description": "Short sessions, no long breaks",
    },
}


def clamp(value: int, low: int, high: int) -> int:
    """Clamp ``value`` into ``[low, high]``."""
    return min(high, max(low, value))


def _coerce_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return round(value)
    if isinstance(value, str):
        try:
            return round(float(value.strip()))
        except ValueError:
            return None
    return None


def _coerce_bool(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("1", "true", "yes", "on"):
            return True
        if lowered in ("0", "false", "no", "off"):
            return False
    return None


class Settings(BaseModel):
    """User-adjustable timer settings."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
    )

    focus_minutes: int = Field(default=25, description="Focus phase length")
    break_minutes: int = Field(default=5, description="Short break length")
    long_break_minutes: int = Field(default=15, description="Long break length")
    long_every: int = Field(
        default=4, description="Focus sessions per long break (0 disables)"
    )
    sound_enabled: bool = Field(default=True, description="Chime on completion")
    tick_enabled: bool = Field(default=False, description="Soft tick during focus")
    tick_volume: int = Field(default=12, description="Tick volume, 0-100")
    slow_mode: bool = Field(default=False, description="Coarser redraw cadence")
    notify: bool = Field(default=False, description="Desktop notifications")
    keep_awake: bool = Field(default=False, description="Inhibit sleep while running")
    auto_start: bool = Field(default=False, description="Auto-continue phases")

    @field_validator(
        "focus_minutes",
        "break_minutes",
        "long_break_minutes",
        "long_every",
        "tick_volume",
        mode="before",
    )
    @classmethod
    def clamp_numeric(cls, value: Any, info) -> int:
        """Clamp numeric settings into their range; garbage becomes the default."""
        low, high = SETTING_RANGES[info.field_name]
        number = _coerce_int(value)
        if number is None:
            number = cls.model_fields[info.field_name].default
        return clamp(number, low, high)

    @field_validator(
        "sound_enabled",
        "tick_enabled",
        "slow_mode",
        "notify",
        "keep_awake",
        "auto_start",
        mode="before",
    )
    @classmethod
    def coerce_flag(cls, value: Any, info) -> bool:
        """Accept loose boolean spellings; anything else becomes the default."""
        flag = _coerce_bool(value)
        if flag is None:
            return cls.model_fields[info.field_name].default
        return flag

    @classmethod
    def from_raw(cls, raw: Any) -> Settings:
        """Shallow-merge a persisted settings object over the defaults."""
        if not isinstance(raw, dict):
            return cls()
        known = {}
        for name, field in cls.model_fields.items():
            if field.alias in raw:
                known[name] = raw[field.alias]
            elif name in raw:
                known[name] = raw[name]
        return cls(**known)

    def apply_preset(self, name: str) -> None:
        """Overwrite the duration settings with a named preset."""
        preset = PRESETS.get(name)
        if preset is None:
            raise KeyError(name)
        for key, value in preset.items():
            if key in type(self).model_fields:
                setattr(self, key, value)

    def focus_ms(self) -> int:
        return self.focus_minutes * 60_000

    def break_ms(self) -> int:
        return self.break_minutes * 60_000

    def long_break_ms(self) -> int:
        return self.long_break_minutes * 60_000
