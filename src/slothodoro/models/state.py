"""Persistent state aggregate: settings, stats, history, cadence and last result.

The persisted blob is reduced field by field onto the defaults, so partial or
hand-edited data always yields a usable state. Only a blob that is not JSON at
all is treated as corrupt.
"""

from __future__ import annotations

import json
from datetime import date, datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from slothodoro.exceptions import StorageCorrupt

from .settings import Settings

SCHEMA_VERSION = 1
HISTORY_LIMIT = 500


def date_key(day: date) -> str:
    """Format a calendar day as the ``YYYY-MM-DD`` key used for streaks."""
    return day.isoformat()


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _minutes_field(prefix: str):
    """Minutes field that also reads the web app's short ``focusMin``/``breakMin`` keys."""
    return Field(
        ge=0,
        validation_alias=AliasChoices(
            f"{prefix}Minutes", f"{prefix}Min", f"{prefix}_minutes"
        ),
        serialization_alias=f"{prefix}Minutes",
    )


class Stats(_CamelModel):
    """Cumulative focus counters and the same-day streak."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, validate_assignment=True
    )

    focus_sessions: int = Field(default=0, ge=0)
    focus_minutes: int = Field(default=0, ge=0)
    streak_date: str | None = Field(default=None, description="YYYY-MM-DD")
    streak_count: int = Field(default=0, ge=0)

    @classmethod
    def from_raw(cls, raw: Any) -> Stats:
        """Shallow-merge persisted stats over the defaults, one field at a time."""
        stats = cls()
        if not isinstance(raw, dict):
            return stats
        for name, field in cls.model_fields.items():
            value = raw.get(field.alias, raw.get(name))
            if value is None and name != "streak_date":
                continue
            try:
                setattr(stats, name, value)
            except ValidationError:
                continue
        return stats


class HistoryEntry(_CamelModel):
    """One completed focus session."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    at: datetime
    focus_minutes: int = _minutes_field("focus")


class SessionResult(_CamelModel):
    """Immutable snapshot taken when a focus session completes."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    at: datetime
    focus_minutes: int = _minutes_field("focus")
    break_minutes: int = _minutes_field("break")
    total_focus_sessions: int = Field(ge=0)
    streak_today: int = Field(ge=0)

    def to_record(self) -> dict[str, Any]:
        """JSON-safe dict with the persisted (camelCase) keys."""
        return self.model_dump(mode="json", by_alias=True)


class PersistentState(_CamelModel):
    """Everything the engine owns and mirrors to storage."""

    version: int = SCHEMA_VERSION
    settings: Settings = Field(default_factory=Settings)
    stats: Stats = Field(default_factory=Stats)
    history: list[HistoryEntry] = Field(default_factory=list)
    cycles_since_long: int = Field(default=0, ge=0)
    last_result: SessionResult | None = None

    @classmethod
    def from_raw(cls, raw: Any) -> PersistentState:
        """Default-filling reducer for a decoded (but untrusted) blob."""
        if not isinstance(raw, dict):
            return cls()

        history = []
        raw_history = raw.get("history")
        if isinstance(raw_history, list):
            for item in raw_history:
                try:
                    history.append(HistoryEntry.model_validate(item))
                except ValidationError:
                    continue
        history = history[-HISTORY_LIMIT:]

        cycles = raw.get("cyclesSinceLong", raw.get("cycles_since_long", 0))
        if isinstance(cycles, bool) or not isinstance(cycles, int) or cycles < 0:
            cycles = 0

        last_result = None
        raw_result = raw.get("lastResult", raw.get("last_result"))
        if raw_result is not None:
            try:
                last_result = SessionResult.model_validate(raw_result)
            except ValidationError:
                last_result = None

        return cls(
            version=SCHEMA_VERSION,
            settings=Settings.from_raw(raw.get("settings")),
            stats=Stats.from_raw(raw.get("stats")),
            history=history,
            cycles_since_long=cycles,
            last_result=last_result,
        )

    @classmethod
    def from_json(cls, blob: str) -> PersistentState:
        """Parse a stored blob.

        Raises:
            StorageCorrupt: If the blob is not valid JSON.
        """
        try:
            raw = json.loads(blob)
        except (json.JSONDecodeError, TypeError) as e:
            raise StorageCorrupt(f"Unparseable state blob: {e}") from e
        return cls.from_raw(raw)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)
