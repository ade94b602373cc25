"""Slothodoro domain models.

Pydantic models for everything that is persisted: settings, stats, session
history and the last shareable result.
"""

from .settings import PRESETS, Settings
from .state import (
    HISTORY_LIMIT,
    SCHEMA_VERSION,
    HistoryEntry,
    PersistentState,
    SessionResult,
    Stats,
)

__all__ = [
    "PRESETS",
    "Settings",
    "HISTORY_LIMIT",
    "SCHEMA_VERSION",
    "HistoryEntry",
    "PersistentState",
    "SessionResult",
    "Stats",
]
