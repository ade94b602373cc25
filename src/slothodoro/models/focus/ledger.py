"""Focus session accounting: counters, same-day streak and bounded history."""

from dataclasses import dataclass, field
from datetime import date, datetime

from slothodoro.models.state import (
    HISTORY_LIMIT,
    HistoryEntry,
    PersistentState,
    SessionResult,
    Stats,
    date_key,
)


@dataclass(frozen=True)
class TodaySummary:
    """Focus sessions completed on one calendar day."""

    day: str
    sessions: int
    minutes: int
    recent: list[HistoryEntry] = field(default_factory=list)  # newest first
    hourly_minutes: list[int] = field(default_factory=lambda: [0] * 24)


def local_day(at: datetime) -> date:
    """Device-local calendar day of ``at`` (naive values are taken as local)."""
    return at.astimezone().date()


class StatsLedger:
    """Records counted focus completions into a PersistentState."""

    def __init__(self, history_limit: int = HISTORY_LIMIT):
        self.history_limit = history_limit

    def record_focus(
        self, state: PersistentState, at: datetime | None = None
    ) -> SessionResult:
        """
        Account for one counted focus completion.

        Args:
            state: The aggregate to update in place
            at: Completion time, defaults to now

        Returns:
            The SessionResult snapshot, also stored as ``state.last_result``
        """
        at = at or datetime.now().astimezone()
        settings = state.settings
        minutes = settings.focus_minutes

        stats = state.stats
        stats.focus_sessions += 1
        stats.focus_minutes += minutes
        self.bump_streak(stats, local_day(at))

        state.history.append(HistoryEntry(at=at, focus_minutes=minutes))
        if len(state.history) > self.history_limit:
            del state.history[: len(state.history) - self.history_limit]

        result = SessionResult(
            at=at,
            focus_minutes=minutes,
            break_minutes=settings.break_minutes,
            total_focus_sessions=stats.focus_sessions,
            streak_today=stats.streak_count,
        )
        state.last_result = result
        return result

    @staticmethod
    def bump_streak(stats: Stats, today: date) -> None:
        """Each calendar day starts its own count; any other day resets it."""
        key = date_key(today)
        if stats.streak_date != key:
            stats.streak_date = key
            stats.streak_count = 0
        stats.streak_count += 1

    @staticmethod
    def displayed_streak(stats: Stats, today: date) -> int:
        """Streak as shown to the user: zero unless it belongs to today."""
        if stats.streak_date == date_key(today):
            return stats.streak_count
        return 0

    @staticmethod
    def hourly_minutes(entries: list[HistoryEntry]) -> list[int]:
        """Bucket focus minutes by local hour of completion."""
        bins = [0] * 24
        for entry in entries:
            bins[entry.at.astimezone().hour] += max(0, entry.focus_minutes)
        return bins

    def today_summary(
        self, history: list[HistoryEntry], today: date, limit: int = 10
    ) -> TodaySummary:
        """Summarise the sessions completed on ``today``."""
        todays = [entry for entry in history if local_day(entry.at) == today]
        return TodaySummary(
            day=date_key(today),
            sessions=len(todays),
            minutes=sum(max(0, entry.focus_minutes) for entry in todays),
            recent=list(reversed(todays))[:limit],
            hourly_minutes=self.hourly_minutes(todays),
        )
