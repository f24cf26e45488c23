"""Shared data types for focus sessions and the daily log."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

# Fixed interval lengths
FOCUS_DURATION_SECONDS = 25 * 60
BREAK_DURATION_SECONDS = 5 * 60
FOCUS_SESSION_MINUTES = FOCUS_DURATION_SECONDS // 60


def _normalize(text: str) -> str:
    return text.strip().lower().replace("-", "_").replace(" ", "_")


class _LabelEnum(str, Enum):
    """Enum whose value is the exact label written to the day file."""

    @classmethod
    def parse(cls, text: str):
        """Look up a member by label or by name, ignoring case.

        Accepts "Deep Work", "deep work", "deep-work" and "DEEP_WORK" alike.
        """
        wanted = _normalize(text)
        for member in cls:
            if _normalize(member.value) == wanted or member.name.lower() == wanted:
                return member
        choices = ", ".join(m.value for m in cls)
        raise ValueError(f"Unknown {cls.__name__.lower()} {text!r} (choose from: {choices})")

    def __str__(self) -> str:
        return self.value


class Category(_LabelEnum):
    """Kind of work done during a focus session."""
    DEEP_WORK = "Deep Work"
    DESIGN_REVIEW = "Design Review"
    MEETINGS = "Meetings"
    PLANNING = "Planning"
    LEARNING = "Learning"


class Project(_LabelEnum):
    """Project a focus session is attributed to."""
    SNOWFLAKE = "Snowflake"
    PORTFOLIO = "Portfolio"
    PERSONAL = "Personal"


class TimerPhase(Enum):
    """Current phase of the session timer."""
    IDLE = "idle"
    FOCUSING = "focusing"
    ON_BREAK = "on_break"


@dataclass(frozen=True)
class CompletedSession:
    """A focus interval that ran to zero. Written once to the day file."""
    start_time: datetime
    end_time: datetime
    category: Category
    project: Project
    duration_minutes: int = FOCUS_SESSION_MINUTES


@dataclass(frozen=True)
class LogEntry:
    """One data row parsed back out of a day file."""
    time: str
    duration_minutes: int
    category: str
    project: str


@dataclass(frozen=True)
class TodayStats:
    """Session count and total minutes for one day, derived from its file."""
    count: int = 0
    total_minutes: int = 0

    @property
    def formatted_total(self) -> str:
        return format_minutes(self.total_minutes)


def format_minutes(total_minutes: int) -> str:
    """Format minutes as "H hr M min", or "M min" when under an hour."""
    hours, minutes = divmod(total_minutes, 60)
    if hours > 0:
        return f"{hours} hr {minutes} min"
    return f"{minutes} min"
