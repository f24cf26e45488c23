"""Per-day markdown focus log with a self-recomputing summary row.

Each calendar day gets one file, ``<log_dir>/YYYY-MM-DD.md``:

    # Focus Log — Monday, October 19, 2026

    | Time | Duration | Category | Project |
    |------|----------|----------|---------|
    | 09:00 | 25 min | Deep Work | Snowflake |
    | 09:30 | 25 min | Planning | Personal |

    ---

    | **Total Focus Time** | **50 min** | | |

The file is the only store. Counts and totals are always re-derived by scanning
its rows, and the summary row is rewritten from that scan after every append.
"""

from __future__ import annotations

import logging
import os
import re
import tempfile
from datetime import date, datetime
from pathlib import Path
from typing import Callable, Iterable

from focus_logger.core.models import CompletedSession, LogEntry, TodayStats, format_minutes

logger = logging.getLogger(__name__)

TITLE_PREFIX = "# Focus Log — "
TABLE_HEADER = "| Time | Duration | Category | Project |"
TABLE_SEPARATOR = "|------|----------|----------|---------|"
SECTION_SEPARATOR = "---"
SUMMARY_LABEL = "**Total Focus Time**"

_DURATION_SUFFIX = " min"
_DIGITS = re.compile(r"[0-9]+")

# Markdown rows that are never data rows
_NON_DATA_PREFIXES = ("| Time", "|---", "| **Total")


def format_header(day: date) -> str:
    """Title line, e.g. "# Focus Log — Monday, October 19, 2026"."""
    return f"{TITLE_PREFIX}{day:%A}, {day:%B} {day.day}, {day.year}"


def format_row(session: CompletedSession) -> str:
    """Table row for a completed session, stamped with its start time."""
    return (
        f"| {session.start_time:%H:%M} | {session.duration_minutes}{_DURATION_SUFFIX} "
        f"| {session.category.value} | {session.project.value} |"
    )


def format_total(total_minutes: int) -> str:
    return format_minutes(total_minutes)


def format_summary_row(total_minutes: int) -> str:
    return f"| {SUMMARY_LABEL} | **{format_total(total_minutes)}** | | |"


def parse_row(line: str) -> LogEntry | None:
    """Parse a data row written by ``format_row``.

    Returns None for anything that is not a data row: prose, the table header,
    the separator, the summary row, and rows that do not split into four
    non-empty cells with an integer minute count.
    """
    trimmed = line.strip()
    if not trimmed.startswith("|") or trimmed.startswith(_NON_DATA_PREFIXES):
        return None

    columns = [cell.strip() for cell in trimmed.split("|")]
    columns = [cell for cell in columns if cell]
    if len(columns) != 4:
        return None

    duration = columns[1].replace(_DURATION_SUFFIX, "")
    if not _DIGITS.fullmatch(duration):
        return None

    return LogEntry(
        time=columns[0],
        duration_minutes=int(duration),
        category=columns[2],
        project=columns[3],
    )


def parse_entries(lines: Iterable[str]) -> list[LogEntry]:
    entries = []
    for line in lines:
        entry = parse_row(line)
        if entry is not None:
            entries.append(entry)
    return entries


def stats_from_content(content: str) -> TodayStats:
    entries = parse_entries(content.split("\n"))
    return TodayStats(
        count=len(entries),
        total_minutes=sum(e.duration_minutes for e in entries),
    )


def render_new_log(day: date, first_row: str, total_minutes: int) -> str:
    """Full content of a fresh day file holding a single row."""
    return "\n".join([
        format_header(day),
        "",
        TABLE_HEADER,
        TABLE_SEPARATOR,
        first_row,
        "",
        SECTION_SEPARATOR,
        "",
        format_summary_row(total_minutes),
    ])


def insert_row(content: str, row: str) -> str:
    """Insert a row after the last data row, ahead of the summary section.

    Without a ``---`` line ahead of the summary (e.g. a hand-edited file) the
    row is appended at the end instead.
    """
    lines = content.split("\n")

    summary_idx = None
    for i in range(len(lines) - 1, -1, -1):
        if SUMMARY_LABEL in lines[i]:
            summary_idx = i
            break

    separator_idx = None
    search_end = summary_idx if summary_idx is not None else len(lines)
    for i in range(search_end - 1, -1, -1):
        if lines[i].strip() == SECTION_SEPARATOR:
            separator_idx = i
            break

    if separator_idx is None:
        return content.rstrip("\n") + "\n" + row

    position = separator_idx
    while position > 0 and not lines[position - 1].strip():
        position -= 1
    lines.insert(position, row)
    return "\n".join(lines)


def apply_summary(content: str, total_minutes: int) -> str:
    """Rewrite every summary row with ``total_minutes``; add one if missing."""
    summary = format_summary_row(total_minutes)
    lines = content.split("\n")

    replaced = False
    for i, line in enumerate(lines):
        if SUMMARY_LABEL in line:
            lines[i] = summary
            replaced = True

    if not replaced:
        return content.rstrip("\n") + f"\n\n{SECTION_SEPARATOR}\n\n{summary}"
    return "\n".join(lines)


class LogStore:
    """Append-only markdown log of completed focus sessions, one file per day.

    Persistence is best-effort: filesystem errors are logged and swallowed so
    the timer keeps running even when the disk write fails. ``append`` reports
    the outcome as a bool but never raises.
    """

    def __init__(self, log_dir: Path, clock: Callable[[], datetime] = datetime.now):
        self.log_dir = Path(log_dir)
        self._clock = clock

    def path_for(self, day: date) -> Path:
        return self.log_dir / f"{day:%Y-%m-%d}.md"

    @property
    def today(self) -> date:
        return self._clock().date()

    @property
    def today_path(self) -> Path:
        return self.path_for(self.today)

    def append(self, session: CompletedSession) -> bool:
        """Record a completed session in today's file.

        Creates the file on first use. The summary row is recomputed from a
        scan of every data row in the file, never from a running total.
        """
        day = self.today
        path = self.path_for(day)
        row = format_row(session)

        try:
            self.log_dir.mkdir(parents=True, exist_ok=True)

            if path.exists():
                content = insert_row(path.read_text(encoding="utf-8"), row)
            else:
                content = render_new_log(day, row, session.duration_minutes)

            stats = stats_from_content(content)
            content = apply_summary(content, stats.total_minutes)
            self._write(path, content)
        except (OSError, UnicodeError) as e:
            logger.warning(f"Failed to write focus log {path}: {e}")
            return False

        logger.debug(f"Logged session to {path} ({stats.count} today, {stats.total_minutes} min)")
        return True

    def today_stats(self) -> TodayStats:
        """Count and total minutes for today, read fresh from the file."""
        return self.stats_for(self.today)

    def stats_for(self, day: date) -> TodayStats:
        content = self.read(day)
        if content is None:
            return TodayStats()
        return stats_from_content(content)

    def entries(self, day: date | None = None) -> list[LogEntry]:
        """Data rows of a day file in file order (today by default)."""
        content = self.read(day or self.today)
        if content is None:
            return []
        return parse_entries(content.split("\n"))

    def read(self, day: date) -> str | None:
        """Raw markdown for a day, or None if missing or unreadable."""
        path = self.path_for(day)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeError) as e:
            logger.warning(f"Failed to read focus log {path}: {e}")
            return None

    def _write(self, path: Path, content: str) -> None:
        """Replace the file in one step so a failed write leaves the old copy."""
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
