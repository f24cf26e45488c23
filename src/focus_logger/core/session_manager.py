"""Coordinates the session timer, the daily log and notifications."""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Callable

from focus_logger.core.models import Category, CompletedSession, Project, TimerPhase, TodayStats
from focus_logger.core.notifier import (
    BREAK_COMPLETE_BODY,
    BREAK_COMPLETE_TITLE,
    FOCUS_COMPLETE_BODY,
    FOCUS_COMPLETE_TITLE,
    Notifier,
)
from focus_logger.focus.timer import SessionTimer, TimerState
from focus_logger.storage.day_log import LogStore

logger = logging.getLogger(__name__)


class SessionManager:
    """The application model a menu-bar or terminal UI renders.

    Owns today's counters. They are seeded from the day file at construction
    and bumped in memory from each completion event, so the display stays
    current even if the file write fails. The file remains the source of truth:
    when the date rolls over the counters are re-read from the new day's file.

    Usage:
        manager = SessionManager(timer, LogStore(config.focus_log_dir), get_notifier(config))
        manager.selected_category = Category.PLANNING
        manager.start_session()
    """

    def __init__(
        self,
        timer: SessionTimer,
        log_store: LogStore,
        notifier: Notifier,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.timer = timer
        self.log_store = log_store
        self.notifier = notifier
        self._clock = clock

        self._sessions_completed = 0
        self._total_focus_minutes = 0
        self._stats_day: date | None = None

        self.timer.on_focus_complete = self._handle_focus_complete
        self.timer.on_break_complete = self._handle_break_complete

        self.refresh_today_stats()

    @property
    def sessions_completed_today(self) -> int:
        self._roll_over_if_new_day()
        return self._sessions_completed

    @property
    def total_focus_minutes_today(self) -> int:
        self._roll_over_if_new_day()
        return self._total_focus_minutes

    @property
    def state(self) -> TimerState:
        return self.timer.state

    @property
    def phase(self) -> TimerPhase:
        return self.timer.phase

    @property
    def seconds_remaining(self) -> int:
        return self.timer.seconds_remaining

    @property
    def formatted_time_remaining(self) -> str:
        return self.timer.formatted_time_remaining

    @property
    def progress(self) -> float:
        return self.timer.progress

    @property
    def selected_category(self) -> Category:
        return self.timer.selected_category

    @selected_category.setter
    def selected_category(self, category: Category) -> None:
        self.timer.selected_category = category

    @property
    def selected_project(self) -> Project:
        return self.timer.selected_project

    @selected_project.setter
    def selected_project(self, project: Project) -> None:
        self.timer.selected_project = project

    def start_session(self) -> None:
        self.timer.start()

    def cancel_session(self) -> None:
        self.timer.cancel()

    def refresh_today_stats(self) -> TodayStats:
        """Re-seed today's counters from the day file."""
        stats = self.log_store.today_stats()
        self._sessions_completed = stats.count
        self._total_focus_minutes = stats.total_minutes
        self._stats_day = self._clock().date()
        return stats

    def snapshot(self) -> dict[str, Any]:
        """Plain-dict view of everything a UI displays."""
        state = self.timer.state
        return {
            "phase": state.phase.value,
            "seconds_remaining": state.seconds_remaining,
            "time_remaining": state.time_remaining_display,
            "progress": state.progress,
            "category": state.category.value,
            "project": state.project.value,
            "session_started_at": state.session_started_at.isoformat() if state.session_started_at else None,
            "sessions_completed_today": self.sessions_completed_today,
            "total_focus_minutes_today": self.total_focus_minutes_today,
        }

    def _handle_focus_complete(self, session: CompletedSession) -> None:
        # A session finishing after midnight counts toward the new day
        self._roll_over_if_new_day()

        if not self.log_store.append(session):
            logger.warning("Session not persisted; counting it in memory only")
        self._count(session)

        self.notifier.send_notification(FOCUS_COMPLETE_TITLE, FOCUS_COMPLETE_BODY)

    def _handle_break_complete(self) -> None:
        self.notifier.send_notification(BREAK_COMPLETE_TITLE, BREAK_COMPLETE_BODY)

    def _roll_over_if_new_day(self) -> None:
        if self._clock().date() != self._stats_day:
            self.refresh_today_stats()

    def _count(self, session: CompletedSession) -> None:
        self._sessions_completed += 1
        self._total_focus_minutes += session.duration_minutes
