"""Focus/break session timer state machine."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from focus_logger.core.models import (
    BREAK_DURATION_SECONDS,
    FOCUS_DURATION_SECONDS,
    FOCUS_SESSION_MINUTES,
    Category,
    CompletedSession,
    Project,
    TimerPhase,
)
from focus_logger.focus.scheduler import RepeatingHandle, Scheduler

logger = logging.getLogger(__name__)

TICK_INTERVAL_SECONDS = 1.0


def phase_duration(phase: TimerPhase) -> int:
    """Length in seconds of a phase. Idle shows the next focus length."""
    if phase == TimerPhase.ON_BREAK:
        return BREAK_DURATION_SECONDS
    return FOCUS_DURATION_SECONDS


def format_countdown(seconds: int) -> str:
    """Format seconds as M:SS (no leading zero on minutes)."""
    minutes, secs = divmod(max(0, seconds), 60)
    return f"{minutes}:{secs:02d}"


@dataclass
class TimerState:
    """Snapshot of the session timer."""
    phase: TimerPhase = TimerPhase.IDLE
    seconds_remaining: int = FOCUS_DURATION_SECONDS
    category: Category = Category.DEEP_WORK
    project: Project = Project.SNOWFLAKE
    session_started_at: datetime | None = None

    @property
    def time_remaining_display(self) -> str:
        return format_countdown(self.seconds_remaining)

    @property
    def progress(self) -> float:
        """Fraction of the current phase elapsed (0.0 - 1.0)."""
        if self.phase == TimerPhase.IDLE:
            return 0.0
        total = phase_duration(self.phase)
        return (total - self.seconds_remaining) / total


class SessionTimer:
    """Idle -> focusing -> on break -> idle, ticking once per second.

    The timer does no I/O. Completion is reported through two callbacks and the
    owner decides what to log and whom to notify:

        timer = SessionTimer(AsyncioScheduler())
        timer.on_focus_complete = lambda session: store.append(session)
        timer.on_break_complete = lambda: print("Break over")
        timer.start()

    Only one tick cadence is ever live; starting a new one always cancels the
    previous handle first.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        clock: Callable[[], datetime] = datetime.now,
        category: Category = Category.DEEP_WORK,
        project: Project = Project.SNOWFLAKE,
    ):
        self._scheduler = scheduler
        self._clock = clock
        self._state = TimerState(category=category, project=project)
        self._handle: RepeatingHandle | None = None

        # Callbacks
        self.on_focus_complete: Callable[[CompletedSession], None] | None = None
        self.on_break_complete: Callable[[], None] | None = None

    @property
    def state(self) -> TimerState:
        """Get current timer state (copy)."""
        return TimerState(
            phase=self._state.phase,
            seconds_remaining=self._state.seconds_remaining,
            category=self._state.category,
            project=self._state.project,
            session_started_at=self._state.session_started_at,
        )

    @property
    def phase(self) -> TimerPhase:
        return self._state.phase

    @property
    def seconds_remaining(self) -> int:
        return self._state.seconds_remaining

    @property
    def session_started_at(self) -> datetime | None:
        return self._state.session_started_at

    @property
    def formatted_time_remaining(self) -> str:
        return self._state.time_remaining_display

    @property
    def progress(self) -> float:
        return self._state.progress

    @property
    def is_ticking(self) -> bool:
        return self._handle is not None

    @property
    def selected_category(self) -> Category:
        return self._state.category

    @selected_category.setter
    def selected_category(self, category: Category) -> None:
        self._state.category = category

    @property
    def selected_project(self) -> Project:
        return self._state.project

    @selected_project.setter
    def selected_project(self, project: Project) -> None:
        self._state.project = project

    def start(self) -> None:
        """Begin a focus interval. Ignored unless idle."""
        if self._state.phase != TimerPhase.IDLE:
            logger.debug(f"start() ignored while {self._state.phase.value}")
            return

        self._state.phase = TimerPhase.FOCUSING
        self._state.seconds_remaining = FOCUS_DURATION_SECONDS
        self._state.session_started_at = self._clock()
        self._start_ticking()

        logger.info(
            f"Focus session started: {self._state.category.value} / {self._state.project.value}"
        )

    def cancel(self) -> None:
        """Abandon the current focus or break. Nothing is reported."""
        self._stop_ticking()

        if self._state.phase == TimerPhase.IDLE:
            return

        logger.info(f"Session cancelled while {self._state.phase.value}")
        self._reset_to_idle()

    def tick(self) -> None:
        """Advance the countdown by one second."""
        if self._state.phase == TimerPhase.IDLE:
            return
        if self._state.seconds_remaining <= 0:
            return

        self._state.seconds_remaining -= 1

        if self._state.seconds_remaining <= 0:
            self._stop_ticking()
            self._complete_phase()

    def _start_ticking(self) -> None:
        self._stop_ticking()
        self._handle = self._scheduler.call_repeating(TICK_INTERVAL_SECONDS, self.tick)

    def _stop_ticking(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _reset_to_idle(self) -> None:
        self._state.phase = TimerPhase.IDLE
        self._state.seconds_remaining = FOCUS_DURATION_SECONDS
        self._state.session_started_at = None

    def _complete_phase(self) -> None:
        if self._state.phase == TimerPhase.FOCUSING:
            self._complete_focus()
        elif self._state.phase == TimerPhase.ON_BREAK:
            self._complete_break()

    def _complete_focus(self) -> None:
        started_at = self._state.session_started_at or self._clock()
        session = CompletedSession(
            start_time=started_at,
            end_time=self._clock(),
            category=self._state.category,
            project=self._state.project,
            duration_minutes=FOCUS_SESSION_MINUTES,
        )

        logger.info("Focus session complete! Starting break")

        if self.on_focus_complete:
            try:
                self.on_focus_complete(session)
            except Exception as e:
                logger.error(f"Error in on_focus_complete callback: {e}")

        # The callback cancelled (and possibly restarted) the session
        if self._state.phase != TimerPhase.FOCUSING or self._handle is not None:
            return

        self._state.phase = TimerPhase.ON_BREAK
        self._state.seconds_remaining = BREAK_DURATION_SECONDS
        self._state.session_started_at = None
        self._start_ticking()

    def _complete_break(self) -> None:
        logger.info("Break complete")

        # Idle before the callback so it may start the next session
        self._reset_to_idle()

        if self.on_break_complete:
            try:
                self.on_break_complete()
            except Exception as e:
                logger.error(f"Error in on_break_complete callback: {e}")
