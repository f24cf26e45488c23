"""Focus timer state machine and its tick scheduler."""

from focus_logger.focus.scheduler import AsyncioScheduler, RepeatingHandle, Scheduler
from focus_logger.focus.timer import SessionTimer, TimerState, format_countdown, phase_duration

__all__ = [
    "AsyncioScheduler",
    "RepeatingHandle",
    "Scheduler",
    "SessionTimer",
    "TimerState",
    "format_countdown",
    "phase_duration",
]
