"""Shared test fixtures.

Provides a deterministic scheduler and a controllable clock so timer tests
never sleep, plus config isolation for the CLI.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Callable
from unittest.mock import MagicMock

import pytest

from focus_logger.core.config import Config
from focus_logger.focus.timer import SessionTimer
from focus_logger.storage.day_log import LogStore


# ---------------------------------------------------------------------------
# Scheduler / clock doubles
# ---------------------------------------------------------------------------


class ManualHandle:
    def __init__(self, interval_seconds: float, callback: Callable[[], None]):
        self.interval_seconds = interval_seconds
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Scheduler that only fires when the test advances it."""

    def __init__(self):
        self.handles: list[ManualHandle] = []

    def call_repeating(self, interval_seconds: float, callback: Callable[[], None]) -> ManualHandle:
        handle = ManualHandle(interval_seconds, callback)
        self.handles.append(handle)
        return handle

    @property
    def active(self) -> list[ManualHandle]:
        return [h for h in self.handles if not h.cancelled]

    def advance(self, seconds: int) -> None:
        """Fire every live handle once per simulated second."""
        for _ in range(seconds):
            for handle in list(self.active):
                # A handle cancelled earlier in this second must not fire
                if not handle.cancelled:
                    handle.callback()


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 10, 19, 9, 0, 0))


@pytest.fixture()
def timer(scheduler, clock) -> SessionTimer:
    return SessionTimer(scheduler, clock=clock)


@pytest.fixture()
def log_dir(tmp_path):
    return tmp_path / "FocusLogs"


@pytest.fixture()
def store(log_dir, clock) -> LogStore:
    return LogStore(log_dir, clock=clock)


@pytest.fixture()
def notifier() -> MagicMock:
    return MagicMock()


@pytest.fixture()
def tmp_config(tmp_path) -> Config:
    """Config whose every path lives under tmp_path."""
    return Config(
        focus_log_dir=tmp_path / "FocusLogs",
        log_dir=tmp_path / "logs",
        config_dir=tmp_path / "config",
    )
