"""Focus Session Logger - Pomodoro timer with a daily markdown focus log."""

__version__ = "0.1.0"
