"""Storage layer for the daily markdown focus log."""

from focus_logger.storage.day_log import LogStore

__all__ = ["LogStore"]
