"""Desktop notifications for session and break completion."""

from __future__ import annotations

import logging
import subprocess
import sys
from typing import Protocol

from focus_logger.core.config import Config

logger = logging.getLogger(__name__)

FOCUS_COMPLETE_TITLE = "Focus Session Complete"
FOCUS_COMPLETE_BODY = "Great work! Take a 5-minute break."
BREAK_COMPLETE_TITLE = "Break Over"
BREAK_COMPLETE_BODY = "Ready for another focus session?"


class Notifier(Protocol):
    def send_notification(self, title: str, body: str) -> None:
        ...


def _applescript_string(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class MacNotifier:
    """Posts a Notification Center banner through AppleScript.

    Fire-and-forget: the osascript process is never awaited and its outcome is
    never inspected. Finished children are reaped on the next send.
    """

    def __init__(self, sound: str | None = None):
        self.sound = sound
        self._running: list[subprocess.Popen] = []

    def build_script(self, title: str, body: str) -> str:
        script = f"display notification {_applescript_string(body)} with title {_applescript_string(title)}"
        if self.sound:
            script += f" sound name {_applescript_string(self.sound)}"
        return script

    def send_notification(self, title: str, body: str) -> None:
        self._reap()
        try:
            process = subprocess.Popen(
                ["osascript", "-e", self.build_script(title, body)],
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except Exception as e:
            logger.debug(f"Error sending notification: {e}")
            return
        self._running.append(process)

    def _reap(self) -> None:
        self._running = [p for p in self._running if p.poll() is None]


class LogNotifier:
    """Writes notifications to the application log instead of the desktop."""

    def send_notification(self, title: str, body: str) -> None:
        logger.info(f"Notification: {title} - {body}")


def get_notifier(config: Config) -> Notifier:
    """Pick the notifier for this platform and configuration."""
    if config.notifications.enabled and sys.platform == "darwin":
        return MacNotifier(sound=config.notifications.sound)
    return LogNotifier()
