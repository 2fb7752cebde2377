"""Desktop notifications through notify-send."""

from __future__ import annotations

import shutil
import subprocess

APP_NAME = "imgup"
NOTIFY_TIMEOUT = 5


class NullNotifier:
    """Notifier used when notifications are disabled or unavailable."""

    def notify(self, summary: str, body: str = "", urgency: str = "normal") -> None:
        pass


class DesktopNotifier(NullNotifier):
    """Sends notifications with notify-send; delivery is best-effort."""

    def __init__(self, executable: str = "notify-send") -> None:
        self.executable = executable

    def notify(self, summary: str, body: str = "", urgency: str = "normal") -> None:
        args = [self.executable, "--app-name", APP_NAME, "--urgency", urgency, summary]
        if body:
            args.append(body)
        try:
            subprocess.run(args, capture_output=True, timeout=NOTIFY_TIMEOUT, check=False)
        except (OSError, subprocess.SubprocessError):
            # A missing or hung notification daemon must not affect the upload
            pass


def create_notifier(enabled: bool) -> NullNotifier:
    """Return a DesktopNotifier if enabled and notify-send is installed."""
    if not enabled:
        return NullNotifier()
    executable = shutil.which("notify-send")
    if not executable:
        return NullNotifier()
    return DesktopNotifier(executable)
