"""User-facing messages, upload progress and notifications."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import final

from rich.console import Console
from rich.markup import escape
from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
    TransferSpeedColumn,
)

from imgup.notify import NullNotifier


@final
class Reporter:
    """Writes status to stderr and mirrors outcomes as notifications."""

    def __init__(
        self,
        console: Console | None = None,
        verbose: bool = False,
        notifier: NullNotifier | None = None,
    ) -> None:
        """Initialize the reporter.

        Args:
            console: Rich console instance. If None, one writing to stderr is created.
            verbose: Show debug lines
            notifier: Notification sink; a no-op one if None
        """
        self.console = console or Console(stderr=True)
        self.verbose = verbose
        self.notifier = notifier or NullNotifier()

    def debug(self, message: str) -> None:
        if self.verbose:
            self.console.print(f"[dim]{escape(message)}[/dim]")

    def display_warning(self, message: str) -> None:
        self.console.print(f"[yellow]Warning: {escape(message)}[/yellow]")

    def display_success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {escape(message)}")

    def display_error(self, message: str, details: str | None = None) -> None:
        """Display an error message with optional details.

        Args:
            message: Error message to display
            details: Extra context such as a raw API response or tool stderr
        """
        self.console.print(f"[red]Error: {escape(message)}[/red]")
        if details:
            self.console.print(f"[dim]Details: {escape(details)}[/dim]")

    def notify_success(self, url: str) -> None:
        self.notifier.notify("Image uploaded", url)

    def notify_failure(self, message: str) -> None:
        self.notifier.notify("Image upload failed", message, urgency="critical")

    @contextmanager
    def track_upload(self) -> Iterator[Callable[[int, int], None] | None]:
        """Show a transfer bar while the upload runs.

        Yields a callback taking (bytes sent, total bytes), or None when stderr
        is not a terminal.
        """
        if not self.console.is_terminal:
            yield None
            return

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            DownloadColumn(),
            TransferSpeedColumn(),
            TimeElapsedColumn(),
            console=self.console,
            transient=True,
        ) as progress:
            task_id = progress.add_task("Uploading...", total=None)

            def update(bytes_read: int, total_bytes: int) -> None:
                progress.update(task_id, completed=bytes_read, total=total_bytes)

            yield update
