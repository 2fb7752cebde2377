"""Upload request data model."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

MIN_EXPIRATION_SECONDS = 60
MAX_EXPIRATION_SECONDS = 15552000


class SourceMode(Enum):
    """Where the image bytes come from."""

    CLIPBOARD = "clipboard"
    FILE = "file"
    REGION_SCREENSHOT = "region-screenshot"
    MONITOR_SCREENSHOT = "monitor-screenshot"


class OutputFormat(Enum):
    """How the resulting URL is rendered."""

    RAW = "raw"
    MARKDOWN = "markdown"
    ORG = "org"

    @classmethod
    def from_name(cls, value: str) -> OutputFormat:
        try:
            return cls(value.strip().lower())
        except ValueError:
            valid = ", ".join(member.value for member in cls)
            raise ValueError(f"Invalid output format '{value}' (expected one of: {valid})") from None


@dataclass(frozen=True)
class UploadRequest:
    """A fully validated description of one upload.

    Exactly one source mode holds: ``file_path`` is set only for FILE and
    ``monitor_index`` only for MONITOR_SCREENSHOT.
    """

    source_mode: SourceMode
    api_key: str
    output_format: OutputFormat = OutputFormat.RAW
    file_path: Path | None = None
    monitor_index: int | None = None
    expiration_seconds: int | None = None
    custom_name: str | None = None

    def __post_init__(self) -> None:
        if not self.api_key:
            raise ValueError("api_key must not be empty")
        if (self.file_path is not None) != (self.source_mode is SourceMode.FILE):
            raise ValueError("file_path is required for, and only for, FILE mode")
        if (self.monitor_index is not None) != (self.source_mode is SourceMode.MONITOR_SCREENSHOT):
            raise ValueError("monitor_index is required for, and only for, MONITOR_SCREENSHOT mode")
        if self.monitor_index is not None and self.monitor_index < 0:
            raise ValueError("monitor_index must be non-negative")
        if self.expiration_seconds is not None and not (
            MIN_EXPIRATION_SECONDS <= self.expiration_seconds <= MAX_EXPIRATION_SECONDS
        ):
            raise ValueError(
                f"expiration_seconds must be within [{MIN_EXPIRATION_SECONDS}, {MAX_EXPIRATION_SECONDS}]"
            )
        if self.custom_name is not None and not self.custom_name:
            raise ValueError("custom_name must not be empty when given")
