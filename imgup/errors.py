"""Exception hierarchy for the imgup command-line tool.

Every failure the tool reports derives from ImgupError and maps to exit
status 1. The subclasses follow the order in which a run can fail:
option validation, missing executables, image acquisition, the HTTP
transport and finally the remote API.
"""

from __future__ import annotations


class ImgupError(Exception):
    """Base class for all errors reported to the user."""

    exit_code: int = 1

    def __init__(self, message: str, details: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(ImgupError):
    """Malformed or contradictory options, raised before any external call."""

    def __init__(
        self, message: str, details: str | None = None, show_usage: bool = False
    ) -> None:
        super().__init__(message, details)
        self.show_usage = show_usage


class ConfigError(ValidationError):
    """A configuration file or environment value is invalid."""


class ApiKeyNotFoundError(ValidationError):
    """No API key in the environment or the configuration file."""


class DependencyError(ImgupError):
    """A required external executable is not installed."""

    def __init__(self, tool: str, purpose: str | None = None) -> None:
        message = f"Required tool '{tool}' not found in PATH"
        if purpose:
            message += f" (needed for {purpose})"
        super().__init__(message)
        self.tool = tool


class AcquisitionError(ImgupError):
    """The selected source did not produce usable image bytes."""

    def __init__(self, message: str, source: str, details: str | None = None) -> None:
        super().__init__(message, details)
        self.source = source


class ToolError(AcquisitionError):
    """An external tool exited with a non-zero status."""

    def __init__(
        self,
        tool: str,
        returncode: int | None,
        source: str,
        message: str | None = None,
        stderr: str | None = None,
    ) -> None:
        status = f"exit status {returncode}" if returncode is not None else "no exit status"
        text = message or f"'{tool}' failed"
        super().__init__(f"{text} ({status})", source, stderr or None)
        self.tool = tool
        self.returncode = returncode


class TransportError(ImgupError):
    """The upload request did not complete at the HTTP level."""


class ApiError(ImgupError):
    """The upload API answered but reported failure or an unusable payload."""

    def __init__(self, message: str, raw_response: str | None = None) -> None:
        super().__init__(message, raw_response)
        self.raw_response = raw_response
