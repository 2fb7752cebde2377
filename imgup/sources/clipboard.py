"""Clipboard access through wl-clipboard or xclip."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum

from imgup.errors import AcquisitionError, ConfigError, ToolError
from imgup.models.payload import ImagePayload
from imgup.models.request import SourceMode
from imgup.sources.tools import decode_stderr, require_tool, run_tool

# Probed in order; the first non-empty result wins
CLIPBOARD_IMAGE_TYPES: tuple[tuple[str, str], ...] = (
    ("image/png", "png"),
    ("image/jpeg", "jpg"),
)


class ClipboardBackend(Enum):
    """Clipboard implementation of the running desktop session."""

    WAYLAND = "wayland"
    X11 = "x11"

    @classmethod
    def from_name(cls, value: str) -> ClipboardBackend:
        try:
            return cls(value.strip().lower())
        except ValueError:
            valid = ", ".join(member.value for member in cls)
            raise ConfigError(
                f"Unsupported clipboard backend '{value}' (expected one of: {valid})"
            ) from None

    @classmethod
    def detect(cls, environ: Mapping[str, str]) -> ClipboardBackend:
        """Pick Wayland when a Wayland display is advertised, X11 otherwise."""
        if environ.get("WAYLAND_DISPLAY"):
            return cls.WAYLAND
        return cls.X11

    @property
    def reader(self) -> str:
        return "wl-paste" if self is ClipboardBackend.WAYLAND else "xclip"

    @property
    def writer(self) -> str:
        return "wl-copy" if self is ClipboardBackend.WAYLAND else "xclip"

    def read_command(self, mime_type: str) -> list[str]:
        if self is ClipboardBackend.WAYLAND:
            return ["wl-paste", "--no-newline", "--type", mime_type]
        return ["xclip", "-selection", "clipboard", "-target", mime_type, "-out"]

    def write_command(self) -> list[str]:
        if self is ClipboardBackend.WAYLAND:
            return ["wl-copy"]
        return ["xclip", "-selection", "clipboard", "-in"]


def read_clipboard_image(backend: ClipboardBackend) -> ImagePayload:
    """
    Read image content from the clipboard, preferring PNG over JPEG.

    A reader exiting non-zero for a MIME type means the clipboard does not
    offer that type, so the next type is tried.

    Args:
        backend: Clipboard implementation to query

    Returns:
        ImagePayload: In-memory payload named after the format found

    Raises:
        DependencyError: If the clipboard reader is not installed
        AcquisitionError: If neither format yields any bytes
    """
    require_tool(backend.reader, "reading the clipboard")

    for mime_type, extension in CLIPBOARD_IMAGE_TYPES:
        result = run_tool(backend.read_command(mime_type))
        if result.returncode == 0 and result.stdout:
            return ImagePayload(
                filename=f"clipboard.{extension}",
                mime_type=mime_type,
                source_mode=SourceMode.CLIPBOARD,
                data=result.stdout,
            )

    raise AcquisitionError("No image data found in clipboard", source="clipboard")


def copy_text(backend: ClipboardBackend, text: str) -> None:
    """Place text on the clipboard.

    Raises:
        DependencyError: If the clipboard writer is not installed
        ToolError: If the writer exits non-zero
    """
    require_tool(backend.writer, "copying to the clipboard")
    result = run_tool(backend.write_command(), input_data=text.encode("utf-8"))
    if result.returncode != 0:
        raise ToolError(
            backend.writer,
            result.returncode,
            source="clipboard",
            message="Copying to the clipboard failed",
            stderr=decode_stderr(result),
        )
