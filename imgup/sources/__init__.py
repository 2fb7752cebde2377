"""Image acquisition from files, the clipboard and screenshot tools."""

from .clipboard import ClipboardBackend, copy_text, read_clipboard_image
from .screenshot import ScreenshotTool, capture_monitor, capture_region

__all__ = [
    "ClipboardBackend",
    "ScreenshotTool",
    "capture_monitor",
    "capture_region",
    "copy_text",
    "read_clipboard_image",
]
