"""Input source resolution: turn an UploadRequest into image bytes."""

from __future__ import annotations

import mimetypes
import shutil
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from imgup.config import Settings
from imgup.models.payload import ImagePayload
from imgup.models.request import SourceMode, UploadRequest
from imgup.sources.clipboard import read_clipboard_image
from imgup.sources.screenshot import MONITOR_TOOL, capture_monitor, capture_region
from imgup.sources.tools import require_tool

STAGING_PREFIX = "imgup-"


def check_dependencies(request: UploadRequest, settings: Settings) -> None:
    """
    Verify that every executable the source mode needs is installed.

    Runs before any acquisition so a missing tool fails the run early.

    Raises:
        DependencyError: Naming the first missing executable
    """
    mode = request.source_mode
    if mode is SourceMode.CLIPBOARD:
        require_tool(settings.clipboard_backend.reader, "reading the clipboard")
    elif mode is SourceMode.REGION_SCREENSHOT:
        for executable in settings.screenshot_tool.executables:
            require_tool(executable, "region screenshots")
    elif mode is SourceMode.MONITOR_SCREENSHOT:
        require_tool(MONITOR_TOOL, "monitor screenshots")


@contextmanager
def staging_directory() -> Iterator[Path]:
    """Private temporary directory, removed on every exit path."""
    directory = Path(tempfile.mkdtemp(prefix=STAGING_PREFIX))
    try:
        yield directory
    finally:
        shutil.rmtree(directory, ignore_errors=True)


def file_payload(path: Path) -> ImagePayload:
    mime_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    return ImagePayload(
        filename=path.name,
        mime_type=mime_type,
        source_mode=SourceMode.FILE,
        path=path,
    )


@contextmanager
def resolve_payload(request: UploadRequest, settings: Settings) -> Iterator[ImagePayload]:
    """
    Acquire the image for a request and release it when the block exits.

    File payloads read the user's file in place. Clipboard and region
    captures are held in memory. Monitor captures are staged in a
    temporary directory that is deleted when the context exits, whether
    the upload succeeded or raised.

    Args:
        request: Validated upload request
        settings: Resolved settings naming the tools to use

    Yields:
        ImagePayload: The image to upload
    """
    # file_path and monitor_index are set only in their own modes
    if request.file_path is not None:
        yield file_payload(request.file_path)
    elif request.monitor_index is not None:
        with staging_directory() as directory:
            destination = directory / f"monitor-{request.monitor_index}.png"
            yield capture_monitor(request.monitor_index, destination)
    elif request.source_mode is SourceMode.CLIPBOARD:
        yield read_clipboard_image(settings.clipboard_backend)
    else:
        yield capture_region(settings.screenshot_tool)
