"""Image payload data model."""

from __future__ import annotations

import io
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from imgup.models.request import SourceMode


@dataclass(frozen=True)
class ImagePayload:
    """Image bytes to upload, held in memory or on disk.

    Exactly one of ``data`` and ``path`` is set. The resolver that created
    the payload owns any temporary file behind ``path``.
    """

    filename: str
    mime_type: str
    source_mode: SourceMode
    data: bytes | None = None
    path: Path | None = None

    def __post_init__(self) -> None:
        if (self.data is None) == (self.path is None):
            raise ValueError("ImagePayload needs exactly one of data or path")

    @property
    def size(self) -> int:
        if self.path is not None:
            return self.path.stat().st_size
        return len(self.data or b"")

    def open(self) -> BinaryIO:
        """Open the payload for reading; the caller closes the stream."""
        if self.path is not None:
            return self.path.open("rb")
        return io.BytesIO(self.data or b"")
