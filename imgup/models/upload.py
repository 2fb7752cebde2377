"""Upload result data model."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class UploadSuccess:
    """The API accepted the image and returned a usable URL."""

    url: str


@dataclass(frozen=True)
class UploadFailure:
    """The upload was rejected or the response was unusable."""

    reason: str
    raw_response: str | None = None


UploadResult = Union[UploadSuccess, UploadFailure]
