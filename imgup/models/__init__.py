"""Data models for the imgup upload tool."""

from .payload import ImagePayload
from .request import OutputFormat, SourceMode, UploadRequest
from .upload import UploadFailure, UploadResult, UploadSuccess

__all__ = [
    "ImagePayload",
    "OutputFormat",
    "SourceMode",
    "UploadFailure",
    "UploadRequest",
    "UploadResult",
    "UploadSuccess",
]
