"""Upload API clients."""

from .imgbb import API_URL, ImgbbUploader

__all__ = ["API_URL", "ImgbbUploader"]
