"""Capture an image, upload it to imgbb and hand back a shareable URL."""

__version__ = "0.1.0"
