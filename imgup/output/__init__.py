"""Response interpretation and output formatting."""

from .interpreter import format_url, interpret_response

__all__ = ["format_url", "interpret_response"]
