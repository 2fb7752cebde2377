"""Console reporting."""

from .reporter import Reporter

__all__ = ["Reporter"]
