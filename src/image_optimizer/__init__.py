"""Batch image conversion with before/after size statistics."""

__version__ = "0.1.0"
