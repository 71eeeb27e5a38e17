"""Importance annotations for mind-map memos."""

__version__ = "0.1.0"
