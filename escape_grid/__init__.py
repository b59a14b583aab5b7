"""Escape the Grid: a turn-based maze escape with a delayed clone."""

__version__ = "0.1.0"
