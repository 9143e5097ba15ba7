"""Delegate tasks to autonomous agent CLIs and stream their progress."""

__version__ = "0.1.0"
