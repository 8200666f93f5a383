"""Insightboard - read-only analytics API over insight records."""

__version__ = "0.1.0"
