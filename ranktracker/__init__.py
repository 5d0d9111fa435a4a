"""Rank progression tracker for League of Legends accounts."""

__version__ = "1.0.0"
