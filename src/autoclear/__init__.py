"""Prune timestamped backup files down to one copy per retention bucket."""

__version__ = "1.0.0"
