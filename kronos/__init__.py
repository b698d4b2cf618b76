"""Chunked, git-friendly export and import of agent memory stored in SQLite."""

__version__ = "0.1.0"