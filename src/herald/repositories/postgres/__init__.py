"""Async SQLAlchemy repositories (PostgreSQL in production, SQLite in tests)."""

from __future__ import annotations

from herald.core.timeutil import aware, to_utc

__all__ = ["aware", "to_utc"]
