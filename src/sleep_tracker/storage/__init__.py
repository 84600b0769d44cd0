"""Relational storage - engine, sessions and ORM tables."""

from sleep_tracker.storage.database import Database, build_engine, translate_integrity_error
from sleep_tracker.storage.models import Base, SleepLogRow, UserRow

__all__ = [
    "Database",
    "build_engine",
    "translate_integrity_error",
    "Base",
    "SleepLogRow",
    "UserRow",
]
