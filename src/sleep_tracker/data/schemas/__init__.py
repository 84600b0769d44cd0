"""Data schemas - canonical Pydantic definitions."""

from sleep_tracker.data.schemas.pagination import Page, Pagination
from sleep_tracker.data.schemas.user import User, normalize_name
from sleep_tracker.data.schemas.sleep_log import Mood, SleepLog, derive_log_date
from sleep_tracker.data.schemas.sleep_stats import MoodFrequencies, SleepStats

__all__ = [
    "Page",
    "Pagination",
    "User",
    "normalize_name",
    "Mood",
    "SleepLog",
    "derive_log_date",
    "MoodFrequencies",
    "SleepStats",
]
