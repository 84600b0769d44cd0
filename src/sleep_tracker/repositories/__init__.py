"""Repositories - the user store and the sleep log store."""

from sleep_tracker.repositories.user_repository import UserRepository
from sleep_tracker.repositories.sleep_log_repository import SleepLogRepository

__all__ = ["UserRepository", "SleepLogRepository"]
