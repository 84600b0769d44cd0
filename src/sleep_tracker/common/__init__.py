"""Common utilities - logging, config, exceptions, clock."""

from sleep_tracker.common.logging.logger import get_logger
from sleep_tracker.common.config import Config, get_config, reset_config
from sleep_tracker.common.clock import Clock, FixedClock, SystemClock
from sleep_tracker.common.exceptions import (
    SleepTrackerException,
    ConfigurationError,
    ValidationError,
    StorageError,
    ConstraintViolationError,
    DuplicateKeyError,
    ReferentialIntegrityError,
)

__all__ = [
    # Logging
    "get_logger",
    # Config
    "Config",
    "get_config",
    "reset_config",
    # Clock
    "Clock",
    "FixedClock",
    "SystemClock",
    # Exceptions
    "SleepTrackerException",
    "ConfigurationError",
    "ValidationError",
    "StorageError",
    "ConstraintViolationError",
    "DuplicateKeyError",
    "ReferentialIntegrityError",
]
