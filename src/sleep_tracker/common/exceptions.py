"""Custom exceptions for the sleep tracker.

Provides a hierarchy of exceptions for different error types.
All sleep tracker exceptions inherit from SleepTrackerException.

Storage failures are split by kind so callers can tell a duplicate
(retry with different input) from any other rejected write.
"""

from typing import Any, Dict, Optional


class SleepTrackerException(Exception):
    """Base exception for all sleep tracker errors.

    Attributes:
        message: Human-readable error message
        code: Machine-readable error code
        details: Additional context about the error
    """

    def __init__(
        self,
        message: str,
        code: str = "SLEEP_TRACKER_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(SleepTrackerException):
    """Raised when configuration is invalid or missing."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="CONFIG_ERROR", details=details)


class ValidationError(SleepTrackerException):
    """Raised when caller input fails a precondition before storage access."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="VALIDATION_ERROR", details=details)


class StorageError(SleepTrackerException):
    """Raised when the store rejects a write for an unclassified reason."""

    def __init__(
        self,
        message: str,
        code: str = "STORAGE_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, code=code, details=details)


class ConstraintViolationError(StorageError):
    """Raised when a CHECK or NOT NULL constraint rejects a write."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="CONSTRAINT_VIOLATION", details=details)


class DuplicateKeyError(StorageError):
    """Raised when a unique index rejects a write."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="DUPLICATE_KEY", details=details)


class ReferentialIntegrityError(StorageError):
    """Raised when a write references a row that does not exist."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="REFERENTIAL_INTEGRITY", details=details)
