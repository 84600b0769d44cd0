"""Time sources and timezone helpers.

Components that depend on "now" receive a Clock instead of calling
datetime.now() directly, so tests can pin the current instant.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from sleep_tracker.common.exceptions import ValidationError


class Clock(ABC):
    """Source of the current instant."""

    @abstractmethod
    def now(self) -> datetime:
        """Return the current instant as a timezone-aware UTC datetime."""
        pass

    def today(self, tz: ZoneInfo) -> date:
        """Current calendar date in the given timezone."""
        return self.now().astimezone(tz).date()


class SystemClock(Clock):
    """Wall clock."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock(Clock):
    """Clock pinned to an instant; advances only when told to."""

    def __init__(self, instant: datetime):
        if instant.tzinfo is None:
            raise ValueError("FixedClock requires a timezone-aware datetime")
        self._instant = instant.astimezone(timezone.utc)

    def now(self) -> datetime:
        return self._instant

    def advance(self, delta: timedelta) -> datetime:
        """Move the clock forward and return the new instant."""
        self._instant = self._instant + delta
        return self._instant

    def set(self, instant: datetime) -> None:
        self._instant = instant.astimezone(timezone.utc)


def resolve_time_zone(name: str) -> ZoneInfo:
    """Look up an IANA timezone id.

    Raises:
        ValidationError: If the id is not a known timezone
    """
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError) as exc:
        raise ValidationError(
            f"Unknown time zone: {name}", details={"time_zone": name}
        ) from exc


def local_midnight(day: date) -> datetime:
    """Naive wall-clock start of a calendar day."""
    return datetime.combine(day, time.min)


def to_utc(value: datetime) -> datetime:
    """Normalize a datetime to aware UTC; naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
