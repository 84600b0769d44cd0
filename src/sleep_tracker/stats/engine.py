"""Sleep Statistics Engine - rolling-window aggregates per user.

Averaging wall-clock times naively breaks across midnight: the mean of
23:30 and 00:30 would come out as 12:00. Instead every bed and wake time
is turned into a signed offset from local midnight of the log's own date
(23:30 the night before becomes -00:30, 07:30 becomes +07:30). Offsets
are averaged as plain numbers, and the mean is folded back into [0, 24h)
to read it as a time of day.

Offsets are always computed in the user's current timezone, so the
statistics describe "typical time relative to midnight" under today's
setting even for logs written before a timezone change.
"""

import logging
from collections import Counter
from datetime import date, datetime, time, timedelta
from typing import Iterable, List, Optional
from uuid import UUID
from zoneinfo import ZoneInfo

import numpy as np

from sleep_tracker.common.clock import Clock, SystemClock, local_midnight
from sleep_tracker.common.constants import StatsConstants
from sleep_tracker.data.schemas.sleep_log import Mood, SleepLog
from sleep_tracker.data.schemas.sleep_stats import MoodFrequencies, SleepStats
from sleep_tracker.repositories.sleep_log_repository import SleepLogRepository
from sleep_tracker.repositories.user_repository import UserRepository


logger = logging.getLogger(__name__)


def offset_from_midnight(instant: datetime, day: date, tz: ZoneInfo) -> float:
    """Signed seconds between an instant and the start of `day` in `tz`.

    Measured on the local wall clock, so 07:00 reads as +07:00 even on a
    day where a DST shift makes it 6 or 8 elapsed hours after midnight.
    """
    local = instant.astimezone(tz).replace(tzinfo=None)
    return (local - local_midnight(day)).total_seconds()


def offset_to_time_of_day(seconds: float) -> time:
    """Fold a signed offset into [0, 24h) and read it as a wall-clock time."""
    normalized = float(np.mod(seconds, StatsConstants.SECONDS_PER_DAY))
    return (datetime.min + timedelta(seconds=normalized)).time()


def average_time_of_day(offsets: Iterable[float]) -> time:
    """Circular mean of offsets anchored on each record's own midnight."""
    values = np.fromiter(offsets, dtype=np.float64)
    return offset_to_time_of_day(float(values.mean()))


def count_moods(logs: Iterable[SleepLog]) -> MoodFrequencies:
    counts = Counter(log.mood for log in logs)
    return MoodFrequencies(
        bad=counts.get(Mood.BAD, 0),
        ok=counts.get(Mood.OK, 0),
        good=counts.get(Mood.GOOD, 0),
    )


def summarize(
    user_id: UUID,
    time_zone: str,
    from_date: date,
    to_date: date,
    logs: List[SleepLog],
) -> Optional[SleepStats]:
    """Aggregate a set of logs; None when the set is empty."""
    if not logs:
        return None

    tz = ZoneInfo(time_zone)
    bed_offsets = [offset_from_midnight(log.bed_time, log.date, tz) for log in logs]
    wake_offsets = [offset_from_midnight(log.wake_time, log.date, tz) for log in logs]
    durations = np.array([log.duration.total_seconds() for log in logs], dtype=np.float64)

    return SleepStats(
        user_id=user_id,
        time_zone=time_zone,
        from_date=from_date,
        to_date=to_date,
        average_bed_time=average_time_of_day(bed_offsets),
        average_wake_time=average_time_of_day(wake_offsets),
        average_duration=timedelta(seconds=float(durations.mean())),
        mood_frequencies=count_moods(logs),
    )


class SleepStatsEngine:
    """Computes SleepStats over the trailing `days_back` days.

    The window ends today in the user's timezone and starts `days_back`
    calendar days earlier. Only logs with date >= from_date contribute.
    """

    def __init__(
        self,
        user_repository: UserRepository,
        sleep_log_repository: SleepLogRepository,
        clock: Optional[Clock] = None,
    ):
        self.user_repository = user_repository
        self.sleep_log_repository = sleep_log_repository
        self.clock = clock or SystemClock()

    def calculate_sleep_stats(self, user_id: UUID, days_back: int) -> Optional[SleepStats]:
        """Statistics for the user's recent logs.

        Returns:
            SleepStats, or None if the user is unknown or logged nothing
            in the window
        """
        user = self.user_repository.find_by_id(user_id)
        if user is None:
            return None

        to_date = self.clock.today(ZoneInfo(user.time_zone))
        try:
            from_date = to_date - timedelta(days=days_back)
        except OverflowError:
            # Window reaches past the first representable date
            from_date = date.min
        logs = self.sleep_log_repository.find_since(user_id, from_date)

        stats = summarize(user.id, user.time_zone, from_date, to_date, logs)
        logger.info(
            "Sleep stats calculated",
            extra={
                "user_id": str(user_id),
                "days_back": days_back,
                "log_count": len(logs),
            },
        )
        return stats
