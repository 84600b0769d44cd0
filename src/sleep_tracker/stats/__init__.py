"""Sleep statistics."""

from sleep_tracker.stats.engine import (
    SleepStatsEngine,
    average_time_of_day,
    count_moods,
    offset_from_midnight,
    offset_to_time_of_day,
    summarize,
)

__all__ = [
    "SleepStatsEngine",
    "average_time_of_day",
    "count_moods",
    "offset_from_midnight",
    "offset_to_time_of_day",
    "summarize",
]
