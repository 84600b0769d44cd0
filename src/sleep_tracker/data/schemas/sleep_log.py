"""Sleep log schema - one logged night (or nap) per user per day."""

import datetime as dt
from enum import Enum
from uuid import UUID
from zoneinfo import ZoneInfo

from pydantic import BaseModel, Field


class Mood(str, Enum):
    """How the user felt after waking."""
    BAD = "BAD"
    OK = "OK"
    GOOD = "GOOD"


def derive_log_date(wake_time: dt.datetime, tz: ZoneInfo) -> dt.date:
    """Calendar date a sleep session is filed under.

    It is the date of the wake time as seen in the owner's timezone.
    """
    return wake_time.astimezone(tz).date()


class SleepLog(BaseModel):
    """Sleep log entity schema.

    bed_time and wake_time are expressed in the owner's timezone.
    """
    id: UUID = Field(..., description="Unique sleep log identifier")
    user_id: UUID = Field(..., description="Owning user")
    bed_time: dt.datetime = Field(..., description="When the user went to bed")
    wake_time: dt.datetime = Field(..., description="When the user woke up")
    mood: Mood = Field(..., description="Mood after waking")
    date: dt.date = Field(..., description="Local calendar date of wake_time")
    duration: dt.timedelta = Field(..., description="wake_time - bed_time")
    created_at: dt.datetime = Field(..., description="Creation timestamp (UTC)")
    updated_at: dt.datetime = Field(..., description="Last update timestamp (UTC)")

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "example": {
                "id": "5e0d8a3a-6c1e-4b8e-8f3e-7a9b0c1d2e3f",
                "user_id": "0b4f6c4e-1f7a-4f4e-9d5c-2d1c2f0e8a11",
                "bed_time": "2024-01-01T23:30:00Z",
                "wake_time": "2024-01-02T07:30:00Z",
                "mood": "GOOD",
                "date": "2024-01-02",
                "duration": "PT8H",
                "created_at": "2024-01-02T07:45:00Z",
                "updated_at": "2024-01-02T07:45:00Z",
            }
        }
    }
