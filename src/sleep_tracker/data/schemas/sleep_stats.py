"""Sleep statistics schema - derived on demand, never persisted."""

import datetime as dt
from uuid import UUID

from pydantic import BaseModel, Field


class MoodFrequencies(BaseModel):
    """Number of logs per mood inside the window."""
    bad: int = Field(default=0, ge=0)
    ok: int = Field(default=0, ge=0)
    good: int = Field(default=0, ge=0)

    model_config = {"frozen": True}


class SleepStats(BaseModel):
    """Rolling-window sleep statistics for one user."""
    user_id: UUID
    time_zone: str = Field(..., description="Timezone the averages are expressed in")
    from_date: dt.date = Field(..., description="First date of the window (inclusive)")
    to_date: dt.date = Field(..., description="Today in the user's timezone")
    average_bed_time: dt.time
    average_wake_time: dt.time
    average_duration: dt.timedelta
    mood_frequencies: MoodFrequencies

    model_config = {"frozen": True}
