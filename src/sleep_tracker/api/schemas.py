"""API Schemas - Request/Response models for the API Gateway.
"""

import re
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from sleep_tracker.common.clock import resolve_time_zone
from sleep_tracker.common.constants import UserConstants
from sleep_tracker.common.exceptions import ValidationError
from sleep_tracker.data.schemas.sleep_log import Mood


_NAME_RE = re.compile(UserConstants.NAME_PATTERN)


def _as_aware(value: datetime) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


# =============================================================================
# REQUEST SCHEMAS
# =============================================================================

class CreateUserRequest(BaseModel):
    """Request body for creating or replacing a user."""
    name: str = Field(
        ..., description="Letters, digits, '_' or '-', at most 50 characters"
    )
    time_zone: str = Field(
        default=UserConstants.DEFAULT_TIME_ZONE, description="IANA timezone id"
    )

    @field_validator("name")
    @classmethod
    def name_matches_pattern(cls, value: str) -> str:
        trimmed = value.strip()
        if not _NAME_RE.match(trimmed):
            raise ValueError(f"name must match {UserConstants.NAME_PATTERN}")
        return trimmed

    @field_validator("time_zone")
    @classmethod
    def time_zone_is_known(cls, value: str) -> str:
        try:
            resolve_time_zone(value)
        except ValidationError as exc:
            raise ValueError(exc.message) from exc
        return value

    model_config = {
        "json_schema_extra": {
            "example": {"name": "jane_doe", "time_zone": "America/Los_Angeles"}
        }
    }


class CreateSleepLogRequest(BaseModel):
    """Request body for creating or replacing a sleep log.

    Naive timestamps are read as UTC. Whether the session lies in the
    past is checked by the service against its clock.
    """
    bed_time: datetime = Field(..., description="When the user went to bed")
    wake_time: datetime = Field(..., description="When the user woke up")
    mood: Mood = Field(..., description="Mood after waking")

    @model_validator(mode="after")
    def check_times(self) -> "CreateSleepLogRequest":
        self.bed_time = _as_aware(self.bed_time)
        self.wake_time = _as_aware(self.wake_time)
        if self.bed_time >= self.wake_time:
            raise ValueError("bed_time must be before wake_time")
        return self

    model_config = {
        "json_schema_extra": {
            "example": {
                "bed_time": "2024-01-01T23:30:00Z",
                "wake_time": "2024-01-02T07:30:00Z",
                "mood": "GOOD",
            }
        }
    }


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

class PingResponse(BaseModel):
    """Response for GET /api/v1/ping."""
    date: str = Field(..., description="Today's date (UTC), ISO format")


class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Human-readable error message")
    request_id: Optional[str] = Field(
        default=None, description="Request ID for debugging"
    )
    details: Dict[str, Any] = Field(default_factory=dict)
