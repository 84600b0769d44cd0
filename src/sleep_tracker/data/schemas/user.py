"""User schema - canonical definition."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


def normalize_name(name: str) -> str:
    """Canonical stored form of a user name: trimmed and lower-cased."""
    return name.strip().lower()


class User(BaseModel):
    """User entity schema.

    The name is stored normalized; uniqueness applies to that form.
    """
    id: UUID = Field(..., description="Unique user identifier")
    name: str = Field(..., description="Normalized user name")
    time_zone: str = Field(..., description="IANA timezone id")
    created_at: datetime = Field(..., description="Creation timestamp (UTC)")
    updated_at: datetime = Field(..., description="Last update timestamp (UTC)")

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "example": {
                "id": "0b4f6c4e-1f7a-4f4e-9d5c-2d1c2f0e8a11",
                "name": "jane_doe",
                "time_zone": "America/Los_Angeles",
                "created_at": "2024-01-01T12:00:00Z",
                "updated_at": "2024-01-01T12:00:00Z",
            }
        }
    }
