"""
SQLAlchemy models for users and sleep logs.

Timestamps are stored as naive UTC. The sleep log's date column is
derived from wake_time and the owner's timezone at write time; it is
persisted so the (user_id, date) unique index can enforce one log per day.
"""
from uuid import uuid4

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    String,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import declarative_base

from sleep_tracker.common.constants import UserConstants
from sleep_tracker.data.schemas.sleep_log import Mood


Base = declarative_base()


class UserRow(Base):
    """
    A user and the timezone their sleep logs are interpreted in.
    """
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid4)
    name = Column(String(UserConstants.NAME_MAX_LENGTH), nullable=False)
    time_zone = Column(String(UserConstants.TIME_ZONE_MAX_LENGTH), nullable=False)
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)

    __table_args__ = (
        UniqueConstraint("name", name="uq_users_name"),
        Index("idx_users_created_at", "created_at"),
    )

    def __repr__(self):
        return f"<UserRow(id={self.id}, name={self.name}, time_zone={self.time_zone})>"


class SleepLogRow(Base):
    """
    One sleep session, filed under the local date of its wake time.
    """
    __tablename__ = "sleep_logs"

    id = Column(Uuid, primary_key=True, default=uuid4)
    user_id = Column(Uuid, ForeignKey("users.id"), nullable=False)
    bed_time = Column(DateTime, nullable=False)
    wake_time = Column(DateTime, nullable=False)
    mood = Column(Enum(Mood, name="mood"), nullable=False)
    date = Column(Date, nullable=False)
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_sleep_logs_user_id_date"),
        CheckConstraint("wake_time > bed_time", name="ck_sleep_logs_wake_after_bed"),
        Index("idx_sleep_logs_user_wake", "user_id", "wake_time"),
    )

    def __repr__(self):
        return (
            f"<SleepLogRow(id={self.id}, user_id={self.user_id}, "
            f"date={self.date}, mood={self.mood})>"
        )
