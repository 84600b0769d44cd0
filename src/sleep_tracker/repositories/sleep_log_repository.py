"""Sleep Log Store - CRUD over sleep sessions.

Every query is scoped to the owning user: a log id that belongs to
someone else behaves exactly like an unknown id.

Each mutation runs in one transaction that reads the owner's timezone,
derives the log date and writes the row. The (user_id, date) unique index
and the wake-after-bed CHECK are enforced by the store; their violations
surface as DuplicateKeyError and ConstraintViolationError.
"""

import logging
from datetime import date, datetime
from typing import List, Optional, Tuple
from uuid import UUID, uuid4
from zoneinfo import ZoneInfo

from sqlalchemy import select
from sqlalchemy.orm import Session

from sleep_tracker.common.clock import Clock, SystemClock, to_utc
from sleep_tracker.common.exceptions import ReferentialIntegrityError
from sleep_tracker.data.schemas.pagination import Pagination
from sleep_tracker.data.schemas.sleep_log import Mood, SleepLog, derive_log_date
from sleep_tracker.storage.database import Database
from sleep_tracker.storage.models import SleepLogRow, UserRow


logger = logging.getLogger(__name__)


def sleep_log_from_row(row: SleepLogRow, time_zone: str) -> SleepLog:
    """Build the domain model, expressing bed/wake times in the owner's zone."""
    tz = ZoneInfo(time_zone)
    bed_time = to_utc(row.bed_time).astimezone(tz)
    wake_time = to_utc(row.wake_time).astimezone(tz)
    return SleepLog(
        id=row.id,
        user_id=row.user_id,
        bed_time=bed_time,
        wake_time=wake_time,
        mood=row.mood,
        date=row.date,
        duration=wake_time - bed_time,
        created_at=to_utc(row.created_at),
        updated_at=to_utc(row.updated_at),
    )


def _naive_utc(value: datetime) -> datetime:
    return to_utc(value).replace(tzinfo=None)


def _select_with_time_zone():
    return (
        select(SleepLogRow, UserRow.time_zone)
        .join(UserRow, UserRow.id == SleepLogRow.user_id)
    )


class SleepLogRepository:
    """Persistence for sleep logs."""

    def __init__(self, database: Database, clock: Optional[Clock] = None):
        self._database = database
        self._clock = clock or SystemClock()

    def _now(self) -> datetime:
        return _naive_utc(self._clock.now())

    def _fetch_owned(
        self, session: Session, user_id: UUID, sleep_log_id: UUID
    ) -> Optional[Tuple[SleepLogRow, str]]:
        stmt = _select_with_time_zone().where(
            SleepLogRow.user_id == user_id,
            SleepLogRow.id == sleep_log_id,
        )
        result = session.execute(stmt).first()
        return (result[0], result[1]) if result is not None else None

    def create(
        self,
        user_id: UUID,
        bed_time: datetime,
        wake_time: datetime,
        mood: Mood,
    ) -> SleepLog:
        """Log a sleep session.

        Naive datetimes are taken as UTC.

        Raises:
            ReferentialIntegrityError: If the user does not exist
            ConstraintViolationError: If wake_time <= bed_time
            DuplicateKeyError: If the user already logged this date
        """
        now = self._now()

        with self._database.transaction() as session:
            user = session.get(UserRow, user_id)
            if user is None:
                raise ReferentialIntegrityError(
                    f"User {user_id} does not exist", details={"user_id": str(user_id)}
                )
            row = SleepLogRow(
                id=uuid4(),
                user_id=user_id,
                bed_time=_naive_utc(bed_time),
                wake_time=_naive_utc(wake_time),
                mood=mood,
                date=derive_log_date(to_utc(wake_time), ZoneInfo(user.time_zone)),
                created_at=now,
                updated_at=now,
            )
            session.add(row)
            session.flush()
            sleep_log = sleep_log_from_row(row, user.time_zone)

        logger.info(
            "Sleep log created",
            extra={"user_id": str(user_id), "sleep_log_id": str(sleep_log.id)},
        )
        return sleep_log

    def find_all(
        self, user_id: UUID, pagination: Optional[Pagination] = None
    ) -> List[SleepLog]:
        """Logs of one user, most recent wake time first."""
        stmt = (
            _select_with_time_zone()
            .where(SleepLogRow.user_id == user_id)
            .order_by(SleepLogRow.wake_time.desc())
        )
        if pagination is not None:
            stmt = stmt.limit(pagination.limit).offset(pagination.offset)

        with self._database.transaction() as session:
            return [sleep_log_from_row(row, tz) for row, tz in session.execute(stmt).all()]

    def find_latest(self, user_id: UUID) -> Optional[SleepLog]:
        logs = self.find_all(user_id, Pagination(limit=1, offset=0))
        return logs[0] if logs else None

    def find_by_id(self, user_id: UUID, sleep_log_id: UUID) -> Optional[SleepLog]:
        with self._database.transaction() as session:
            owned = self._fetch_owned(session, user_id, sleep_log_id)
            return sleep_log_from_row(*owned) if owned is not None else None

    def find_since(self, user_id: UUID, from_date: date) -> List[SleepLog]:
        """Logs of one user filed on or after from_date."""
        stmt = (
            _select_with_time_zone()
            .where(SleepLogRow.user_id == user_id, SleepLogRow.date >= from_date)
            .order_by(SleepLogRow.wake_time.desc())
        )
        with self._database.transaction() as session:
            return [sleep_log_from_row(row, tz) for row, tz in session.execute(stmt).all()]

    def update_by_id(
        self,
        user_id: UUID,
        sleep_log_id: UUID,
        bed_time: datetime,
        wake_time: datetime,
        mood: Mood,
    ) -> Optional[SleepLog]:
        """Replace bed time, wake time and mood, re-deriving the date.

        Returns:
            The updated log, or None if the user has no log with this id

        Raises:
            ConstraintViolationError: If wake_time <= bed_time
            DuplicateKeyError: If the new date clashes with another log
        """
        with self._database.transaction() as session:
            owned = self._fetch_owned(session, user_id, sleep_log_id)
            if owned is None:
                return None
            row, time_zone = owned
            row.bed_time = _naive_utc(bed_time)
            row.wake_time = _naive_utc(wake_time)
            row.mood = mood
            row.date = derive_log_date(to_utc(wake_time), ZoneInfo(time_zone))
            row.updated_at = self._now()
            session.flush()
            sleep_log = sleep_log_from_row(row, time_zone)

        logger.info(
            "Sleep log updated",
            extra={"user_id": str(user_id), "sleep_log_id": str(sleep_log_id)},
        )
        return sleep_log

    def delete_by_id(self, user_id: UUID, sleep_log_id: UUID) -> Optional[SleepLog]:
        """Delete a log and return it, or None if the user has no such log."""
        with self._database.transaction() as session:
            owned = self._fetch_owned(session, user_id, sleep_log_id)
            if owned is None:
                return None
            row, time_zone = owned
            sleep_log = sleep_log_from_row(row, time_zone)
            session.delete(row)

        logger.info(
            "Sleep log deleted",
            extra={"user_id": str(user_id), "sleep_log_id": str(sleep_log_id)},
        )
        return sleep_log
