"""User Store - identity, name normalization and timezone association."""

import logging
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import func, select

from sleep_tracker.common.clock import Clock, SystemClock, resolve_time_zone, to_utc
from sleep_tracker.common.exceptions import ValidationError
from sleep_tracker.data.schemas.pagination import Page, Pagination
from sleep_tracker.data.schemas.user import User, normalize_name
from sleep_tracker.storage.database import Database
from sleep_tracker.storage.models import UserRow


logger = logging.getLogger(__name__)


def user_from_row(row: UserRow) -> User:
    return User(
        id=row.id,
        name=row.name,
        time_zone=row.time_zone,
        created_at=to_utc(row.created_at),
        updated_at=to_utc(row.updated_at),
    )


def _checked_name(name: str) -> str:
    normalized = normalize_name(name)
    if not normalized:
        raise ValidationError("Name must not be blank", details={"name": name})
    return normalized


class UserRepository:
    """Persistence for users.

    Names are trimmed and lower-cased before they are written, so the
    unique index applies to the normalized form. A clash raises
    DuplicateKeyError from the enclosing transaction.
    """

    def __init__(self, database: Database, clock: Optional[Clock] = None):
        self._database = database
        self._clock = clock or SystemClock()

    def _now(self):
        return to_utc(self._clock.now()).replace(tzinfo=None)

    def create(self, name: str, time_zone: str) -> User:
        """Create a user.

        Raises:
            ValidationError: If the name is blank or the timezone unknown
            DuplicateKeyError: If the normalized name is taken
        """
        normalized = _checked_name(name)
        resolve_time_zone(time_zone)
        now = self._now()

        with self._database.transaction() as session:
            row = UserRow(
                id=uuid4(),
                name=normalized,
                time_zone=time_zone,
                created_at=now,
                updated_at=now,
            )
            session.add(row)
            session.flush()
            user = user_from_row(row)

        logger.info("User created", extra={"user_id": str(user.id)})
        return user

    def find_all(self, pagination: Optional[Pagination] = None) -> Page[User]:
        """Newest users first, plus the total number of users."""
        stmt = select(UserRow).order_by(UserRow.created_at.desc(), UserRow.id.desc())
        if pagination is not None:
            stmt = stmt.limit(pagination.limit).offset(pagination.offset)

        with self._database.transaction() as session:
            rows = session.scalars(stmt).all()
            total = session.scalar(select(func.count()).select_from(UserRow))

        return Page(items=[user_from_row(row) for row in rows], total_count=total or 0)

    def find_by_id(self, user_id: UUID) -> Optional[User]:
        with self._database.transaction() as session:
            row = session.get(UserRow, user_id)
            return user_from_row(row) if row is not None else None

    def update_by_id(self, user_id: UUID, name: str, time_zone: str) -> Optional[User]:
        """Rename a user and/or change their timezone.

        Returns:
            The updated user, or None if no user has this id

        Raises:
            ValidationError: If the name is blank or the timezone unknown
            DuplicateKeyError: If another user already has the normalized name
        """
        normalized = _checked_name(name)
        resolve_time_zone(time_zone)

        with self._database.transaction() as session:
            row = session.get(UserRow, user_id)
            if row is None:
                return None
            row.name = normalized
            row.time_zone = time_zone
            row.updated_at = self._now()
            session.flush()
            user = user_from_row(row)

        logger.info("User updated", extra={"user_id": str(user.id)})
        return user
