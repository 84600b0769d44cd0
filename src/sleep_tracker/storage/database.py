"""Database - SQLAlchemy engine and transaction management.

Thread Safety:
- The engine and its connection pool are shared across threads
- Each transaction() call opens its own session; sessions are not shared
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from sleep_tracker.common.exceptions import (
    ConstraintViolationError,
    DuplicateKeyError,
    ReferentialIntegrityError,
    StorageError,
)
from sleep_tracker.storage.models import Base


logger = logging.getLogger(__name__)

# PostgreSQL SQLSTATE codes for integrity violations
_SQLSTATE_ERRORS = {
    "23505": DuplicateKeyError,
    "23503": ReferentialIntegrityError,
    "23514": ConstraintViolationError,
    "23502": ConstraintViolationError,
}

# SQLite reports the violated constraint kind only in the message
_SQLITE_MESSAGE_ERRORS = (
    ("UNIQUE constraint failed", DuplicateKeyError),
    ("FOREIGN KEY constraint failed", ReferentialIntegrityError),
    ("CHECK constraint failed", ConstraintViolationError),
    ("NOT NULL constraint failed", ConstraintViolationError),
)


def translate_integrity_error(exc: IntegrityError) -> StorageError:
    """Map a driver integrity error onto the storage error taxonomy."""
    original = exc.orig
    message = str(original) if original is not None else str(exc)

    sqlstate = getattr(original, "sqlstate", None) or getattr(original, "pgcode", None)
    if sqlstate in _SQLSTATE_ERRORS:
        return _SQLSTATE_ERRORS[sqlstate](message, details={"sqlstate": sqlstate})

    for marker, error_cls in _SQLITE_MESSAGE_ERRORS:
        if marker in message:
            return error_cls(message)

    return StorageError(message)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(url: str, echo: bool = False) -> Engine:
    """Create an engine suited to the database behind the URL."""
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:") or "mode=memory" in url:
            # One shared connection, otherwise each session sees an empty database
            kwargs["poolclass"] = StaticPool
        engine = create_engine(url, echo=echo, **kwargs)
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    return create_engine(
        url,
        echo=echo,
        pool_size=10,
        max_overflow=20,
        pool_recycle=3600,
        pool_pre_ping=True,
    )


class Database:
    """Owns the engine and hands out transactional sessions."""

    def __init__(self, url: str, echo: bool = False, engine: Optional[Engine] = None):
        self.url = url
        self.engine = engine or build_engine(url, echo=echo)
        self._sessionmaker = sessionmaker(bind=self.engine, expire_on_commit=False)

    def create_all(self) -> None:
        """Create any missing tables."""
        Base.metadata.create_all(self.engine)

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """Run a unit of work in one transaction.

        Commits when the block exits normally and rolls back otherwise.
        Integrity failures are re-raised as StorageError subclasses.
        """
        session = self._sessionmaker()
        try:
            yield session
            session.commit()
        except IntegrityError as exc:
            session.rollback()
            error = translate_integrity_error(exc)
            logger.warning(
                "Storage rejected write",
                extra={"error": error.code, "detail": error.message},
            )
            raise error from exc
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def dispose(self) -> None:
        """Close all pooled connections."""
        self.engine.dispose()
