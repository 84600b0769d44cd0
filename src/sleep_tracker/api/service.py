"""Sleep Tracker Service - the operations the API routes call.

Wires the database, the user and sleep log stores and the statistics
engine, and converts API request models into store calls. Lookups that
find nothing return None; the routes turn that into 404.
"""

import logging
from datetime import date, timezone
from typing import List, Optional
from uuid import UUID

from sleep_tracker.api.schemas import CreateSleepLogRequest, CreateUserRequest
from sleep_tracker.common.clock import Clock, SystemClock
from sleep_tracker.common.config import Config, get_config
from sleep_tracker.common.exceptions import ValidationError
from sleep_tracker.data.schemas.pagination import Page, Pagination
from sleep_tracker.data.schemas.sleep_log import SleepLog
from sleep_tracker.data.schemas.sleep_stats import SleepStats
from sleep_tracker.data.schemas.user import User
from sleep_tracker.repositories.sleep_log_repository import SleepLogRepository
from sleep_tracker.repositories.user_repository import UserRepository
from sleep_tracker.stats.engine import SleepStatsEngine
from sleep_tracker.storage.database import Database


logger = logging.getLogger(__name__)


class SleepTrackerService:
    """Facade over the stores and the statistics engine."""

    def __init__(
        self,
        config: Optional[Config] = None,
        database: Optional[Database] = None,
        clock: Optional[Clock] = None,
    ):
        """Initialize the service.

        Args:
            config: Configuration. Global config if not provided.
            database: Database. Built from config.database_url if not provided.
            clock: Time source. System clock if not provided.
        """
        self.config = config or get_config()
        self.clock = clock or SystemClock()
        self.database = database or Database(
            self.config.database_url, echo=self.config.database_echo
        )
        self.database.create_all()

        self.users = UserRepository(self.database, self.clock)
        self.sleep_logs = SleepLogRepository(self.database, self.clock)
        self.stats_engine = SleepStatsEngine(self.users, self.sleep_logs, self.clock)

    def shutdown(self) -> None:
        """Release pooled database connections."""
        self.database.dispose()
        logger.info("SleepTrackerService database disposed")

    def today(self) -> date:
        return self.clock.now().astimezone(timezone.utc).date()

    # Users

    def create_user(self, request: CreateUserRequest) -> User:
        return self.users.create(request.name, request.time_zone)

    def list_users(self, page: int, page_size: int) -> Page[User]:
        return self.users.find_all(Pagination.from_page_and_size(page, page_size))

    def get_user(self, user_id: UUID) -> Optional[User]:
        return self.users.find_by_id(user_id)

    def update_user(self, user_id: UUID, request: CreateUserRequest) -> Optional[User]:
        return self.users.update_by_id(user_id, request.name, request.time_zone)

    # Sleep logs

    def _check_not_in_future(self, request: CreateSleepLogRequest) -> None:
        """Reject sessions that end after the current instant.

        bed_time < wake_time is already enforced by the request model, so
        this also keeps bed_time in the past.
        """
        now = self.clock.now()
        if request.wake_time > now:
            raise ValidationError(
                "wake_time must not be in the future",
                details={"wake_time": request.wake_time.isoformat(), "now": now.isoformat()},
            )

    def create_sleep_log(self, user_id: UUID, request: CreateSleepLogRequest) -> SleepLog:
        self._check_not_in_future(request)
        return self.sleep_logs.create(
            user_id, request.bed_time, request.wake_time, request.mood
        )

    def list_sleep_logs(self, user_id: UUID, page: int, page_size: int) -> List[SleepLog]:
        return self.sleep_logs.find_all(
            user_id, Pagination.from_page_and_size(page, page_size)
        )

    def get_latest_sleep_log(self, user_id: UUID) -> Optional[SleepLog]:
        return self.sleep_logs.find_latest(user_id)

    def get_sleep_log(self, user_id: UUID, sleep_log_id: UUID) -> Optional[SleepLog]:
        return self.sleep_logs.find_by_id(user_id, sleep_log_id)

    def update_sleep_log(
        self, user_id: UUID, sleep_log_id: UUID, request: CreateSleepLogRequest
    ) -> Optional[SleepLog]:
        self._check_not_in_future(request)
        return self.sleep_logs.update_by_id(
            user_id, sleep_log_id, request.bed_time, request.wake_time, request.mood
        )

    def delete_sleep_log(self, user_id: UUID, sleep_log_id: UUID) -> Optional[SleepLog]:
        return self.sleep_logs.delete_by_id(user_id, sleep_log_id)

    # Statistics

    def calculate_sleep_stats(
        self, user_id: UUID, days_back: Optional[int] = None
    ) -> Optional[SleepStats]:
        if days_back is None:
            days_back = self.config.default_days_back
        return self.stats_engine.calculate_sleep_stats(user_id, days_back)
