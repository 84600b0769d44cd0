"""Service singleton shared by the API routes."""

import logging
import threading
from typing import Optional

from sleep_tracker.api.service import SleepTrackerService


logger = logging.getLogger(__name__)


class ServiceManager:
    """Thread-safe service singleton manager."""

    _instance: Optional[SleepTrackerService] = None
    _lock = threading.Lock()
    _initialized = False

    @classmethod
    def get_service(cls) -> SleepTrackerService:
        """Get or create the service instance (thread-safe)."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = SleepTrackerService()
                    cls._initialized = True
                    logger.info("SleepTrackerService initialized")
        return cls._instance

    @classmethod
    def shutdown(cls) -> None:
        """Shutdown the service and release resources."""
        with cls._lock:
            if cls._instance is not None:
                cls._instance.shutdown()
                cls._instance = None
                cls._initialized = False

                logger.info("SleepTrackerService shutdown complete")


def get_service() -> SleepTrackerService:
    """Get the service instance (FastAPI dependency)."""
    return ServiceManager.get_service()
