"""API routers."""

from sleep_tracker.api.routes import sleep_logs, users

__all__ = ["sleep_logs", "users"]
