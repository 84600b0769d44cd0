"""Centralized constants for the sleep tracker."""


# ===== PAGINATION =====
class PaginationConstants:
    DEFAULT_PAGE = 1
    DEFAULT_PAGE_SIZE = 20
    MAX_PAGE_SIZE = 100
    # Largest offset a 64-bit SQL integer can bind
    MAX_OFFSET = 2**63 - 1


# ===== USERS =====
class UserConstants:
    NAME_PATTERN = r"^[a-zA-Z0-9_-]{1,50}$"
    NAME_MAX_LENGTH = 50
    DEFAULT_TIME_ZONE = "UTC"
    TIME_ZONE_MAX_LENGTH = 64


# ===== STATISTICS =====
class StatsConstants:
    DEFAULT_DAYS_BACK = 30
    SECONDS_PER_DAY = 24 * 60 * 60


# ===== API =====
class APIConstants:
    PREFIX = "/api/v1"
    TOTAL_COUNT_HEADER = "X-Total-Count"
    REQUEST_ID_HEADER = "X-Request-ID"
    SERVICE_NAME = "sleep-tracker-api"
