"""Pagination - limit/offset windows over ordered listings."""

from dataclasses import dataclass
from typing import Generic, List, TypeVar

from sleep_tracker.common.constants import PaginationConstants
from sleep_tracker.common.exceptions import ValidationError


T = TypeVar("T")


@dataclass(frozen=True)
class Pagination:
    """A validated limit/offset pair.

    Bounds are checked on construction, so an invalid window never
    reaches the store.
    """
    limit: int = PaginationConstants.DEFAULT_PAGE_SIZE
    offset: int = 0

    def __post_init__(self):
        if self.offset < 0:
            raise ValidationError("Offset must be non-negative", details={"offset": self.offset})
        if self.offset > PaginationConstants.MAX_OFFSET:
            raise ValidationError(
                f"Offset must be less than or equal to {PaginationConstants.MAX_OFFSET}",
                details={"offset": self.offset},
            )
        if self.limit <= 0:
            raise ValidationError("Limit must be positive", details={"limit": self.limit})
        if self.limit > PaginationConstants.MAX_PAGE_SIZE:
            raise ValidationError(
                f"Limit must be less than or equal to {PaginationConstants.MAX_PAGE_SIZE}",
                details={"limit": self.limit},
            )

    @classmethod
    def from_page_and_size(
        cls,
        page: int = PaginationConstants.DEFAULT_PAGE,
        page_size: int = PaginationConstants.DEFAULT_PAGE_SIZE,
    ) -> "Pagination":
        """Convert a 1-based page number and page size into limit/offset.

        Raises:
            ValidationError: If page < 1, page_size is outside (0, 100]
                or the resulting offset is too large to store
        """
        if page <= 0:
            raise ValidationError("Page must be positive", details={"page": page})
        if page_size <= 0:
            raise ValidationError("Page size must be positive", details={"page_size": page_size})
        if page_size > PaginationConstants.MAX_PAGE_SIZE:
            raise ValidationError(
                f"Page size must be less than or equal to {PaginationConstants.MAX_PAGE_SIZE}",
                details={"page_size": page_size},
            )
        return cls(limit=page_size, offset=page_size * (page - 1))


@dataclass
class Page(Generic[T]):
    """One page of results plus the unfiltered total."""
    items: List[T]
    total_count: int
