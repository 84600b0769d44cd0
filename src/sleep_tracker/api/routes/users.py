"""User routes - /api/v1/users."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from sleep_tracker.api.dependencies import get_service
from sleep_tracker.api.schemas import CreateUserRequest, ErrorResponse
from sleep_tracker.api.service import SleepTrackerService
from sleep_tracker.common.constants import APIConstants, PaginationConstants
from sleep_tracker.data.schemas.user import User


router = APIRouter(prefix=f"{APIConstants.PREFIX}/users", tags=["users"])


@router.post(
    "",
    response_model=User,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse, "description": "Name already taken"}},
    summary="Create a user",
)
def create_user(
    request: CreateUserRequest,
    service: SleepTrackerService = Depends(get_service),
) -> User:
    return service.create_user(request)


@router.get("", response_model=List[User], summary="List users, newest first")
def list_users(
    response: Response,
    page: int = Query(default=PaginationConstants.DEFAULT_PAGE),
    page_size: int = Query(default=PaginationConstants.DEFAULT_PAGE_SIZE, alias="page-size"),
    service: SleepTrackerService = Depends(get_service),
) -> List[User]:
    """List users; the total number of users is sent in X-Total-Count."""
    result = service.list_users(page, page_size)
    response.headers[APIConstants.TOTAL_COUNT_HEADER] = str(result.total_count)
    return result.items


@router.get(
    "/{user_id}",
    response_model=User,
    responses={404: {"model": ErrorResponse}},
    summary="Get a user",
)
def get_user(
    user_id: UUID,
    service: SleepTrackerService = Depends(get_service),
) -> User:
    user = service.get_user(user_id)
    if user is None:
        raise HTTPException(status_code=404, detail=f"User {user_id} not found")
    return user


@router.put(
    "/{user_id}",
    response_model=User,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
    summary="Rename a user or change their timezone",
)
def update_user(
    user_id: UUID,
    request: CreateUserRequest,
    service: SleepTrackerService = Depends(get_service),
) -> User:
    user = service.update_user(user_id, request)
    if user is None:
        raise HTTPException(status_code=404, detail=f"User {user_id} not found")
    return user
