"""Sleep log routes - /api/v1/users/{user_id}/sleep-logs."""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status

from sleep_tracker.api.dependencies import get_service
from sleep_tracker.api.schemas import CreateSleepLogRequest, ErrorResponse
from sleep_tracker.api.service import SleepTrackerService
from sleep_tracker.common.constants import APIConstants, PaginationConstants
from sleep_tracker.data.schemas.sleep_log import SleepLog
from sleep_tracker.data.schemas.sleep_stats import SleepStats


router = APIRouter(
    prefix=f"{APIConstants.PREFIX}/users/{{user_id}}/sleep-logs",
    tags=["sleep-logs"],
)


def _found(sleep_log: Optional[SleepLog], sleep_log_id: UUID) -> SleepLog:
    if sleep_log is None:
        raise HTTPException(status_code=404, detail=f"Sleep log {sleep_log_id} not found")
    return sleep_log


@router.post(
    "",
    response_model=SleepLog,
    status_code=status.HTTP_201_CREATED,
    responses={
        404: {"model": ErrorResponse, "description": "Unknown user"},
        409: {"model": ErrorResponse, "description": "Date already logged"},
    },
    summary="Log a sleep session",
)
def create_sleep_log(
    user_id: UUID,
    request: CreateSleepLogRequest,
    service: SleepTrackerService = Depends(get_service),
) -> SleepLog:
    return service.create_sleep_log(user_id, request)


@router.get("", response_model=List[SleepLog], summary="List sleep logs, most recent first")
def list_sleep_logs(
    user_id: UUID,
    page: int = Query(default=PaginationConstants.DEFAULT_PAGE),
    page_size: int = Query(default=PaginationConstants.DEFAULT_PAGE_SIZE, alias="page-size"),
    service: SleepTrackerService = Depends(get_service),
) -> List[SleepLog]:
    return service.list_sleep_logs(user_id, page, page_size)


@router.get(
    "/latest",
    response_model=SleepLog,
    responses={404: {"model": ErrorResponse}},
    summary="Most recent sleep log",
)
def get_latest_sleep_log(
    user_id: UUID,
    service: SleepTrackerService = Depends(get_service),
) -> SleepLog:
    sleep_log = service.get_latest_sleep_log(user_id)
    if sleep_log is None:
        raise HTTPException(status_code=404, detail=f"No sleep logs for user {user_id}")
    return sleep_log


@router.get(
    "/stats",
    response_model=SleepStats,
    responses={404: {"model": ErrorResponse, "description": "No logs in the window"}},
    summary="Sleep statistics over the trailing window",
)
def calculate_sleep_stats(
    user_id: UUID,
    days_back: Optional[int] = Query(default=None, alias="days-back", ge=1),
    service: SleepTrackerService = Depends(get_service),
) -> SleepStats:
    stats = service.calculate_sleep_stats(user_id, days_back)
    if stats is None:
        raise HTTPException(
            status_code=404, detail=f"No sleep logs in the window for user {user_id}"
        )
    return stats


@router.get(
    "/{sleep_log_id}",
    response_model=SleepLog,
    responses={404: {"model": ErrorResponse}},
    summary="Get a sleep log",
)
def get_sleep_log(
    user_id: UUID,
    sleep_log_id: UUID,
    service: SleepTrackerService = Depends(get_service),
) -> SleepLog:
    return _found(service.get_sleep_log(user_id, sleep_log_id), sleep_log_id)


@router.put(
    "/{sleep_log_id}",
    response_model=SleepLog,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
    summary="Replace a sleep log",
)
def update_sleep_log(
    user_id: UUID,
    sleep_log_id: UUID,
    request: CreateSleepLogRequest,
    service: SleepTrackerService = Depends(get_service),
) -> SleepLog:
    return _found(service.update_sleep_log(user_id, sleep_log_id, request), sleep_log_id)


@router.delete(
    "/{sleep_log_id}",
    response_model=SleepLog,
    responses={404: {"model": ErrorResponse}},
    summary="Delete a sleep log and return it",
)
def delete_sleep_log(
    user_id: UUID,
    sleep_log_id: UUID,
    service: SleepTrackerService = Depends(get_service),
) -> SleepLog:
    return _found(service.delete_sleep_log(user_id, sleep_log_id), sleep_log_id)
