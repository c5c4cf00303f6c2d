"""
Timer router.
Start, inspect, change, stop and discard the user's running timer.
"""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, status

from timetrack.application.dto.base_dto import ErrorResponseDTO
from timetrack.application.dto.time_entry_dto import (
    ActiveTimerResponseDTO,
    StartTimerRequestDTO,
    TimeEntryResponseDTO,
    UpdateTimerRequestDTO,
)
from timetrack.application.use_cases.base_use_case import Clock, UnitOfWork
from timetrack.application.use_cases.timer_use_cases import (
    DiscardTimerUseCase,
    GetActiveTimerUseCase,
    StartTimerUseCase,
    StopTimerUseCase,
    UpdateRunningTimerUseCase,
)
from timetrack.infrastructure.auth import get_current_user_id
from timetrack.infrastructure.web.dependencies import get_clock, get_unit_of_work


router = APIRouter()

UserId = Annotated[str, Depends(get_current_user_id)]
Uow = Annotated[UnitOfWork, Depends(get_unit_of_work)]
Now = Annotated[Clock, Depends(get_clock)]


@router.get("", response_model=Optional[ActiveTimerResponseDTO])
async def get_active_timer(user_id: UserId, uow: Uow, clock: Now):
    """
    Get the running timer, or null when idle.
    Elapsed time is computed at read time.
    """
    return await GetActiveTimerUseCase(uow, clock).execute(user_id)


@router.post(
    "/start",
    status_code=status.HTTP_201_CREATED,
    response_model=ActiveTimerResponseDTO,
    responses={409: {"model": ErrorResponseDTO, "description": "A timer is already running"}},
)
async def start_timer(request: StartTimerRequestDTO, user_id: UserId, uow: Uow, clock: Now):
    """
    Start a timer.

    - **task_id**: Task to track (optional)
    - **note**: Work note (optional)
    - **shortcut_id**: Shortcut the timer was started from (optional)

    Fails with 409 when a timer is already running.
    """
    return await StartTimerUseCase(uow, clock=clock).execute(user_id, request)


@router.patch("", response_model=ActiveTimerResponseDTO)
async def update_running_timer(request: UpdateTimerRequestDTO, user_id: UserId, uow: Uow, clock: Now):
    """Change the running timer's task or note."""
    return await UpdateRunningTimerUseCase(uow, clock=clock).execute(user_id, request)


@router.post("/stop", response_model=TimeEntryResponseDTO)
async def stop_timer(user_id: UserId, uow: Uow, clock: Now):
    """Stop the timer and record its interval on the day's entry."""
    return await StopTimerUseCase(uow, clock=clock).execute(user_id)


@router.post("/discard", status_code=status.HTTP_204_NO_CONTENT)
async def discard_timer(user_id: UserId, uow: Uow, clock: Now):
    """Drop the running timer without recording time."""
    await DiscardTimerUseCase(uow, clock=clock).execute(user_id)
