"""
Task lifecycle hooks called by the task service.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from timetrack.application.dto.base_dto import ErrorResponseDTO
from timetrack.application.dto.maintenance_dto import TaskDeletedResponseDTO, TaskLoggedHoursResponseDTO
from timetrack.application.use_cases.base_use_case import Clock, UnitOfWork
from timetrack.application.use_cases.task_use_cases import GetTaskLoggedHoursUseCase, HandleTaskDeletedUseCase
from timetrack.config import settings
from timetrack.infrastructure.auth import require_scope
from timetrack.infrastructure.web.dependencies import get_clock, get_unit_of_work

logger = logging.getLogger(__name__)

router = APIRouter()

TaskServiceCaller = Annotated[str, Depends(require_scope(settings.task_hook_scope))]


@router.post(
    "/{task_id}/deleted",
    response_model=TaskDeletedResponseDTO,
    responses={403: {"model": ErrorResponseDTO, "description": "Caller is not the task service"}},
)
async def task_deleted(
    task_id: str,
    caller_id: TaskServiceCaller,
    uow: Annotated[UnitOfWork, Depends(get_unit_of_work)],
    clock: Annotated[Clock, Depends(get_clock)],
):
    """Discard timers on the task and mark its shortcuts orphaned."""
    logger.info(f"Task {task_id} deletion reported by {caller_id}")
    return await HandleTaskDeletedUseCase(uow, clock).execute(task_id)


@router.get("/{task_id}/logged-hours", response_model=TaskLoggedHoursResponseDTO)
async def task_logged_hours(
    task_id: str,
    caller_id: TaskServiceCaller,
    uow: Annotated[UnitOfWork, Depends(get_unit_of_work)],
):
    """Hours logged on the task by all users."""
    return await GetTaskLoggedHoursUseCase(uow).execute(task_id)
