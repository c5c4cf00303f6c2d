"""
Time tracking router.
Handles daily entries, their sessions, and time reports.
"""

from datetime import date
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query, status

from timetrack.application.dto.base_dto import ErrorResponseDTO
from timetrack.application.dto.time_entry_dto import (
    CreateSessionRequestDTO,
    CreateTimeEntryRequestDTO,
    DailyReportResponseDTO,
    DeleteSessionResponseDTO,
    ListTimeEntriesRequestDTO,
    MonthlyReportResponseDTO,
    TimeCardExportResponseDTO,
    TimeEntryListResponseDTO,
    TimeEntryResponseDTO,
    UpdateSessionRequestDTO,
    UpdateTimeEntryRequestDTO,
    WeeklyReportResponseDTO,
)
from timetrack.application.use_cases.base_use_case import UnitOfWork
from timetrack.application.use_cases.time_entry_use_cases import (
    AddSessionUseCase,
    CreateManualTimeEntryUseCase,
    DeleteSessionUseCase,
    DeleteTimeEntryUseCase,
    EditSessionUseCase,
    ExportTimeCardsUseCase,
    GetDailyReportUseCase,
    GetMonthlyReportUseCase,
    GetTimeEntryUseCase,
    GetWeeklyReportUseCase,
    ListTimeEntriesUseCase,
    UpdateTimeEntryUseCase,
)
from timetrack.config import settings
from timetrack.infrastructure.auth import get_current_user_id, require_scope
from timetrack.infrastructure.web.dependencies import get_unit_of_work


router = APIRouter()

UserId = Annotated[str, Depends(get_current_user_id)]
Uow = Annotated[UnitOfWork, Depends(get_unit_of_work)]
PayrollCaller = Annotated[str, Depends(require_scope(settings.timecard_export_scope))]


@router.get("", response_model=TimeEntryListResponseDTO)
async def list_time_entries(
    user_id: UserId,
    uow: Uow,
    task_id: Optional[str] = Query(None, description="Filter by task ID"),
    project_id: Optional[str] = Query(None, description="Filter by project ID"),
    start_date: Optional[date] = Query(None, description="Filter from date"),
    end_date: Optional[date] = Query(None, description="Filter to date"),
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(50, ge=1, le=100, description="Items per page"),
):
    """
    List time entries for the authenticated user, newest day first.

    - **task_id**: Filter by specific task
    - **project_id**: Filter by the tasks of a project
    - **start_date** / **end_date**: Inclusive date window
    """
    request = ListTimeEntriesRequestDTO(
        task_id=task_id,
        project_id=project_id,
        start_date=start_date,
        end_date=end_date,
        page=page,
        page_size=page_size,
    )
    return await ListTimeEntriesUseCase(uow).execute(user_id, request)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=TimeEntryResponseDTO,
    responses={409: {"model": ErrorResponseDTO, "description": "Entry already exists for the task and day"}},
)
async def create_time_entry(request: CreateTimeEntryRequestDTO, user_id: UserId, uow: Uow):
    """
    Create a manual time entry.

    - **task_id**: Task to log time for (optional)
    - **date**: Day the time belongs to
    - **hours**: Hours worked
    - **is_billable**: Whether this time is billable

    Fails with 409 if an entry already exists for the task and day.
    """
    return await CreateManualTimeEntryUseCase(uow).execute(user_id, request)


@router.get("/reports/daily", response_model=DailyReportResponseDTO)
async def daily_report(user_id: UserId, uow: Uow, day: date = Query(..., alias="date")):
    return await GetDailyReportUseCase(uow).execute(user_id, day)


@router.get("/reports/weekly", response_model=WeeklyReportResponseDTO)
async def weekly_report(user_id: UserId, uow: Uow, week_start: date = Query(...)):
    return await GetWeeklyReportUseCase(uow).execute(user_id, week_start)


@router.get("/reports/monthly", response_model=MonthlyReportResponseDTO)
async def monthly_report(
    user_id: UserId,
    uow: Uow,
    year: int = Query(..., ge=1970, le=9999),
    month: int = Query(..., ge=1, le=12),
):
    return await GetMonthlyReportUseCase(uow).execute(user_id, year, month)


@router.get(
    "/timecards",
    response_model=TimeCardExportResponseDTO,
    responses={403: {"model": ErrorResponseDTO, "description": "Token lacks the export scope"}},
)
async def export_timecards(
    caller_id: PayrollCaller,
    uow: Uow,
    start_date: date = Query(..., description="First day, inclusive"),
    end_date: date = Query(..., description="Last day, inclusive"),
):
    """
    Export time cards of every user with time in the range: hours per day
    and the sessions behind them. For payroll systems holding a service token.
    """
    return await ExportTimeCardsUseCase(uow).execute(start_date, end_date)


@router.put("/sessions/{session_id}", response_model=TimeEntryResponseDTO)
async def edit_session(session_id: int, request: UpdateSessionRequestDTO, user_id: UserId, uow: Uow):
    """Move a session or change its billable flag or note."""
    return await EditSessionUseCase(uow).execute(user_id, session_id, request)


@router.delete("/sessions/{session_id}", response_model=DeleteSessionResponseDTO)
async def delete_session(session_id: int, user_id: UserId, uow: Uow):
    """Delete a session. Deleting the last one deletes its entry."""
    return await DeleteSessionUseCase(uow).execute(user_id, session_id)


@router.get("/{entry_id}", response_model=TimeEntryResponseDTO)
async def get_time_entry(entry_id: int, user_id: UserId, uow: Uow):
    return await GetTimeEntryUseCase(uow).execute(user_id, entry_id)


@router.patch("/{entry_id}", response_model=TimeEntryResponseDTO)
async def update_time_entry(entry_id: int, request: UpdateTimeEntryRequestDTO, user_id: UserId, uow: Uow):
    """
    Update hours or task of a manual entry.
    Timer-based entries are edited through their sessions.
    """
    return await UpdateTimeEntryUseCase(uow).execute(user_id, entry_id, request)


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_time_entry(entry_id: int, user_id: UserId, uow: Uow):
    await DeleteTimeEntryUseCase(uow).execute(user_id, entry_id)


@router.post("/{entry_id}/sessions", status_code=status.HTTP_201_CREATED, response_model=TimeEntryResponseDTO)
async def add_session(entry_id: int, request: CreateSessionRequestDTO, user_id: UserId, uow: Uow):
    """Add a hand-entered session; totals are recomputed."""
    return await AddSessionUseCase(uow).execute(user_id, entry_id, request)
