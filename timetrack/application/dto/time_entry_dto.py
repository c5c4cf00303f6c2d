"""
Time Entry DTOs for the application layer.
Data Transfer Objects for timers, daily entries and their sessions.
"""

from datetime import date, datetime
from typing import List, Optional

from pydantic import Field, field_validator, model_validator

from timetrack.domain.models.time_entry import ActiveTimer, TimeEntry, TimeEntrySession
from .base_dto import ListRequestDTO, ListResponseDTO, RequestDTO, ResponseDTO, round_hours


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is not None and len(value.strip()) == 0:
        return None
    return value


# Request DTOs
class StartTimerRequestDTO(RequestDTO):
    """DTO for starting a timer."""

    task_id: Optional[str] = Field(default=None, description="Task ID (optional)")
    note: Optional[str] = Field(default=None, max_length=2000, description="Work note")
    shortcut_id: Optional[int] = Field(default=None, description="Shortcut the timer was started from")

    @field_validator('task_id', 'note')
    @classmethod
    def validate_blank(cls, v):
        return _blank_to_none(v)


class UpdateTimerRequestDTO(RequestDTO):
    """
    DTO for changing a running timer.
    Only fields present in the request are applied; send ``null`` to clear.
    """

    task_id: Optional[str] = Field(default=None, description="New task ID")
    note: Optional[str] = Field(default=None, max_length=2000, description="New note")

    @model_validator(mode='after')
    def validate_not_empty(self):
        if not self.model_fields_set:
            raise ValueError('At least one of task_id or note must be provided')
        return self


class CreateTimeEntryRequestDTO(RequestDTO):
    """DTO for manual time entry creation."""

    task_id: Optional[str] = Field(default=None, description="Task ID (optional)")
    entry_date: date = Field(alias="date", description="Calendar day the time belongs to")
    hours: float = Field(gt=0, description="Hours worked")
    is_billable: bool = Field(default=True, description="Whether time is billable")
    note: Optional[str] = Field(default=None, max_length=2000, description="Work note")

    @field_validator('task_id', 'note')
    @classmethod
    def validate_blank(cls, v):
        return _blank_to_none(v)


class UpdateTimeEntryRequestDTO(RequestDTO):
    """DTO for manual time entry updates."""

    task_id: Optional[str] = Field(default=None, description="New task ID")
    hours: Optional[float] = Field(default=None, gt=0, description="New total hours")


class CreateSessionRequestDTO(RequestDTO):
    """DTO for adding a session to an entry."""

    start_time: datetime = Field(description="Start timestamp")
    end_time: datetime = Field(description="End timestamp")
    is_billable: bool = Field(default=True, description="Whether time is billable")
    note: Optional[str] = Field(default=None, max_length=2000, description="Session note")


class UpdateSessionRequestDTO(RequestDTO):
    """DTO for editing a session."""

    start_time: datetime = Field(description="Start timestamp")
    end_time: datetime = Field(description="End timestamp")
    is_billable: Optional[bool] = Field(default=None, description="Whether time is billable")
    note: Optional[str] = Field(default=None, max_length=2000, description="Session note")


class ListTimeEntriesRequestDTO(ListRequestDTO):
    """DTO for listing a user's time entries."""

    task_id: Optional[str] = Field(default=None, description="Filter by task")
    project_id: Optional[str] = Field(default=None, description="Filter by project")
    start_date: Optional[date] = Field(default=None, description="Filter from date")
    end_date: Optional[date] = Field(default=None, description="Filter to date")


# Response DTOs
class ActiveTimerResponseDTO(ResponseDTO):
    """The running timer with its elapsed time."""

    id: Optional[int] = None
    user_id: str
    task_id: Optional[str] = None
    note: Optional[str] = None
    start_time: datetime
    elapsed_seconds: int

    @classmethod
    def from_domain(cls, timer: ActiveTimer, now: Optional[datetime] = None) -> "ActiveTimerResponseDTO":
        return cls(
            id=timer.id,
            user_id=timer.user_id,
            task_id=timer.task_id,
            note=timer.note,
            start_time=timer.start_time,
            elapsed_seconds=timer.elapsed_seconds(now),
        )


class TimeEntrySessionResponseDTO(ResponseDTO):
    id: Optional[int] = None
    time_entry_id: Optional[int] = None
    start_time: datetime
    end_time: datetime
    duration_hours: float
    is_billable: bool
    note: Optional[str] = None

    @classmethod
    def from_domain(cls, session: TimeEntrySession) -> "TimeEntrySessionResponseDTO":
        return cls(
            id=session.id,
            time_entry_id=session.time_entry_id,
            start_time=session.start_time,
            end_time=session.end_time,
            duration_hours=round_hours(session.duration_hours),
            is_billable=session.is_billable,
            note=session.note,
        )


class TimeEntryResponseDTO(ResponseDTO):
    """A daily entry with its sessions."""

    id: Optional[int] = None
    user_id: str
    task_id: Optional[str] = None
    entry_date: date
    total_hours: float
    billable_hours: float
    non_billable_hours: float
    is_timer_based: bool
    sessions: List[TimeEntrySessionResponseDTO] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, entry: TimeEntry) -> "TimeEntryResponseDTO":
        return cls(
            id=entry.id,
            user_id=entry.user_id,
            task_id=entry.task_id,
            entry_date=entry.entry_date,
            total_hours=round_hours(entry.total_hours),
            billable_hours=round_hours(entry.billable_hours),
            non_billable_hours=round_hours(entry.non_billable_hours),
            is_timer_based=entry.is_timer_based,
            sessions=[TimeEntrySessionResponseDTO.from_domain(s) for s in entry.sessions],
            created_at=entry.created_at,
            updated_at=entry.updated_at,
        )


class TimeEntryListResponseDTO(ListResponseDTO[TimeEntryResponseDTO]):
    pass


class DeleteSessionResponseDTO(ResponseDTO):
    """Result of removing a session; the entry is gone when it was the last one."""

    entry_deleted: bool
    time_entry: Optional[TimeEntryResponseDTO] = None


# Reports
class ProjectHoursDTO(ResponseDTO):
    project_id: Optional[str] = None
    project_name: Optional[str] = None
    hours: float
    entries: int


class ReportTotalsDTO(ResponseDTO):
    total_hours: float
    billable_hours: float
    non_billable_hours: float
    entry_count: int
    by_project: List[ProjectHoursDTO] = Field(default_factory=list)


class DailyReportResponseDTO(ReportTotalsDTO):
    date: date


class DayHoursDTO(ResponseDTO):
    date: date
    hours: float
    entries: int


class WeeklyReportResponseDTO(ReportTotalsDTO):
    week_start: date
    week_end: date
    by_day: List[DayHoursDTO]


class WeekHoursDTO(ResponseDTO):
    week_number: int
    hours: float
    entries: int


class MonthlyReportResponseDTO(ReportTotalsDTO):
    year: int
    month: int
    month_start: date
    month_end: date
    by_week: List[WeekHoursDTO]


# Time cards
class TimeCardUserDTO(ResponseDTO):
    id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    timezone: Optional[str] = None


class TimeCardDaySummaryDTO(ResponseDTO):
    date: date
    total_hours: float
    billable_hours: float


class TimeCardSessionDTO(ResponseDTO):
    task_id: Optional[str] = None
    task_title: Optional[str] = None
    project_id: Optional[str] = None
    project_name: Optional[str] = None
    project_code: Optional[str] = None
    start_time: datetime
    end_time: datetime
    duration_hours: float
    is_billable: bool
    note: Optional[str] = None


class TimeCardDayDetailDTO(ResponseDTO):
    date: date
    sessions: List[TimeCardSessionDTO]


class TimeCardDTO(ResponseDTO):
    """One user's hours per day plus the sessions behind them."""

    user: TimeCardUserDTO
    summary: List[TimeCardDaySummaryDTO]
    details: List[TimeCardDayDetailDTO]


class TimeCardExportResponseDTO(ResponseDTO):
    start_date: date
    end_date: date
    time_cards: List[TimeCardDTO]
