"""
Time Entry use cases for the application layer.
Manual entries, session edits, listing and reports.
"""

import logging
from datetime import date, timedelta
from typing import Optional

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
from timetrack.application.use_cases.base_use_case import (
    Clock,
    CommandUseCase,
    QueryUseCase,
    Repositories,
    UnitOfWork,
)
from timetrack.application.use_cases.timer_use_cases import default_timer_service, ensure_task_exists
from timetrack.domain.events.time_entry_events import TimeEntryCreated, TimeEntryDeleted
from timetrack.domain.models.base import ConflictError, NotFoundError, ValidationError
from timetrack.domain.models.capacity import DateRange
from timetrack.domain.models.time_entry import TimeEntry
from timetrack.domain.services.report_service import TimeReportService
from timetrack.domain.services.timer_service import TimerService

logger = logging.getLogger(__name__)


def load_owned_entry(repos: Repositories, user_id: str, entry_id: int, for_update: bool = False) -> TimeEntry:
    """Entry by id; other users' entries look missing."""
    entry = repos.time_entries.get_by_id(entry_id, for_update=for_update)
    if entry is None or entry.user_id != user_id:
        raise NotFoundError("TimeEntry", entry_id)
    return entry


def load_entry_for_session(repos: Repositories, user_id: str, session_id: int) -> TimeEntry:
    entry = repos.time_entries.get_by_session_id(session_id, for_update=True)
    if entry is None or entry.user_id != user_id:
        raise NotFoundError("Session", session_id)
    return entry


class TimeEntryCommand(CommandUseCase):

    def __init__(
        self,
        uow: UnitOfWork,
        timer_service: Optional[TimerService] = None,
        clock: Optional[Clock] = None,
    ):
        super().__init__(uow, clock)
        self.timer_service = timer_service or default_timer_service()


class CreateManualTimeEntryUseCase(TimeEntryCommand):
    """Use case for creating a manual time entry."""

    async def execute(self, user_id: str, request: CreateTimeEntryRequestDTO) -> TimeEntryResponseDTO:
        self.timer_service.validate_manual_hours(request.hours)

        def work(repos: Repositories):
            ensure_task_exists(repos, request.task_id)

            if repos.time_entries.find_by_key(user_id, request.task_id, request.entry_date) is not None:
                raise ConflictError(
                    "A time entry already exists for this task and date; add a session to it instead"
                )

            entry = self.timer_service.create_manual_entry(
                user_id=user_id,
                task_id=request.task_id,
                entry_date=request.entry_date,
                hours=request.hours,
                is_billable=request.is_billable,
                note=request.note,
                timezone_name=repos.directory.get_user_timezone(user_id),
            )
            saved = repos.time_entries.add(entry)
            self.record_task_hours(repos, saved.task_id)

            self.record_event(TimeEntryCreated(
                time_entry_id=saved.id,
                user_id=user_id,
                task_id=saved.task_id,
                hours=saved.total_hours,
                entry_date=saved.entry_date,
            ))
            return saved

        entry = await self._commit(work)
        logger.info(f"Manual entry {entry.id} created for user {user_id}: {entry.total_hours:.2f}h on {entry.entry_date}")
        return TimeEntryResponseDTO.from_domain(entry)


class ListTimeEntriesUseCase(QueryUseCase):
    """Use case for listing a user's entries, newest day first."""

    async def execute(self, user_id: str, request: ListTimeEntriesRequestDTO) -> TimeEntryListResponseDTO:
        if request.start_date and request.end_date and request.end_date < request.start_date:
            raise ValidationError("end_date must be on or after start_date", "end_date")

        def work(repos: Repositories):
            task_ids = None
            if request.project_id:
                task_ids = repos.directory.task_ids_for_project(request.project_id)
                if request.task_id:
                    task_ids = [t for t in task_ids if t == request.task_id]
            elif request.task_id:
                task_ids = [request.task_id]

            if task_ids == []:
                return [], 0

            return repos.time_entries.list_for_user(
                user_id,
                offset=request.offset,
                limit=request.limit,
                task_ids=task_ids,
                start_date=request.start_date,
                end_date=request.end_date,
            )

        entries, total = await self._transaction(work)
        return TimeEntryListResponseDTO.create(
            items=[TimeEntryResponseDTO.from_domain(e) for e in entries],
            total=total,
            page=request.page,
            page_size=request.page_size,
        )


class GetTimeEntryUseCase(QueryUseCase):

    async def execute(self, user_id: str, entry_id: int) -> TimeEntryResponseDTO:
        entry = await self._transaction(lambda repos: load_owned_entry(repos, user_id, entry_id))
        return TimeEntryResponseDTO.from_domain(entry)


class UpdateTimeEntryUseCase(TimeEntryCommand):
    """
    Edit hours or task of a manual entry.
    Timer-based entries only change through their sessions.
    """

    async def execute(
        self,
        user_id: str,
        entry_id: int,
        request: UpdateTimeEntryRequestDTO,
    ) -> TimeEntryResponseDTO:
        fields = request.model_fields_set
        if not fields:
            raise ValidationError("Nothing to update")
        if request.hours is not None:
            self.timer_service.validate_manual_hours(request.hours)

        def work(repos: Repositories):
            entry = load_owned_entry(repos, user_id, entry_id, for_update=True)
            previous_task_id = entry.task_id

            if "task_id" in fields and request.task_id != entry.task_id:
                entry.reassign_task(request.task_id)
                ensure_task_exists(repos, request.task_id)
                clash = repos.time_entries.find_by_key(user_id, request.task_id, entry.entry_date)
                if clash is not None and clash.id != entry.id:
                    raise ConflictError("A time entry already exists for this task and date")

            if request.hours is not None:
                entry.set_manual_hours(request.hours)

            saved = repos.time_entries.save(entry)
            self.record_task_hours(repos, previous_task_id, saved.task_id)
            return saved

        entry = await self._commit(work)
        logger.info(f"Entry {entry_id} updated by user {user_id}: {sorted(fields)}")
        return TimeEntryResponseDTO.from_domain(entry)


class DeleteTimeEntryUseCase(CommandUseCase):

    async def execute(self, user_id: str, entry_id: int) -> None:
        def work(repos: Repositories):
            entry = load_owned_entry(repos, user_id, entry_id, for_update=True)
            repos.time_entries.delete(entry.id)
            self.record_event(TimeEntryDeleted(time_entry_id=entry.id, user_id=user_id))
            self.record_task_hours(repos, entry.task_id)

        await self._commit(work)
        logger.info(f"Entry {entry_id} deleted by user {user_id}")


class AddSessionUseCase(TimeEntryCommand):
    """Append a hand-entered session to an existing entry."""

    async def execute(
        self,
        user_id: str,
        entry_id: int,
        request: CreateSessionRequestDTO,
    ) -> TimeEntryResponseDTO:
        session = self.timer_service.build_session(
            request.start_time, request.end_time, request.is_billable, request.note
        )

        def work(repos: Repositories):
            entry = load_owned_entry(repos, user_id, entry_id, for_update=True)
            self.timer_service.ensure_on_entry_day(
                session.start_time, entry.entry_date, repos.directory.get_user_timezone(user_id)
            )
            entry.add_session(session)
            saved = repos.time_entries.save(entry)
            self.record_task_hours(repos, saved.task_id)
            return saved

        entry = await self._commit(work)
        logger.info(f"Session added to entry {entry_id}: {session.duration_hours:.2f}h")
        return TimeEntryResponseDTO.from_domain(entry)


class EditSessionUseCase(TimeEntryCommand):

    async def execute(
        self,
        user_id: str,
        session_id: int,
        request: UpdateSessionRequestDTO,
    ) -> TimeEntryResponseDTO:
        def work(repos: Repositories):
            entry = load_entry_for_session(repos, user_id, session_id)
            session = entry.find_session(session_id)

            self.timer_service.ensure_on_entry_day(
                request.start_time, entry.entry_date, repos.directory.get_user_timezone(entry.user_id)
            )
            self.timer_service.reschedule_session(session, request.start_time, request.end_time)
            if request.is_billable is not None:
                session.is_billable = request.is_billable
            if "note" in request.model_fields_set:
                session.note = request.note

            entry.sessions.sort(key=lambda s: s.start_time)
            entry.recalculate_totals()
            saved = repos.time_entries.save(entry)
            self.record_task_hours(repos, saved.task_id)
            return saved

        entry = await self._commit(work)
        logger.info(f"Session {session_id} edited on entry {entry.id}")
        return TimeEntryResponseDTO.from_domain(entry)


class DeleteSessionUseCase(CommandUseCase):
    """Remove a session; removing the last one removes the entry too."""

    async def execute(self, user_id: str, session_id: int) -> DeleteSessionResponseDTO:
        def work(repos: Repositories):
            entry = load_entry_for_session(repos, user_id, session_id)
            entry.remove_session(session_id)

            if not entry.sessions:
                repos.time_entries.delete(entry.id)
                self.record_event(TimeEntryDeleted(time_entry_id=entry.id, user_id=user_id))
                self.record_task_hours(repos, entry.task_id)
                return None
            saved = repos.time_entries.save(entry)
            self.record_task_hours(repos, saved.task_id)
            return saved

        entry = await self._commit(work)
        if entry is None:
            logger.info(f"Session {session_id} deleted with its now empty entry")
            return DeleteSessionResponseDTO(entry_deleted=True)

        logger.info(f"Session {session_id} deleted from entry {entry.id}")
        return DeleteSessionResponseDTO(entry_deleted=False, time_entry=TimeEntryResponseDTO.from_domain(entry))


class ReportUseCase(QueryUseCase):

    def __init__(
        self,
        uow: UnitOfWork,
        report_service: Optional[TimeReportService] = None,
        clock: Optional[Clock] = None,
    ):
        super().__init__(uow, clock)
        self.report_service = report_service or TimeReportService()

    async def _load(self, user_id: str, start: date, end: date):
        def work(repos: Repositories):
            entries = repos.time_entries.list_in_range(user_id, start, end)
            task_ids = sorted({e.task_id for e in entries if e.task_id})
            return entries, repos.directory.projects_for_tasks(task_ids)

        return await self._transaction(work, snapshot=True)


class GetDailyReportUseCase(ReportUseCase):

    async def execute(self, user_id: str, day: date) -> DailyReportResponseDTO:
        entries, projects = await self._load(user_id, day, day)
        return DailyReportResponseDTO(**self.report_service.daily(day, entries, projects))


class GetWeeklyReportUseCase(ReportUseCase):

    async def execute(self, user_id: str, week_start: date) -> WeeklyReportResponseDTO:
        entries, projects = await self._load(user_id, week_start, week_start + timedelta(days=6))
        return WeeklyReportResponseDTO(**self.report_service.weekly(week_start, entries, projects))


class GetMonthlyReportUseCase(ReportUseCase):

    async def execute(self, user_id: str, year: int, month: int) -> MonthlyReportResponseDTO:
        if not 1 <= month <= 12:
            raise ValidationError("Month must be between 1 and 12", "month")

        start = date(year, month, 1)
        end = (start.replace(day=28) + timedelta(days=4)).replace(day=1) - timedelta(days=1)
        entries, projects = await self._load(user_id, start, end)
        return MonthlyReportResponseDTO(**self.report_service.monthly(year, month, entries, projects))


class ExportTimeCardsUseCase(ReportUseCase):
    """Time cards of every user with time in a date range, for payroll systems."""

    async def execute(self, start_date: date, end_date: date) -> TimeCardExportResponseDTO:
        period = DateRange(start_date, end_date)

        def work(repos: Repositories):
            entries = repos.time_entries.list_between(period.start, period.end)
            user_ids = sorted({e.user_id for e in entries})
            task_ids = sorted({e.task_id for e in entries if e.task_id})
            return (
                entries,
                repos.directory.users_by_id(user_ids),
                repos.directory.projects_for_tasks(task_ids),
            )

        entries, users, projects = await self._transaction(work, snapshot=True)
        cards = self.report_service.timecards(entries, users, projects)
        logger.info(f"Exported {len(cards)} time card(s) for {period.start} to {period.end}")
        return TimeCardExportResponseDTO(start_date=period.start, end_date=period.end, time_cards=cards)
