"""
Unit tests for manual entries, session edits and reports.
"""

from datetime import date, datetime, timezone

import pytest
import pytest_asyncio

from timetrack.application.dto.time_entry_dto import (
    CreateSessionRequestDTO,
    CreateTimeEntryRequestDTO,
    ListTimeEntriesRequestDTO,
    StartTimerRequestDTO,
    UpdateSessionRequestDTO,
    UpdateTimeEntryRequestDTO,
)
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
from timetrack.application.use_cases.timer_use_cases import StartTimerUseCase, StopTimerUseCase
from timetrack.domain.models.base import (
    BusinessRuleViolation,
    ConflictError,
    InvalidIntervalError,
    NotFoundError,
    ValidationError,
)


def at(hour, minute=0, day=1):
    return datetime(2024, 1, day, hour, minute, tzinfo=timezone.utc)


def manual_request(task_id="t1", day=date(2024, 1, 1), hours=2.0, **kwargs):
    return CreateTimeEntryRequestDTO(task_id=task_id, entry_date=day, hours=hours, **kwargs)


class TestCreateManualEntry:
    """Test cases for manual time entries."""

    def setup_method(self):
        self.day = date(2024, 1, 1)

    @pytest.mark.asyncio
    async def test_create(self, uow):
        entry = await CreateManualTimeEntryUseCase(uow).execute("u1", manual_request(hours=2.5))

        assert entry.id is not None
        assert entry.total_hours == 2.5
        assert entry.is_timer_based is False
        assert len(entry.sessions) == 1
        assert entry.sessions[0].start_time == at(0)

    @pytest.mark.asyncio
    async def test_synthetic_session_starts_at_local_midnight(self, uow):
        entry = await CreateManualTimeEntryUseCase(uow).execute("u2", manual_request(day=date(2024, 1, 2)))

        assert entry.sessions[0].start_time == at(5, day=2)

    @pytest.mark.asyncio
    async def test_existing_key_conflicts(self, uow):
        await CreateManualTimeEntryUseCase(uow).execute("u1", manual_request())

        with pytest.raises(ConflictError, match="already exists"):
            await CreateManualTimeEntryUseCase(uow).execute("u1", manual_request(hours=1.0))

    @pytest.mark.asyncio
    async def test_timer_entry_blocks_manual_entry_on_same_key(self, uow, clock):
        await StartTimerUseCase(uow, clock=clock).execute("u1", StartTimerRequestDTO(task_id="t1"))
        clock.advance(hours=1)
        await StopTimerUseCase(uow, clock=clock).execute("u1")

        with pytest.raises(ConflictError):
            await CreateManualTimeEntryUseCase(uow).execute("u1", manual_request())

    @pytest.mark.asyncio
    async def test_null_task_is_its_own_key(self, uow):
        await CreateManualTimeEntryUseCase(uow).execute("u1", manual_request(task_id=None))

        with pytest.raises(ConflictError):
            await CreateManualTimeEntryUseCase(uow).execute("u1", manual_request(task_id=None))
        # Same day, a real task: different key
        await CreateManualTimeEntryUseCase(uow).execute("u1", manual_request(task_id="t1"))

    @pytest.mark.asyncio
    async def test_hours_over_daily_maximum(self, uow):
        with pytest.raises(InvalidIntervalError):
            await CreateManualTimeEntryUseCase(uow).execute("u1", manual_request(hours=25))

    @pytest.mark.asyncio
    async def test_unknown_task(self, uow):
        with pytest.raises(NotFoundError):
            await CreateManualTimeEntryUseCase(uow).execute("u1", manual_request(task_id="missing"))

    def test_date_alias(self):
        request = CreateTimeEntryRequestDTO.model_validate({"date": "2024-01-03", "hours": 1})

        assert request.entry_date == date(2024, 1, 3)


class TestUpdateAndDeleteEntry:
    """Test cases for editing whole entries."""

    @pytest.mark.asyncio
    async def test_update_hours(self, uow):
        created = await CreateManualTimeEntryUseCase(uow).execute("u1", manual_request())

        updated = await UpdateTimeEntryUseCase(uow).execute(
            "u1", created.id, UpdateTimeEntryRequestDTO(hours=6.0)
        )

        assert updated.total_hours == 6.0
        fetched = await GetTimeEntryUseCase(uow).execute("u1", created.id)
        assert fetched.total_hours == 6.0

    @pytest.mark.asyncio
    async def test_update_hours_rejected_once_entry_has_several_sessions(self, uow):
        created = await CreateManualTimeEntryUseCase(uow).execute("u1", manual_request(hours=2.0))
        await AddSessionUseCase(uow).execute(
            "u1", created.id, CreateSessionRequestDTO(start_time=at(9), end_time=at(10))
        )

        with pytest.raises(BusinessRuleViolation, match="several sessions"):
            await UpdateTimeEntryUseCase(uow).execute(
                "u1", created.id, UpdateTimeEntryRequestDTO(hours=5.0)
            )

        fetched = await GetTimeEntryUseCase(uow).execute("u1", created.id)
        assert fetched.total_hours == 3.0

    @pytest.mark.asyncio
    async def test_move_to_another_task(self, uow):
        created = await CreateManualTimeEntryUseCase(uow).execute("u1", manual_request())

        updated = await UpdateTimeEntryUseCase(uow).execute(
            "u1", created.id, UpdateTimeEntryRequestDTO(task_id="t3")
        )

        assert updated.task_id == "t3"

    @pytest.mark.asyncio
    async def test_move_onto_existing_key_conflicts(self, uow):
        first = await CreateManualTimeEntryUseCase(uow).execute("u1", manual_request(task_id="t1"))
        await CreateManualTimeEntryUseCase(uow).execute("u1", manual_request(task_id="t2"))

        with pytest.raises(ConflictError):
            await UpdateTimeEntryUseCase(uow).execute(
                "u1", first.id, UpdateTimeEntryRequestDTO(task_id="t2")
            )

    @pytest.mark.asyncio
    async def test_timer_entries_only_change_through_sessions(self, uow, clock):
        await StartTimerUseCase(uow, clock=clock).execute("u1", StartTimerRequestDTO(task_id="t1"))
        clock.advance(hours=1)
        entry = await StopTimerUseCase(uow, clock=clock).execute("u1")

        with pytest.raises(BusinessRuleViolation):
            await UpdateTimeEntryUseCase(uow).execute("u1", entry.id, UpdateTimeEntryRequestDTO(hours=3))

    @pytest.mark.asyncio
    async def test_empty_update(self, uow):
        created = await CreateManualTimeEntryUseCase(uow).execute("u1", manual_request())

        with pytest.raises(ValidationError, match="Nothing to update"):
            await UpdateTimeEntryUseCase(uow).execute("u1", created.id, UpdateTimeEntryRequestDTO())

    @pytest.mark.asyncio
    async def test_other_users_entry_is_not_found(self, uow):
        created = await CreateManualTimeEntryUseCase(uow).execute("u1", manual_request())

        with pytest.raises(NotFoundError):
            await GetTimeEntryUseCase(uow).execute("u2", created.id)
        with pytest.raises(NotFoundError):
            await DeleteTimeEntryUseCase(uow).execute("u2", created.id)

    @pytest.mark.asyncio
    async def test_delete(self, uow):
        created = await CreateManualTimeEntryUseCase(uow).execute("u1", manual_request())

        await DeleteTimeEntryUseCase(uow).execute("u1", created.id)

        with pytest.raises(NotFoundError):
            await GetTimeEntryUseCase(uow).execute("u1", created.id)


class TestSessions:
    """Test cases for session-level edits."""

    @pytest.mark.asyncio
    async def test_add_session_updates_totals(self, uow):
        created = await CreateManualTimeEntryUseCase(uow).execute("u1", manual_request(hours=2.0))

        entry = await AddSessionUseCase(uow).execute(
            "u1", created.id,
            CreateSessionRequestDTO(start_time=at(9), end_time=at(10, 30), is_billable=False),
        )

        assert len(entry.sessions) == 2
        assert entry.total_hours == 3.5
        assert entry.billable_hours == 2.0
        assert entry.non_billable_hours == 1.5

    @pytest.mark.asyncio
    async def test_add_session_on_another_day(self, uow):
        created = await CreateManualTimeEntryUseCase(uow).execute("u1", manual_request())

        with pytest.raises(ValidationError, match="entry day"):
            await AddSessionUseCase(uow).execute(
                "u1", created.id,
                CreateSessionRequestDTO(start_time=at(9, day=2), end_time=at(10, day=2)),
            )

        fetched = await GetTimeEntryUseCase(uow).execute("u1", created.id)
        assert len(fetched.sessions) == 1

    @pytest.mark.asyncio
    async def test_session_day_uses_user_timezone(self, uow):
        created = await CreateManualTimeEntryUseCase(uow).execute("u2", manual_request())

        # 03:00 UTC on the 2nd is still the evening of the 1st in New York
        entry = await AddSessionUseCase(uow).execute(
            "u2", created.id,
            CreateSessionRequestDTO(start_time=at(3, day=2), end_time=at(4, day=2)),
        )

        assert entry.total_hours == 3.0

    @pytest.mark.asyncio
    async def test_edit_session_onto_another_day(self, uow):
        created = await CreateManualTimeEntryUseCase(uow).execute("u1", manual_request())

        with pytest.raises(ValidationError, match="entry day"):
            await EditSessionUseCase(uow).execute(
                "u1", created.sessions[0].id,
                UpdateSessionRequestDTO(start_time=at(9, day=3), end_time=at(10, day=3)),
            )

    @pytest.mark.asyncio
    async def test_add_reversed_session(self, uow):
        created = await CreateManualTimeEntryUseCase(uow).execute("u1", manual_request())

        with pytest.raises(InvalidIntervalError):
            await AddSessionUseCase(uow).execute(
                "u1", created.id, CreateSessionRequestDTO(start_time=at(10), end_time=at(9))
            )

    @pytest.mark.asyncio
    async def test_edit_session(self, uow):
        created = await CreateManualTimeEntryUseCase(uow).execute("u1", manual_request(hours=2.0))
        with_two = await AddSessionUseCase(uow).execute(
            "u1", created.id, CreateSessionRequestDTO(start_time=at(9), end_time=at(10))
        )
        session_id = with_two.sessions[1].id

        entry = await EditSessionUseCase(uow).execute(
            "u1", session_id,
            UpdateSessionRequestDTO(start_time=at(9), end_time=at(12), note="longer"),
        )

        assert entry.total_hours == 5.0
        edited = next(s for s in entry.sessions if s.id == session_id)
        assert edited.duration_hours == 3.0
        assert edited.note == "longer"

    @pytest.mark.asyncio
    async def test_edit_other_users_session(self, uow):
        created = await CreateManualTimeEntryUseCase(uow).execute("u1", manual_request())

        with pytest.raises(NotFoundError, match="Session"):
            await EditSessionUseCase(uow).execute(
                "u2", created.sessions[0].id,
                UpdateSessionRequestDTO(start_time=at(9), end_time=at(10)),
            )

    @pytest.mark.asyncio
    async def test_delete_one_of_two_sessions(self, uow):
        created = await CreateManualTimeEntryUseCase(uow).execute("u1", manual_request(hours=2.0))
        await AddSessionUseCase(uow).execute(
            "u1", created.id, CreateSessionRequestDTO(start_time=at(9), end_time=at(10))
        )

        result = await DeleteSessionUseCase(uow).execute("u1", created.sessions[0].id)

        assert result.entry_deleted is False
        assert result.time_entry.total_hours == 1.0
        assert len(result.time_entry.sessions) == 1

    @pytest.mark.asyncio
    async def test_deleting_last_session_deletes_entry(self, uow):
        created = await CreateManualTimeEntryUseCase(uow).execute("u1", manual_request())

        result = await DeleteSessionUseCase(uow).execute("u1", created.sessions[0].id)

        assert result.entry_deleted is True
        assert result.time_entry is None
        with pytest.raises(NotFoundError):
            await GetTimeEntryUseCase(uow).execute("u1", created.id)


class TestListAndReports:
    """Test cases for listing and report rollups."""

    @pytest_asyncio.fixture
    async def entries(self, uow):
        create = CreateManualTimeEntryUseCase(uow)
        await create.execute("u1", manual_request("t1", date(2024, 1, 1), 2.0))
        await create.execute("u1", manual_request("t3", date(2024, 1, 2), 3.0, is_billable=False))
        await create.execute("u1", manual_request(None, date(2024, 1, 3), 1.0))
        await create.execute("u1", manual_request("t2", date(2024, 1, 15), 4.0))
        await create.execute("u2", manual_request("t1", date(2024, 1, 1), 8.0))

    @pytest.mark.asyncio
    async def test_list_newest_first(self, uow, entries):
        result = await ListTimeEntriesUseCase(uow).execute("u1", ListTimeEntriesRequestDTO())

        assert result.total == 4
        assert [e.entry_date for e in result.items] == [
            date(2024, 1, 15), date(2024, 1, 3), date(2024, 1, 2), date(2024, 1, 1)
        ]

    @pytest.mark.asyncio
    async def test_list_paginates(self, uow, entries):
        result = await ListTimeEntriesUseCase(uow).execute(
            "u1", ListTimeEntriesRequestDTO(page=2, page_size=3)
        )

        assert result.total == 4
        assert len(result.items) == 1

    @pytest.mark.asyncio
    async def test_list_by_project(self, uow, entries):
        result = await ListTimeEntriesUseCase(uow).execute("u1", ListTimeEntriesRequestDTO(project_id="p1"))

        assert sorted(e.task_id for e in result.items) == ["t1", "t2"]

    @pytest.mark.asyncio
    async def test_list_by_unknown_project(self, uow, entries):
        result = await ListTimeEntriesUseCase(uow).execute("u1", ListTimeEntriesRequestDTO(project_id="p9"))

        assert result.total == 0
        assert result.items == []

    @pytest.mark.asyncio
    async def test_list_by_date_range(self, uow, entries):
        result = await ListTimeEntriesUseCase(uow).execute(
            "u1", ListTimeEntriesRequestDTO(start_date=date(2024, 1, 2), end_date=date(2024, 1, 3))
        )

        assert result.total == 2

    @pytest.mark.asyncio
    async def test_list_rejects_reversed_range(self, uow):
        with pytest.raises(ValidationError):
            await ListTimeEntriesUseCase(uow).execute(
                "u1", ListTimeEntriesRequestDTO(start_date=date(2024, 1, 3), end_date=date(2024, 1, 2))
            )

    @pytest.mark.asyncio
    async def test_daily_report(self, uow, entries):
        report = await GetDailyReportUseCase(uow).execute("u1", date(2024, 1, 1))

        assert report.total_hours == 2.0
        assert report.by_project[0].project_id == "p1"
        assert report.by_project[0].project_name == "Website"

    @pytest.mark.asyncio
    async def test_weekly_report(self, uow, entries):
        report = await GetWeeklyReportUseCase(uow).execute("u1", date(2024, 1, 1))

        assert report.total_hours == 6.0
        assert report.billable_hours == 3.0
        assert len(report.by_day) == 7

    @pytest.mark.asyncio
    async def test_monthly_report(self, uow, entries):
        report = await GetMonthlyReportUseCase(uow).execute("u1", 2024, 1)

        assert report.total_hours == 10.0
        assert report.entry_count == 4
        assert report.month_end == date(2024, 1, 31)

    @pytest.mark.asyncio
    async def test_monthly_report_bad_month(self, uow):
        with pytest.raises(ValidationError, match="Month"):
            await GetMonthlyReportUseCase(uow).execute("u1", 2024, 13)

    @pytest.mark.asyncio
    async def test_export_timecards(self, uow, entries):
        export = await ExportTimeCardsUseCase(uow).execute(date(2024, 1, 1), date(2024, 1, 7))

        assert [card.user.id for card in export.time_cards] == ["u1", "u2"]
        ada = export.time_cards[0]
        assert ada.user.last_name == "Lovelace"
        assert [(d.date, d.total_hours, d.billable_hours) for d in ada.summary] == [
            (date(2024, 1, 1), 2.0, 2.0),
            (date(2024, 1, 2), 3.0, 0.0),
            (date(2024, 1, 3), 1.0, 1.0),
        ]
        first = ada.details[0].sessions[0]
        assert first.task_title == "Landing page"
        assert first.project_code == "WEB"
        assert first.duration_hours == 2.0
        assert ada.details[2].sessions[0].project_id is None

    @pytest.mark.asyncio
    async def test_export_timecards_empty_range(self, uow, entries):
        export = await ExportTimeCardsUseCase(uow).execute(date(2024, 2, 1), date(2024, 2, 29))

        assert export.time_cards == []

    @pytest.mark.asyncio
    async def test_export_timecards_reversed_range(self, uow):
        with pytest.raises(ValidationError, match="End date"):
            await ExportTimeCardsUseCase(uow).execute(date(2024, 1, 7), date(2024, 1, 1))


class TestTaskLoggedHoursEvents:
    """Every write republishes the logged total of the tasks it touched."""

    @pytest.mark.asyncio
    async def test_create_and_move(self, uow, recorder):
        await CreateManualTimeEntryUseCase(uow).execute("u2", manual_request("t1", hours=8.0))
        created = await CreateManualTimeEntryUseCase(uow).execute("u1", manual_request("t1", hours=2.0))

        await UpdateTimeEntryUseCase(uow).execute(
            "u1", created.id, UpdateTimeEntryRequestDTO(task_id="t3")
        )

        totals = [(e.task_id, e.logged_hours) for e in recorder.of_type("TaskLoggedHoursChanged")]
        assert totals == [("t1", 8.0), ("t1", 10.0), ("t1", 8.0), ("t3", 2.0)]

    @pytest.mark.asyncio
    async def test_session_changes_and_delete(self, uow, recorder):
        created = await CreateManualTimeEntryUseCase(uow).execute("u1", manual_request("t1", hours=2.0))
        await AddSessionUseCase(uow).execute(
            "u1", created.id, CreateSessionRequestDTO(start_time=at(9), end_time=at(10))
        )
        await DeleteTimeEntryUseCase(uow).execute("u1", created.id)

        totals = [e.logged_hours for e in recorder.of_type("TaskLoggedHoursChanged")]
        assert totals == [2.0, 3.0, 0.0]

    @pytest.mark.asyncio
    async def test_untasked_entries_publish_nothing(self, uow, recorder):
        await CreateManualTimeEntryUseCase(uow).execute("u1", manual_request(task_id=None))

        assert recorder.of_type("TaskLoggedHoursChanged") == []
