"""
Unit tests for consolidation and capacity use cases against a real database.
"""

from datetime import date, datetime, timedelta

import pytest
from sqlalchemy import inspect
from sqlalchemy.exc import IntegrityError

from timetrack.application.dto.capacity_dto import UtilizationRequestDTO
from timetrack.application.dto.time_entry_dto import CreateTimeEntryRequestDTO, StartTimerRequestDTO
from timetrack.application.use_cases.capacity_use_cases import GetUtilizationUseCase
from timetrack.application.use_cases.consolidation_use_cases import ConsolidateTimeEntriesUseCase
from timetrack.application.use_cases.time_entry_use_cases import CreateManualTimeEntryUseCase, GetTimeEntryUseCase
from timetrack.application.use_cases.timer_use_cases import StartTimerUseCase, StopTimerUseCase
from timetrack.domain.models.base import ConflictError, NotFoundError, ValidationError
from timetrack.infrastructure.db.models import (
    UNIQUE_ENTRY_INDEX,
    TimeEntryModel,
    TimeEntrySessionModel,
    TimeOffStatus,
)

DAY = date(2024, 1, 1)


def index_names(engine):
    return {index["name"] for index in inspect(engine).get_indexes(TimeEntryModel.__tablename__)}


@pytest.fixture
def legacy_db(engine, seeded):
    """Database as it looked before the natural key was enforced."""
    UNIQUE_ENTRY_INDEX.drop(bind=engine)
    return seeded


def insert_entry(session_factory, created_at, hours, task_id="t1", user_id="u1", timer=True, manual_total=None):
    """Insert an entry whose sessions are back to back one-hour blocks."""
    session = session_factory()
    start = datetime.combine(DAY, datetime.min.time()) + timedelta(hours=created_at.hour)
    entry = TimeEntryModel(
        user_id=user_id,
        task_id=task_id,
        task_key=task_id or "",
        entry_date=DAY,
        total_hours=manual_total if manual_total is not None else float(hours),
        billable_hours=manual_total if manual_total is not None else float(hours),
        is_timer_based=timer,
        created_at=created_at,
    )
    for n in range(hours):
        entry.sessions.append(TimeEntrySessionModel(
            start_time=start + timedelta(hours=n),
            end_time=start + timedelta(hours=n + 1),
            duration_hours=1.0,
            is_billable=True,
        ))
    try:
        session.add(entry)
        session.commit()
        return entry.id
    finally:
        session.close()


class TestConsolidation:
    """Test cases for merging legacy duplicates."""

    @pytest.mark.asyncio
    async def test_merges_duplicates_and_installs_key(self, engine, legacy_db, uow):
        first = insert_entry(legacy_db, datetime(2024, 1, 1, 8), 3)
        second = insert_entry(legacy_db, datetime(2024, 1, 1, 12), 5)
        other_task = insert_entry(legacy_db, datetime(2024, 1, 1, 8), 1, task_id="t2")

        result = await ConsolidateTimeEntriesUseCase(uow).execute()

        assert result.groups_merged == 1
        assert result.entries_removed == 1
        assert result.sessions_moved == 5
        assert result.constraint_installed is True
        assert UNIQUE_ENTRY_INDEX.name in index_names(engine)

        survivor = await GetTimeEntryUseCase(uow).execute("u1", first)
        assert len(survivor.sessions) == 8
        assert survivor.total_hours == 8.0
        with pytest.raises(NotFoundError):
            await GetTimeEntryUseCase(uow).execute("u1", second)
        assert (await GetTimeEntryUseCase(uow).execute("u1", other_task)).total_hours == 1.0

    @pytest.mark.asyncio
    async def test_manual_totals_survive_merge(self, legacy_db, uow):
        first = insert_entry(legacy_db, datetime(2024, 1, 1, 8), 1, timer=False, manual_total=2.0)
        insert_entry(legacy_db, datetime(2024, 1, 1, 9), 1, timer=False, manual_total=3.0)

        await ConsolidateTimeEntriesUseCase(uow).execute()

        survivor = await GetTimeEntryUseCase(uow).execute("u1", first)
        assert survivor.total_hours == pytest.approx(5.0)

    @pytest.mark.asyncio
    async def test_second_run_changes_nothing(self, legacy_db, uow):
        insert_entry(legacy_db, datetime(2024, 1, 1, 8), 2)
        insert_entry(legacy_db, datetime(2024, 1, 1, 10), 2)
        await ConsolidateTimeEntriesUseCase(uow).execute()

        again = await ConsolidateTimeEntriesUseCase(uow).execute()

        assert again.groups_merged == 0
        assert again.entries_removed == 0
        assert again.constraint_installed is False

    @pytest.mark.asyncio
    async def test_key_enforced_after_install(self, legacy_db, uow):
        await ConsolidateTimeEntriesUseCase(uow).execute()
        insert_entry(legacy_db, datetime(2024, 1, 1, 8), 1)

        with pytest.raises(IntegrityError):
            insert_entry(legacy_db, datetime(2024, 1, 1, 9), 1)

    @pytest.mark.asyncio
    async def test_timer_stop_joins_survivor(self, legacy_db, uow, clock):
        first = insert_entry(legacy_db, datetime(2024, 1, 1, 1), 1)
        insert_entry(legacy_db, datetime(2024, 1, 1, 2), 1)
        await ConsolidateTimeEntriesUseCase(uow).execute()

        await StartTimerUseCase(uow, clock=clock).execute("u1", StartTimerRequestDTO(task_id="t1"))
        clock.advance(hours=1)
        entry = await StopTimerUseCase(uow, clock=clock).execute("u1")

        assert entry.id == first
        assert entry.total_hours == 3.0


class TestCapacityUseCase:
    """Test cases for the utilization query."""

    def request(self, **kwargs):
        return UtilizationRequestDTO(start_date=date(2024, 1, 1), end_date=date(2024, 1, 5), **kwargs)

    @pytest.mark.asyncio
    async def test_utilization_for_active_users(self, uow):
        create = CreateManualTimeEntryUseCase(uow)
        for offset in range(5):
            await create.execute("u1", CreateTimeEntryRequestDTO(
                task_id="t1", entry_date=DAY + timedelta(days=offset), hours=6.0
            ))

        report = await GetUtilizationUseCase(uow).execute(self.request())
        rows = {row.key: row for row in report.per_user}

        assert set(rows) == {"u1", "u2", "u3"}
        assert rows["u1"].available_hours == 40.0
        assert rows["u1"].logged_hours == 30.0
        assert rows["u1"].utilization == 75.0
        assert rows["u1"].bucket == "moderate"
        assert rows["u3"].department == "Unassigned"
        assert report.working_days == 5
        assert report.bucket_counts["critical"] == 2

    @pytest.mark.asyncio
    async def test_hours_outside_period_ignored(self, uow):
        await CreateManualTimeEntryUseCase(uow).execute("u1", CreateTimeEntryRequestDTO(
            task_id="t1", entry_date=date(2024, 1, 8), hours=8.0
        ))

        report = await GetUtilizationUseCase(uow).execute(self.request(user_ids=["u1"]))

        assert report.per_user[0].logged_hours == 0.0

    @pytest.mark.asyncio
    async def test_approved_time_off_only(self, uow, add_time_off):
        add_time_off("u1", date(2024, 1, 1), date(2024, 1, 2), 16.0)
        add_time_off("u1", date(2024, 1, 3), date(2024, 1, 3), 8.0, status=TimeOffStatus.PENDING)

        report = await GetUtilizationUseCase(uow).execute(self.request(user_ids=["u1"]))

        assert report.per_user[0].available_hours == 24.0

    @pytest.mark.asyncio
    async def test_availability_override(self, uow, add_availability):
        add_availability("u3", date(2024, 1, 1), 0.0)

        report = await GetUtilizationUseCase(uow).execute(self.request(user_ids=["u3"]))

        assert report.per_user[0].available_hours == pytest.approx(16.0)

    @pytest.mark.asyncio
    async def test_department_rows(self, uow):
        report = await GetUtilizationUseCase(uow).execute(self.request())
        departments = {row.key: row for row in report.per_department}

        assert departments["Engineering"].member_count == 2
        assert departments["Engineering"].available_hours == 80.0
        assert report.summary.available_hours == 100.0

    @pytest.mark.asyncio
    async def test_reversed_period(self, uow):
        with pytest.raises(ValidationError):
            await GetUtilizationUseCase(uow).execute(
                UtilizationRequestDTO(start_date=date(2024, 1, 5), end_date=date(2024, 1, 1))
            )


class TestConflictOnStorage:

    def test_unique_key_rejects_raw_duplicate(self, seeded):
        insert_entry(seeded, datetime(2024, 1, 1, 8), 1)

        with pytest.raises(IntegrityError):
            insert_entry(seeded, datetime(2024, 1, 1, 9), 1)

    def test_conflict_error_code(self):
        assert ConflictError("x").code == "CONFLICT"
