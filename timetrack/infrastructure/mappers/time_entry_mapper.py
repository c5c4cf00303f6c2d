"""
Time entry mapper for converting between domain entities and database models.
"""

from timetrack.domain.models.base import ensure_utc
from timetrack.domain.models.time_entry import ActiveTimer, TimeEntry, TimeEntrySession
from timetrack.infrastructure.db.models import (
    ActiveTimerModel,
    TimeEntryModel,
    TimeEntrySessionModel,
)


class TimeEntryMapper:
    """Maps between the TimeEntry aggregate and its two tables."""

    def session_to_model(self, session: TimeEntrySession) -> TimeEntrySessionModel:
        """Convert a TimeEntrySession to a new TimeEntrySessionModel."""
        return TimeEntrySessionModel(
            id=session.id,
            start_time=session.start_time,
            end_time=session.end_time,
            duration_hours=session.duration_hours,
            is_billable=session.is_billable,
            note=session.note,
        )

    def copy_session_to_model(self, session: TimeEntrySession, model: TimeEntrySessionModel) -> None:
        model.start_time = session.start_time
        model.end_time = session.end_time
        model.duration_hours = session.duration_hours
        model.is_billable = session.is_billable
        model.note = session.note

    def model_to_session(self, model: TimeEntrySessionModel) -> TimeEntrySession:
        """Convert TimeEntrySessionModel to TimeEntrySession."""
        return TimeEntrySession(
            id=model.id,
            time_entry_id=model.time_entry_id,
            start_time=ensure_utc(model.start_time),
            end_time=ensure_utc(model.end_time),
            duration_hours=model.duration_hours,
            is_billable=bool(model.is_billable),
            note=model.note,
            created_at=ensure_utc(model.created_at),
            updated_at=ensure_utc(model.updated_at),
        )

    def domain_to_model(self, entry: TimeEntry) -> TimeEntryModel:
        """Convert a new TimeEntry (and its sessions) to a TimeEntryModel."""
        model = TimeEntryModel(
            user_id=entry.user_id,
            task_id=entry.task_id,
            task_key=entry.task_key,
            entry_date=entry.entry_date,
            total_hours=entry.total_hours,
            billable_hours=entry.billable_hours,
            is_timer_based=entry.is_timer_based,
            version=entry.version,
        )
        model.sessions = [self.session_to_model(s) for s in entry.sessions]
        return model

    def copy_entry_to_model(self, entry: TimeEntry, model: TimeEntryModel) -> None:
        """Copy scalar aggregate fields; sessions are synced separately."""
        model.task_id = entry.task_id
        model.task_key = entry.task_key
        model.entry_date = entry.entry_date
        model.total_hours = entry.total_hours
        model.billable_hours = entry.billable_hours
        model.is_timer_based = entry.is_timer_based
        model.version = entry.version

    def model_to_domain(self, model: TimeEntryModel) -> TimeEntry:
        """Convert TimeEntryModel to TimeEntry domain entity."""
        entry = TimeEntry(
            user_id=model.user_id,
            task_id=model.task_id,
            entry_date=model.entry_date,
            total_hours=model.total_hours or 0.0,
            billable_hours=model.billable_hours or 0.0,
            is_timer_based=bool(model.is_timer_based),
            sessions=[self.model_to_session(s) for s in model.sessions],
        )
        entry.sessions.sort(key=lambda s: s.start_time)

        # Set entity metadata
        entry.id = model.id
        entry.created_at = ensure_utc(model.created_at)
        entry.updated_at = ensure_utc(model.updated_at)
        entry.version = model.version or 1

        return entry


class ActiveTimerMapper:
    """Maps between ActiveTimer and ActiveTimerModel."""

    def domain_to_model(self, timer: ActiveTimer) -> ActiveTimerModel:
        return ActiveTimerModel(
            user_id=timer.user_id,
            task_id=timer.task_id,
            start_time=timer.start_time,
            note=timer.note,
        )

    def model_to_domain(self, model: ActiveTimerModel) -> ActiveTimer:
        return ActiveTimer(
            id=model.id,
            user_id=model.user_id,
            task_id=model.task_id,
            start_time=ensure_utc(model.start_time),
            note=model.note,
            created_at=ensure_utc(model.created_at),
            updated_at=ensure_utc(model.updated_at),
        )
