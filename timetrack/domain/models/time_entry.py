"""
Time entry domain models.

A ``TimeEntry`` is the daily aggregate: the single container of worked
sessions for one (user, task, day). A ``TimeEntrySession`` is one
contiguous worked interval inside it. An ``ActiveTimer`` is the in-flight
record of a timer that has been started but not yet stopped.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import Any, Dict, List, Optional
from zoneinfo import ZoneInfo

from .base import (
    AggregateRoot,
    BaseEntity,
    BusinessRuleViolation,
    InvalidIntervalError,
    NotFoundError,
    ValidationError,
    ensure_utc,
    utc_now,
)

SECONDS_PER_HOUR = 3600.0

# Marks a patch field the caller did not send.
UNSET: Any = object()


def hours_between(start: datetime, end: datetime) -> float:
    """Duration in hours between two instants."""
    return (ensure_utc(end) - ensure_utc(start)).total_seconds() / SECONDS_PER_HOUR


def task_key_for(task_id: Optional[str]) -> str:
    """Storage key component for a task reference; no task maps to ''."""
    return task_id or ""


@dataclass
class TimeEntrySession(BaseEntity):
    """One contiguous worked interval."""

    time_entry_id: Optional[int] = None
    start_time: datetime = field(default_factory=utc_now)
    end_time: datetime = field(default_factory=utc_now)
    duration_hours: float = 0.0
    is_billable: bool = True
    note: Optional[str] = None

    @classmethod
    def create(
        cls,
        start_time: datetime,
        end_time: datetime,
        is_billable: bool = True,
        note: Optional[str] = None,
    ) -> "TimeEntrySession":
        """Create a session, rejecting empty or reversed intervals."""
        start_time = ensure_utc(start_time)
        end_time = ensure_utc(end_time)
        duration = hours_between(start_time, end_time)
        if duration <= 0:
            raise InvalidIntervalError("Session end time must be after its start time")
        return cls(
            start_time=start_time,
            end_time=end_time,
            duration_hours=duration,
            is_billable=is_billable,
            note=note,
        )

    def reschedule(self, start_time: datetime, end_time: datetime) -> None:
        """Move the interval, recomputing its duration."""
        start_time = ensure_utc(start_time)
        end_time = ensure_utc(end_time)
        duration = hours_between(start_time, end_time)
        if duration <= 0:
            raise InvalidIntervalError("Session end time must be after its start time")
        self.start_time = start_time
        self.end_time = end_time
        self.duration_hours = duration
        self.mark_as_updated()


@dataclass
class TimeEntry(AggregateRoot):
    """
    Daily aggregate of sessions for one (user, task, date).

    ``total_hours`` and ``billable_hours`` are a cache of the session sums.
    Manual entries with at most one synthetic session may carry a total
    typed in by the user instead.
    """

    user_id: str = ""
    task_id: Optional[str] = None
    entry_date: date = field(default_factory=date.today)
    total_hours: float = 0.0
    billable_hours: float = 0.0
    is_timer_based: bool = False
    sessions: List[TimeEntrySession] = field(default_factory=list)

    def __post_init__(self):
        super().__post_init__()
        if not self.user_id:
            raise ValidationError("User ID is required", "user_id")

    @property
    def task_key(self) -> str:
        return task_key_for(self.task_id)

    @property
    def natural_key(self) -> tuple:
        return (self.user_id, self.task_key, self.entry_date)

    @property
    def has_derived_totals(self) -> bool:
        """False only for manual totals, which may disagree with their session."""
        return self.is_timer_based or len(self.sessions) > 1

    @classmethod
    def for_timer(
        cls,
        user_id: str,
        task_id: Optional[str],
        entry_date: date,
    ) -> "TimeEntry":
        """Empty timer-based aggregate, ready to receive its first session."""
        return cls(
            user_id=user_id,
            task_id=task_id,
            entry_date=entry_date,
            is_timer_based=True,
        )

    @classmethod
    def create_manual(
        cls,
        user_id: str,
        task_id: Optional[str],
        entry_date: date,
        hours: float,
        is_billable: bool = True,
        note: Optional[str] = None,
        tz: Optional[ZoneInfo] = None,
    ) -> "TimeEntry":
        """
        Manual entry holding one synthetic session that starts at the
        user's local midnight and lasts ``hours``.
        """
        if hours <= 0:
            raise InvalidIntervalError("Manual entry hours must be positive")

        local_midnight = datetime.combine(entry_date, time.min, tzinfo=tz or ZoneInfo("UTC"))
        start = ensure_utc(local_midnight)
        session = TimeEntrySession.create(
            start_time=start,
            end_time=start + timedelta(hours=hours),
            is_billable=is_billable,
            note=note,
        )

        entry = cls(
            user_id=user_id,
            task_id=task_id,
            entry_date=entry_date,
            is_timer_based=False,
        )
        entry.add_session(session)
        return entry

    def find_session(self, session_id: int) -> TimeEntrySession:
        for session in self.sessions:
            if session.id == session_id:
                return session
        raise NotFoundError("Session", session_id)

    def add_session(self, session: TimeEntrySession) -> TimeEntrySession:
        """Append a session and refresh the cached totals."""
        session.time_entry_id = self.id
        self.sessions.append(session)
        self.sessions.sort(key=lambda s: s.start_time)
        self.recalculate_totals()
        return session

    def remove_session(self, session_id: int) -> TimeEntrySession:
        session = self.find_session(session_id)
        self.sessions.remove(session)
        self.recalculate_totals()
        return session

    def recalculate_totals(self) -> None:
        """Regenerate cached totals from the session set."""
        self.total_hours = sum(s.duration_hours for s in self.sessions)
        self.billable_hours = sum(s.duration_hours for s in self.sessions if s.is_billable)
        self.mark_as_updated()

    def set_manual_hours(self, hours: float) -> None:
        """Overwrite the total of a manual entry."""
        if self.is_timer_based:
            raise BusinessRuleViolation("Cannot edit hours or task on timer-based entries")
        if self.has_derived_totals:
            raise BusinessRuleViolation("Hours of an entry with several sessions follow its sessions")
        if hours <= 0:
            raise InvalidIntervalError("Manual entry hours must be positive")
        billable = self.sessions[0].is_billable if self.sessions else self.billable_hours > 0
        self.total_hours = hours
        self.billable_hours = hours if billable else 0.0
        self.increment_version()

    def reassign_task(self, task_id: Optional[str]) -> None:
        if self.is_timer_based:
            raise BusinessRuleViolation("Cannot edit hours or task on timer-based entries")
        self.task_id = task_id
        self.increment_version()

    def totals_consistent(self, tolerance: float = 1e-9) -> bool:
        """Whether the cache matches the sessions (manual totals always pass)."""
        if not self.has_derived_totals:
            return True
        total = sum(s.duration_hours for s in self.sessions)
        billable = sum(s.duration_hours for s in self.sessions if s.is_billable)
        return (
            abs(total - self.total_hours) <= tolerance
            and abs(billable - self.billable_hours) <= tolerance
        )

    @property
    def non_billable_hours(self) -> float:
        return self.total_hours - self.billable_hours


@dataclass
class ActiveTimer(BaseEntity):
    """The one running timer a user may have."""

    user_id: str = ""
    task_id: Optional[str] = None
    start_time: datetime = field(default_factory=utc_now)
    note: Optional[str] = None

    def __post_init__(self):
        super().__post_init__()
        if not self.user_id:
            raise ValidationError("User ID is required", "user_id")
        self.start_time = ensure_utc(self.start_time)

    def elapsed_seconds(self, now: Optional[datetime] = None) -> int:
        now = ensure_utc(now) if now else utc_now()
        return max(0, int((now - self.start_time).total_seconds()))

    def apply_patch(self, task_id: Any = UNSET, note: Any = UNSET) -> None:
        """Change task and/or note; the start time never moves."""
        if task_id is not UNSET:
            self.task_id = task_id
        if note is not UNSET:
            self.note = note
        self.mark_as_updated()

    def to_dict(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        data = super().to_dict()
        data["elapsed_seconds"] = self.elapsed_seconds(now)
        return data
