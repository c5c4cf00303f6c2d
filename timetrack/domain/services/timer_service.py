"""Timer service for managing time tracking logic.
Handles timer transitions, interval validation, and calendar-day resolution.
"""

import logging
from datetime import date, datetime
from typing import Optional, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from timetrack.domain.models.base import InvalidIntervalError, ValidationError, ensure_utc, utc_now
from timetrack.domain.models.time_entry import (
    ActiveTimer,
    TimeEntry,
    TimeEntrySession,
    hours_between,
)

logger = logging.getLogger(__name__)


class TimerService:
    """
    Domain service for time tracking rules.
    Stateless: the running timer lives in storage, never in memory.
    """

    def __init__(
        self,
        max_interval_hours: float = 24.0,
        manual_entry_max_hours: float = 24.0,
        default_timezone: str = "UTC",
    ):
        self.max_interval_hours = max_interval_hours
        self.manual_entry_max_hours = manual_entry_max_hours
        self.default_timezone = default_timezone

    def resolve_timezone(self, name: Optional[str]) -> ZoneInfo:
        """User timezone, falling back to the configured default."""
        for candidate in (name, self.default_timezone, "UTC"):
            if not candidate:
                continue
            try:
                return ZoneInfo(candidate)
            except (ZoneInfoNotFoundError, ValueError):
                logger.warning(f"Unknown timezone '{candidate}', falling back")
        return ZoneInfo("UTC")

    def local_date(self, instant: datetime, timezone_name: Optional[str] = None) -> date:
        """Calendar day of an instant in the user's timezone."""
        return ensure_utc(instant).astimezone(self.resolve_timezone(timezone_name)).date()

    def ensure_on_entry_day(
        self,
        start_time: datetime,
        entry_date: date,
        timezone_name: Optional[str] = None,
    ) -> None:
        """A session belongs to the local day its start falls on."""
        day = self.local_date(start_time, timezone_name)
        if day != entry_date:
            raise ValidationError(
                f"Session starts on {day}, not on the entry day {entry_date}", "start_time"
            )

    def start_timer(
        self,
        user_id: str,
        task_id: Optional[str] = None,
        note: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> ActiveTimer:
        """Build the running-timer record; uniqueness is enforced by storage."""
        if not user_id:
            raise ValidationError("User ID is required", "user_id")
        return ActiveTimer(
            user_id=user_id,
            task_id=task_id,
            start_time=now or utc_now(),
            note=note,
        )

    def close_timer(
        self,
        timer: ActiveTimer,
        now: Optional[datetime] = None,
        timezone_name: Optional[str] = None,
    ) -> Tuple[date, TimeEntrySession]:
        """
        Turn a running timer into a finished session.
        Returns the local day the session belongs to (the start's day).
        """
        end_time = ensure_utc(now) if now else utc_now()
        duration = hours_between(timer.start_time, end_time)
        if duration <= 0:
            raise InvalidIntervalError(
                "Timer end is not after its start; check the system clock"
            )
        self._check_max_duration(duration)

        session = TimeEntrySession.create(
            start_time=timer.start_time,
            end_time=end_time,
            is_billable=True,
            note=timer.note,
        )
        return self.local_date(timer.start_time, timezone_name), session

    def build_session(
        self,
        start_time: datetime,
        end_time: datetime,
        is_billable: bool = True,
        note: Optional[str] = None,
    ) -> TimeEntrySession:
        """Session entered by hand onto an existing entry."""
        session = TimeEntrySession.create(start_time, end_time, is_billable, note)
        self._check_max_duration(session.duration_hours)
        return session

    def reschedule_session(
        self,
        session: TimeEntrySession,
        start_time: datetime,
        end_time: datetime,
    ) -> TimeEntrySession:
        self._check_max_duration(hours_between(start_time, end_time))
        session.reschedule(start_time, end_time)
        return session

    def create_manual_entry(
        self,
        user_id: str,
        task_id: Optional[str],
        entry_date: date,
        hours: float,
        is_billable: bool = True,
        note: Optional[str] = None,
        timezone_name: Optional[str] = None,
    ) -> TimeEntry:
        """
        Create a manual time entry.
        """
        self.validate_manual_hours(hours)
        return TimeEntry.create_manual(
            user_id=user_id,
            task_id=task_id,
            entry_date=entry_date,
            hours=hours,
            is_billable=is_billable,
            note=note,
            tz=self.resolve_timezone(timezone_name),
        )

    def validate_manual_hours(self, hours: float) -> None:
        if hours <= 0:
            raise InvalidIntervalError("Hours must be positive")
        if hours > self.manual_entry_max_hours:
            raise InvalidIntervalError(
                f"Hours cannot exceed {self.manual_entry_max_hours} per day"
            )

    def _check_max_duration(self, duration_hours: float) -> None:
        if duration_hours > self.max_interval_hours:
            raise InvalidIntervalError(
                f"Interval of {duration_hours:.2f}h exceeds the maximum of "
                f"{self.max_interval_hours}h"
            )
