"""
Unit tests for TimerService.
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from timetrack.domain.models.base import InvalidIntervalError, ValidationError
from timetrack.domain.models.time_entry import ActiveTimer
from timetrack.domain.services.timer_service import TimerService


def at(hour, minute=0, day=1):
    return datetime(2024, 1, day, hour, minute, tzinfo=timezone.utc)


class TestTimerService:
    """Test cases for TimerService."""

    def setup_method(self):
        self.service = TimerService(max_interval_hours=12.0, manual_entry_max_hours=24.0)

    def test_start_timer(self):
        timer = self.service.start_timer("u1", "t1", "notes", now=at(9))

        assert timer.user_id == "u1"
        assert timer.task_id == "t1"
        assert timer.start_time == at(9)

    def test_start_timer_requires_user(self):
        with pytest.raises(ValidationError):
            self.service.start_timer("")

    def test_close_timer_builds_billable_session(self):
        timer = ActiveTimer(user_id="u1", task_id="t1", start_time=at(9), note="review")

        entry_date, session = self.service.close_timer(timer, now=at(11, 30))

        assert entry_date == date(2024, 1, 1)
        assert session.duration_hours == 2.5
        assert session.is_billable is True
        assert session.note == "review"

    def test_close_timer_uses_start_day_in_user_timezone(self):
        # 03:00 UTC on the 2nd is still the 1st in New York
        timer = ActiveTimer(user_id="u2", start_time=at(3, day=2))

        entry_date, _ = self.service.close_timer(timer, now=at(5, day=2), timezone_name="America/New_York")

        assert entry_date == date(2024, 1, 1)

    def test_close_timer_rejects_clock_going_backwards(self):
        timer = ActiveTimer(user_id="u1", start_time=at(9))

        with pytest.raises(InvalidIntervalError, match="clock"):
            self.service.close_timer(timer, now=at(8))

    def test_close_timer_rejects_overlong_interval(self):
        timer = ActiveTimer(user_id="u1", start_time=at(9))

        with pytest.raises(InvalidIntervalError, match="exceeds the maximum"):
            self.service.close_timer(timer, now=at(9) + timedelta(hours=13))

    def test_unknown_timezone_falls_back_to_default(self):
        assert str(self.service.resolve_timezone("Mars/Olympus")) == "UTC"
        assert str(self.service.resolve_timezone(None)) == "UTC"

    def test_manual_entry_limits(self):
        with pytest.raises(InvalidIntervalError, match="positive"):
            self.service.validate_manual_hours(0)
        with pytest.raises(InvalidIntervalError, match="cannot exceed"):
            self.service.validate_manual_hours(24.5)

    def test_create_manual_entry_uses_timezone(self):
        entry = self.service.create_manual_entry(
            "u2", "t1", date(2024, 1, 2), 2.0, timezone_name="America/New_York"
        )

        assert entry.sessions[0].start_time == at(5, day=2)
        assert entry.total_hours == 2.0

    def test_build_session_checks_maximum(self):
        with pytest.raises(InvalidIntervalError):
            self.service.build_session(at(0), at(0) + timedelta(hours=13))

    def test_reschedule_session(self):
        session = self.service.build_session(at(9), at(10))
        self.service.reschedule_session(session, at(9), at(12))

        assert session.duration_hours == 3.0

    def test_session_on_entry_day(self):
        self.service.ensure_on_entry_day(at(23, 30), date(2024, 1, 1))
        self.service.ensure_on_entry_day(at(2, day=2), date(2024, 1, 1), "America/New_York")

        with pytest.raises(ValidationError, match="entry day"):
            self.service.ensure_on_entry_day(at(2, day=2), date(2024, 1, 1))
