"""
Unit tests for the SQLAlchemy unit of work.
"""

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from timetrack.domain.models.base import ConflictError, StorageUnavailableError
from timetrack.domain.models.time_entry import ActiveTimer
from timetrack.infrastructure.db.unit_of_work import SQLAlchemyUnitOfWork, is_transient


def operational_error():
    return OperationalError("SELECT 1", {}, Exception("server closed the connection"))


class FlakyWork:
    """Raises a transient error for the first ``failures`` calls."""

    def __init__(self, failures):
        self.failures = failures
        self.calls = 0

    def __call__(self, repos):
        self.calls += 1
        if self.calls <= self.failures:
            raise operational_error()
        return repos.directory.user_exists("u1")


class TestSQLAlchemyUnitOfWork:
    """Test cases for retry and commit behavior."""

    def test_returns_work_result(self, uow):
        assert uow.run(lambda repos: repos.directory.task_exists("t1")) is True

    def test_transient_failure_is_retried_once(self, uow):
        work = FlakyWork(failures=1)

        assert uow.run(work) is True
        assert work.calls == 2

    def test_persistent_failure_becomes_storage_unavailable(self, uow):
        work = FlakyWork(failures=5)

        with pytest.raises(StorageUnavailableError):
            uow.run(work)
        assert work.calls == 2

    def test_retry_attempts_configurable(self, seeded):
        uow = SQLAlchemyUnitOfWork(seeded, retry_attempts=0, retry_delay=0)
        work = FlakyWork(failures=1)

        with pytest.raises(StorageUnavailableError):
            uow.run(work)
        assert work.calls == 1

    def test_domain_errors_are_not_retried(self, uow):
        calls = []

        def work(repos):
            calls.append(1)
            raise ConflictError("A timer is already running")

        with pytest.raises(ConflictError):
            uow.run(work)
        assert len(calls) == 1

    def test_failed_work_rolls_back(self, uow, clock):
        def work(repos):
            repos.active_timers.add(ActiveTimer(user_id="u1", start_time=clock.now))
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            uow.run(work)
        assert uow.run(lambda repos: repos.active_timers.get("u1")) is None

    def test_is_transient(self):
        assert is_transient(operational_error())
        assert not is_transient(IntegrityError("INSERT", {}, Exception("duplicate")))
        assert not is_transient(ValueError("nope"))
