"""
Transaction boundary for use cases.

Every operation runs inside one database transaction with repositories
bound to that transaction's session. Transient storage failures are
retried with a short backoff; what still fails afterwards surfaces as
``StorageUnavailableError``. Domain errors are never retried.
"""

import logging
import time
from typing import Callable, Optional, TypeVar

from sqlalchemy.exc import DBAPIError, DisconnectionError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session, sessionmaker

from timetrack.application.use_cases.base_use_case import Repositories, UnitOfWork
from timetrack.config import settings
from timetrack.domain.models.base import StorageUnavailableError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def is_transient(error: Exception) -> bool:
    """Whether a storage error is worth one more attempt."""
    if isinstance(error, (OperationalError, DisconnectionError, PoolTimeoutError)):
        return True
    return isinstance(error, DBAPIError) and bool(error.connection_invalidated)


class SQLAlchemyUnitOfWork(UnitOfWork):
    """Runs a unit of work against a fresh session, committing on success."""

    def __init__(
        self,
        session_factory: Optional[sessionmaker] = None,
        retry_attempts: Optional[int] = None,
        retry_delay: Optional[float] = None,
        snapshot_isolation_level: Optional[str] = None,
    ):
        if session_factory is None:
            from .database import SessionLocal
            session_factory = SessionLocal

        self.session_factory = session_factory
        self.retry_attempts = settings.storage_retry_attempts if retry_attempts is None else retry_attempts
        self.retry_delay = settings.storage_retry_delay_seconds if retry_delay is None else retry_delay
        self.snapshot_isolation_level = snapshot_isolation_level or settings.snapshot_isolation_level

    def run(self, work: Callable[[Repositories], T], snapshot: bool = False) -> T:
        """
        Execute ``work`` in one transaction.

        Args:
            work: Callable receiving the transaction's repositories
            snapshot: Read from a single consistent snapshot (PostgreSQL)

        Returns:
            Whatever ``work`` returns, after commit

        Raises:
            StorageUnavailableError: Storage kept failing after the retry
        """
        attempts = self.retry_attempts + 1

        for attempt in range(1, attempts + 1):
            try:
                return self._run_once(work, snapshot)
            except DBAPIError as e:
                if not is_transient(e):
                    raise
                self._handle_transient(e, attempt, attempts)
            except (DisconnectionError, PoolTimeoutError) as e:
                self._handle_transient(e, attempt, attempts)

        raise StorageUnavailableError()

    def _handle_transient(self, error: Exception, attempt: int, attempts: int) -> None:
        if attempt >= attempts:
            logger.error(f"Storage unavailable after {attempts} attempt(s): {error}")
            raise StorageUnavailableError() from error

        delay = self.retry_delay * attempt
        logger.warning(f"Attempt {attempt} failed: {error}. Retrying in {delay:.2f}s")
        if delay > 0:
            time.sleep(delay)

    def _run_once(self, work: Callable[[Repositories], T], snapshot: bool) -> T:
        session = self.session_factory()
        try:
            if snapshot and session.get_bind().dialect.name == "postgresql":
                session.connection(
                    execution_options={"isolation_level": self.snapshot_isolation_level}
                )

            result = work(self._repositories(session))
            session.commit()
            return result
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def _repositories(self, session: Session) -> Repositories:
        from timetrack.infrastructure.repositories import (
            SQLAlchemyActiveTimerRepository,
            SQLAlchemyDirectoryRepository,
            SQLAlchemyShortcutRepository,
            SQLAlchemyTimeEntryRepository,
        )

        return Repositories(
            time_entries=SQLAlchemyTimeEntryRepository(session),
            active_timers=SQLAlchemyActiveTimerRepository(session),
            shortcuts=SQLAlchemyShortcutRepository(session),
            directory=SQLAlchemyDirectoryRepository(session),
        )
