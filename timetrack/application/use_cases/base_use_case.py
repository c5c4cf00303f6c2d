"""
Base use case classes for the application layer.
Provides common patterns and structure for use case implementations.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional, TypeVar

from timetrack.domain.events.base import DomainEvent, publish_event
from timetrack.domain.events.time_entry_events import TaskLoggedHoursChanged
from timetrack.domain.models.base import utc_now
from timetrack.domain.repositories import (
    ActiveTimerRepository,
    DirectoryRepository,
    ShortcutRepository,
    TimeEntryRepository,
)

logger = logging.getLogger(__name__)

T = TypeVar('T')

Clock = Callable[[], datetime]


@dataclass
class Repositories:
    """Repositories sharing one transaction."""

    time_entries: TimeEntryRepository
    active_timers: ActiveTimerRepository
    shortcuts: ShortcutRepository
    directory: DirectoryRepository


class UnitOfWork(ABC):
    """Transaction boundary handed to use cases."""

    @abstractmethod
    def run(self, work: Callable[[Repositories], T], snapshot: bool = False) -> T:
        """Run ``work`` in one transaction and return its result after commit."""
        pass


class BaseUseCase(ABC):
    """
    Base class for all use cases.
    Holds the unit of work and the clock, and times each execution.
    """

    def __init__(self, uow: UnitOfWork, clock: Optional[Clock] = None):
        self.uow = uow
        self.clock = clock or utc_now
        self.execution_start: Optional[datetime] = None
        self.execution_end: Optional[datetime] = None

    async def _transaction(self, work: Callable[[Repositories], T], snapshot: bool = False) -> T:
        self.execution_start = utc_now()
        try:
            return self.uow.run(work, snapshot=snapshot)
        finally:
            self.execution_end = utc_now()
            elapsed = (self.execution_end - self.execution_start).total_seconds()
            logger.debug(f"{self.__class__.__name__} ran in {elapsed:.3f}s")


class QueryUseCase(BaseUseCase):
    """
    Base class for query use cases (read operations).
    """
    pass


class CommandUseCase(BaseUseCase):
    """
    Base class for command use cases (write operations).
    Domain events are collected during the transaction and published
    only after it commits.
    """

    def __init__(self, uow: UnitOfWork, clock: Optional[Clock] = None):
        super().__init__(uow, clock)
        self.events: List[DomainEvent] = []

    def record_event(self, event: DomainEvent) -> None:
        self.events.append(event)

    def record_task_hours(self, repos: Repositories, *task_ids: Optional[str]) -> None:
        """Queue the logged total of every task a write touched."""
        touched = sorted({task_id for task_id in task_ids if task_id})
        if not touched:
            return
        totals = repos.time_entries.sum_hours_by_task(touched)
        for task_id in touched:
            self.record_event(TaskLoggedHoursChanged(
                task_id=task_id,
                logged_hours=round(totals.get(task_id, 0.0), 2),
            ))

    async def _commit(self, work: Callable[[Repositories], T]) -> T:
        """Run the write transaction, then publish collected events."""
        def attempt(repos: Repositories) -> T:
            # a retried transaction starts over with no events
            self.events.clear()
            return work(repos)

        try:
            result = await self._transaction(attempt)
        except Exception:
            self.events.clear()
            raise
        await self._publish_events()
        return result

    async def _publish_events(self) -> None:
        """Publish collected domain events."""
        for event in self.events:
            await publish_event(event)
        self.events.clear()
