"""
Timer use cases: the start / update / stop / discard state machine.

A user is either idle (no active timer row) or running (exactly one row).
Stopping turns the running timer into a session on the daily entry for
the timer's task and local start day.
"""

import logging
from datetime import datetime
from typing import Optional

from timetrack.application.dto.time_entry_dto import (
    ActiveTimerResponseDTO,
    StartTimerRequestDTO,
    TimeEntryResponseDTO,
    UpdateTimerRequestDTO,
)
from timetrack.application.use_cases.base_use_case import (
    Clock,
    CommandUseCase,
    QueryUseCase,
    Repositories,
    UnitOfWork,
)
from timetrack.config import settings
from timetrack.domain.events.time_entry_events import TimerDiscarded, TimerStarted, TimerStopped
from timetrack.domain.models.base import ConflictError, NotFoundError
from timetrack.domain.services.timer_service import TimerService

logger = logging.getLogger(__name__)


def default_timer_service() -> TimerService:
    return TimerService(
        max_interval_hours=settings.max_interval_hours,
        manual_entry_max_hours=settings.manual_entry_max_hours,
        default_timezone=settings.timezone,
    )


def ensure_task_exists(repos: Repositories, task_id: Optional[str]) -> None:
    if task_id and not repos.directory.task_exists(task_id):
        raise NotFoundError("Task", task_id)


class TimerUseCase(CommandUseCase):

    def __init__(
        self,
        uow: UnitOfWork,
        timer_service: Optional[TimerService] = None,
        clock: Optional[Clock] = None,
    ):
        super().__init__(uow, clock)
        self.timer_service = timer_service or default_timer_service()


class StartTimerUseCase(TimerUseCase):
    """Use case for starting a timer."""

    async def execute(self, user_id: str, request: StartTimerRequestDTO) -> ActiveTimerResponseDTO:
        now = self.clock()

        def work(repos: Repositories):
            ensure_task_exists(repos, request.task_id)

            if repos.active_timers.get(user_id) is not None:
                raise ConflictError("A timer is already running; stop or discard it first")

            timer = self.timer_service.start_timer(user_id, request.task_id, request.note, now)
            saved = repos.active_timers.add(timer)

            if request.shortcut_id is not None:
                self._track_shortcut_use(repos, user_id, request.shortcut_id, now)

            self.record_event(TimerStarted(user_id=user_id, task_id=saved.task_id))
            return saved

        timer = await self._commit(work)
        logger.info(f"Timer started for user {user_id} on task {timer.task_id}")
        return ActiveTimerResponseDTO.from_domain(timer, now)

    def _track_shortcut_use(self, repos: Repositories, user_id: str, shortcut_id: int, now: datetime) -> None:
        shortcut = repos.shortcuts.get_by_id(shortcut_id)
        if shortcut is None or shortcut.user_id != user_id:
            logger.warning(f"Shortcut {shortcut_id} not usable by user {user_id}; use not tracked")
            return

        shortcut.record_use(now)
        repos.shortcuts.save(shortcut)


class GetActiveTimerUseCase(QueryUseCase):
    """Use case for reading the running timer."""

    async def execute(self, user_id: str) -> Optional[ActiveTimerResponseDTO]:
        timer = await self._transaction(lambda repos: repos.active_timers.get(user_id))
        if timer is None:
            return None
        return ActiveTimerResponseDTO.from_domain(timer, self.clock())


class UpdateRunningTimerUseCase(TimerUseCase):
    """Change task or note of the running timer; the start time stays put."""

    async def execute(self, user_id: str, request: UpdateTimerRequestDTO) -> ActiveTimerResponseDTO:
        patch = {name: getattr(request, name) for name in request.model_fields_set}

        def work(repos: Repositories):
            timer = repos.active_timers.get(user_id, for_update=True)
            if timer is None:
                raise NotFoundError("ActiveTimer")

            if "task_id" in patch:
                ensure_task_exists(repos, patch["task_id"])

            timer.apply_patch(**patch)
            return repos.active_timers.save(timer)

        timer = await self._commit(work)
        logger.info(f"Running timer updated for user {user_id}: {sorted(patch)}")
        return ActiveTimerResponseDTO.from_domain(timer, self.clock())


class StopTimerUseCase(TimerUseCase):
    """Use case for stopping a timer."""

    async def execute(self, user_id: str) -> TimeEntryResponseDTO:
        now = self.clock()

        def work(repos: Repositories):
            timer = repos.active_timers.get(user_id, for_update=True)
            if timer is None:
                raise NotFoundError("ActiveTimer")

            timezone_name = repos.directory.get_user_timezone(user_id)
            entry_date, session = self.timer_service.close_timer(timer, now, timezone_name)

            entry = repos.time_entries.find_or_create(user_id, timer.task_id, entry_date)
            entry.add_session(session)
            saved = repos.time_entries.save(entry)

            repos.active_timers.delete(user_id)

            self.record_task_hours(repos, saved.task_id)
            self.record_event(TimerStopped(
                user_id=user_id,
                time_entry_id=saved.id,
                task_id=saved.task_id,
                duration_hours=session.duration_hours,
                entry_date=entry_date,
            ))
            return saved

        entry = await self._commit(work)
        logger.info(
            f"Timer stopped for user {user_id}: entry {entry.id} on {entry.entry_date} "
            f"now {entry.total_hours:.2f}h across {len(entry.sessions)} session(s)"
        )
        return TimeEntryResponseDTO.from_domain(entry)


class DiscardTimerUseCase(TimerUseCase):
    """Drop the running timer without recording any time."""

    async def execute(self, user_id: str) -> None:
        def work(repos: Repositories):
            timer = repos.active_timers.get(user_id, for_update=True)
            if timer is None:
                raise NotFoundError("ActiveTimer")

            repos.active_timers.delete(user_id)
            self.record_event(TimerDiscarded(user_id=user_id, task_id=timer.task_id))

        await self._commit(work)
        logger.info(f"Timer discarded for user {user_id}")
