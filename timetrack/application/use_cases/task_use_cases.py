"""
Reactions to task lifecycle events published by the task service.
"""

import logging

from timetrack.application.dto.maintenance_dto import TaskDeletedResponseDTO, TaskLoggedHoursResponseDTO
from timetrack.application.use_cases.base_use_case import CommandUseCase, QueryUseCase, Repositories
from timetrack.application.use_cases.timer_use_cases import ensure_task_exists
from timetrack.domain.events.time_entry_events import ShortcutOrphaned, TimerDiscarded

logger = logging.getLogger(__name__)


class HandleTaskDeletedUseCase(CommandUseCase):
    """
    A deleted task takes its running timers with it, in the same
    transaction. Shortcuts survive but are marked orphaned for their
    owners to deal with. Time entries keep their task reference.
    """

    async def execute(self, task_id: str) -> TaskDeletedResponseDTO:
        now = self.clock()

        def work(repos: Repositories):
            timers = repos.active_timers.delete_by_task(task_id)
            for timer in timers:
                self.record_event(TimerDiscarded(
                    user_id=timer.user_id, task_id=task_id, reason="task_deleted"
                ))

            orphaned = 0
            for shortcut in repos.shortcuts.find_by_task(task_id):
                if shortcut.is_orphaned:
                    continue
                shortcut.mark_orphaned(now)
                repos.shortcuts.save(shortcut)
                orphaned += 1
                self.record_event(ShortcutOrphaned(
                    user_id=shortcut.user_id,
                    shortcut_id=shortcut.id,
                    task_id=task_id,
                    label=shortcut.label,
                ))

            return len(timers), orphaned

        discarded, orphaned = await self._commit(work)
        logger.info(
            f"Task {task_id} deleted: discarded {discarded} timer(s), "
            f"orphaned {orphaned} shortcut(s)"
        )
        return TaskDeletedResponseDTO(
            task_id=task_id,
            discarded_timers=discarded,
            orphaned_shortcuts=orphaned,
        )


class GetTaskLoggedHoursUseCase(QueryUseCase):
    """Hours logged on a task by every user, for the task service's actual-hours field."""

    async def execute(self, task_id: str) -> TaskLoggedHoursResponseDTO:
        def work(repos: Repositories):
            ensure_task_exists(repos, task_id)
            return repos.time_entries.sum_hours_by_task([task_id]).get(task_id, 0.0)

        hours = await self._transaction(work)
        return TaskLoggedHoursResponseDTO(task_id=task_id, logged_hours=round(hours, 2))
