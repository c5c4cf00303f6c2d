"""
Timer shortcut use cases.
"""

import logging
from typing import List

from timetrack.application.dto.shortcut_dto import (
    CreateShortcutRequestDTO,
    DeleteShortcutResponseDTO,
    ReorderShortcutsRequestDTO,
    ShortcutResponseDTO,
    UpdateShortcutRequestDTO,
)
from timetrack.application.use_cases.base_use_case import CommandUseCase, QueryUseCase, Repositories
from timetrack.application.use_cases.timer_use_cases import ensure_task_exists
from timetrack.domain.events.time_entry_events import TimerDiscarded
from timetrack.domain.models.base import NotFoundError, ValidationError
from timetrack.domain.models.shortcut import TimerShortcut

logger = logging.getLogger(__name__)


def load_owned_shortcut(repos: Repositories, user_id: str, shortcut_id: int) -> TimerShortcut:
    shortcut = repos.shortcuts.get_by_id(shortcut_id)
    if shortcut is None:
        raise NotFoundError("Shortcut", shortcut_id)
    shortcut.ensure_owner(user_id)
    return shortcut


class ListShortcutsUseCase(QueryUseCase):

    async def execute(self, user_id: str) -> List[ShortcutResponseDTO]:
        shortcuts = await self._transaction(lambda repos: repos.shortcuts.list_for_user(user_id))
        return [ShortcutResponseDTO.from_domain(s) for s in shortcuts]


class CreateShortcutUseCase(CommandUseCase):
    """New shortcuts go to the end of the user's list."""

    async def execute(self, user_id: str, request: CreateShortcutRequestDTO) -> ShortcutResponseDTO:
        def work(repos: Repositories):
            ensure_task_exists(repos, request.task_id)
            current_max = repos.shortcuts.max_sort_order(user_id)

            shortcut = TimerShortcut(
                user_id=user_id,
                task_id=request.task_id,
                label=request.label,
                description=request.description,
                color=request.color,
                is_pinned=request.is_pinned,
                sort_order=0 if current_max is None else current_max + 1,
            )
            return repos.shortcuts.add(shortcut)

        shortcut = await self._commit(work)
        logger.info(f"Shortcut {shortcut.id} created for user {user_id}")
        return ShortcutResponseDTO.from_domain(shortcut)


class UpdateShortcutUseCase(CommandUseCase):

    async def execute(
        self,
        user_id: str,
        shortcut_id: int,
        request: UpdateShortcutRequestDTO,
    ) -> ShortcutResponseDTO:
        fields = request.model_fields_set

        def work(repos: Repositories):
            shortcut = load_owned_shortcut(repos, user_id, shortcut_id)

            if "task_id" in fields:
                ensure_task_exists(repos, request.task_id)
                shortcut.retarget(request.task_id)
            for name in ("label", "description", "color", "is_pinned"):
                value = getattr(request, name)
                if name in fields and (value is not None or name == "description"):
                    setattr(shortcut, name, value)

            shortcut.validate()
            shortcut.mark_as_updated()
            return repos.shortcuts.save(shortcut)

        shortcut = await self._commit(work)
        logger.info(f"Shortcut {shortcut_id} updated: {sorted(fields)}")
        return ShortcutResponseDTO.from_domain(shortcut)


class DeleteShortcutUseCase(CommandUseCase):
    """
    Delete a shortcut. A timer the owner is running on the shortcut's
    task is discarded along with it.
    """

    async def execute(self, user_id: str, shortcut_id: int) -> DeleteShortcutResponseDTO:
        def work(repos: Repositories):
            shortcut = load_owned_shortcut(repos, user_id, shortcut_id)

            stopped_timer = False
            timer = repos.active_timers.get(user_id, for_update=True)
            if timer is not None and shortcut.task_id and timer.task_id == shortcut.task_id:
                stopped_timer = repos.active_timers.delete(user_id)
                self.record_event(TimerDiscarded(
                    user_id=user_id, task_id=timer.task_id, reason="shortcut_deleted"
                ))

            repos.shortcuts.delete(shortcut.id)
            return stopped_timer

        stopped_timer = await self._commit(work)
        logger.info(f"Shortcut {shortcut_id} deleted (stopped_timer={stopped_timer})")
        return DeleteShortcutResponseDTO(stopped_timer=stopped_timer)


class ReorderShortcutsUseCase(CommandUseCase):
    """
    Rewrite sort order from the given id sequence, all or nothing.
    Shortcuts left out of the sequence keep their relative order after it.
    """

    async def execute(self, user_id: str, request: ReorderShortcutsRequestDTO) -> List[ShortcutResponseDTO]:
        if len(set(request.shortcut_ids)) != len(request.shortcut_ids):
            raise ValidationError("Shortcut ids must not repeat", "shortcut_ids")

        def work(repos: Repositories):
            found = {s.id: s for s in repos.shortcuts.get_many(request.shortcut_ids)}

            for shortcut_id in request.shortcut_ids:
                shortcut = found.get(shortcut_id)
                if shortcut is None:
                    raise NotFoundError("Shortcut", shortcut_id)
                shortcut.ensure_owner(user_id)

            listed = [found[shortcut_id] for shortcut_id in request.shortcut_ids]
            unlisted = [
                s for s in repos.shortcuts.list_for_user(user_id) if s.id not in found
            ]

            for position, shortcut in enumerate(listed + unlisted):
                if shortcut.sort_order != position:
                    shortcut.sort_order = position
                    shortcut.mark_as_updated()
                    repos.shortcuts.save(shortcut)

            return repos.shortcuts.list_for_user(user_id)

        shortcuts = await self._commit(work)
        logger.info(f"Reordered {len(request.shortcut_ids)} shortcuts for user {user_id}")
        return [ShortcutResponseDTO.from_domain(s) for s in shortcuts]


class TrackShortcutUseUseCase(CommandUseCase):

    async def execute(self, user_id: str, shortcut_id: int) -> ShortcutResponseDTO:
        now = self.clock()

        def work(repos: Repositories):
            shortcut = load_owned_shortcut(repos, user_id, shortcut_id)
            shortcut.record_use(now)
            return repos.shortcuts.save(shortcut)

        shortcut = await self._commit(work)
        return ShortcutResponseDTO.from_domain(shortcut)
