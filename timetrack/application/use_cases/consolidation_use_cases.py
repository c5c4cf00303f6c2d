"""
Repair of duplicate daily entries, followed by installing the natural-key
unique index. Safe to re-run: clean data is left untouched.
"""

import logging
from typing import Optional

from timetrack.application.dto.maintenance_dto import ConsolidationResultDTO
from timetrack.application.use_cases.base_use_case import Clock, CommandUseCase, Repositories, UnitOfWork
from timetrack.domain.events.time_entry_events import TimeEntriesConsolidated
from timetrack.domain.services.consolidation_service import ConsolidationService

logger = logging.getLogger(__name__)


class ConsolidateTimeEntriesUseCase(CommandUseCase):

    def __init__(
        self,
        uow: UnitOfWork,
        consolidation_service: Optional[ConsolidationService] = None,
        clock: Optional[Clock] = None,
    ):
        super().__init__(uow, clock)
        self.consolidation_service = consolidation_service or ConsolidationService()

    async def execute(self, install_constraint: bool = True) -> ConsolidationResultDTO:
        def work(repos: Repositories):
            # Rows come back locked, so no stop or manual create can slip
            # a new entry into a group while it is being merged.
            duplicates = repos.time_entries.find_duplicate_entries()
            plans = self.consolidation_service.plan(duplicates)

            entries_removed = 0
            sessions_moved = 0
            for plan in plans:
                outcome = self.consolidation_service.apply(plan)
                repos.time_entries.save(outcome.survivor)
                entries_removed += repos.time_entries.delete_many(outcome.removed_entry_ids)
                sessions_moved += len(outcome.moved_sessions)

            installed = repos.time_entries.install_unique_key() if install_constraint else False

            result = ConsolidationResultDTO(
                groups_merged=len(plans),
                entries_removed=entries_removed,
                sessions_moved=sessions_moved,
                constraint_installed=installed,
            )
            if plans:
                self.record_event(TimeEntriesConsolidated(
                    groups_merged=result.groups_merged,
                    entries_removed=result.entries_removed,
                    sessions_moved=result.sessions_moved,
                ))
            return result

        result = await self._commit(work)
        logger.info(
            f"Consolidation finished: {result.groups_merged} group(s) merged, "
            f"{result.entries_removed} entries removed, {result.sessions_moved} sessions moved, "
            f"constraint installed: {result.constraint_installed}"
        )
        return result
