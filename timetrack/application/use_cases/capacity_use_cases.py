"""
Capacity utilization query.
"""

from typing import Optional

from timetrack.application.dto.capacity_dto import UtilizationRequestDTO, UtilizationResponseDTO
from timetrack.application.use_cases.base_use_case import Clock, QueryUseCase, Repositories, UnitOfWork
from timetrack.domain.models.capacity import DateRange
from timetrack.domain.services.capacity_service import CapacityService


class GetUtilizationUseCase(QueryUseCase):
    """
    Available versus logged hours per user, per department and overall.
    Both sides are read from one snapshot.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        capacity_service: Optional[CapacityService] = None,
        clock: Optional[Clock] = None,
    ):
        super().__init__(uow, clock)
        self.capacity_service = capacity_service or CapacityService()

    async def execute(self, request: UtilizationRequestDTO) -> UtilizationResponseDTO:
        period = DateRange(request.start_date, request.end_date)

        def work(repos: Repositories):
            profiles = repos.directory.capacity_profiles(period, request.user_ids)
            logged = repos.time_entries.sum_hours_by_user(
                [p.user_id for p in profiles], period.start, period.end
            )
            return self.capacity_service.build_report(period, profiles, logged)

        report = await self._transaction(work, snapshot=True)
        return UtilizationResponseDTO.from_domain(report)
