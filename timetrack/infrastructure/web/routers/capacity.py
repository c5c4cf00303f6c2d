"""
Capacity planning router.
"""

from datetime import date
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Query

from timetrack.application.dto.capacity_dto import UtilizationRequestDTO, UtilizationResponseDTO
from timetrack.application.use_cases.base_use_case import UnitOfWork
from timetrack.application.use_cases.capacity_use_cases import GetUtilizationUseCase
from timetrack.infrastructure.auth import get_current_user_id
from timetrack.infrastructure.web.dependencies import get_unit_of_work


router = APIRouter()


@router.get("/utilization", response_model=UtilizationResponseDTO)
async def get_utilization(
    user_id: Annotated[str, Depends(get_current_user_id)],
    uow: Annotated[UnitOfWork, Depends(get_unit_of_work)],
    start_date: date = Query(..., description="First day (inclusive)"),
    end_date: date = Query(..., description="Last day (inclusive)"),
    user_ids: Optional[List[str]] = Query(None, description="Restrict to these users"),
):
    """
    Utilization per user, per department and overall.

    Buckets: critical (<25%), low (<50%), moderate (<80%),
    optimal (<=100%), over-allocated (>100%).
    """
    request = UtilizationRequestDTO(start_date=start_date, end_date=end_date, user_ids=user_ids)
    return await GetUtilizationUseCase(uow).execute(request)
