"""
Timer shortcuts router.
"""

from typing import Annotated, List

from fastapi import APIRouter, Depends, status

from timetrack.application.dto.shortcut_dto import (
    CreateShortcutRequestDTO,
    DeleteShortcutResponseDTO,
    ReorderShortcutsRequestDTO,
    ShortcutResponseDTO,
    UpdateShortcutRequestDTO,
)
from timetrack.application.use_cases.base_use_case import Clock, UnitOfWork
from timetrack.application.use_cases.shortcut_use_cases import (
    CreateShortcutUseCase,
    DeleteShortcutUseCase,
    ListShortcutsUseCase,
    ReorderShortcutsUseCase,
    TrackShortcutUseUseCase,
    UpdateShortcutUseCase,
)
from timetrack.infrastructure.auth import get_current_user_id
from timetrack.infrastructure.web.dependencies import get_clock, get_unit_of_work


router = APIRouter()

UserId = Annotated[str, Depends(get_current_user_id)]
Uow = Annotated[UnitOfWork, Depends(get_unit_of_work)]


@router.get("", response_model=List[ShortcutResponseDTO])
async def list_shortcuts(user_id: UserId, uow: Uow):
    """List shortcuts: pinned first, then by sort order, then newest."""
    return await ListShortcutsUseCase(uow).execute(user_id)


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ShortcutResponseDTO)
async def create_shortcut(request: CreateShortcutRequestDTO, user_id: UserId, uow: Uow):
    return await CreateShortcutUseCase(uow).execute(user_id, request)


@router.put("/reorder", response_model=List[ShortcutResponseDTO])
async def reorder_shortcuts(request: ReorderShortcutsRequestDTO, user_id: UserId, uow: Uow):
    """Set the order of the given shortcuts. Any foreign id rejects the whole request."""
    return await ReorderShortcutsUseCase(uow).execute(user_id, request)


@router.patch("/{shortcut_id}", response_model=ShortcutResponseDTO)
async def update_shortcut(shortcut_id: int, request: UpdateShortcutRequestDTO, user_id: UserId, uow: Uow):
    return await UpdateShortcutUseCase(uow).execute(user_id, shortcut_id, request)


@router.delete("/{shortcut_id}", response_model=DeleteShortcutResponseDTO)
async def delete_shortcut(shortcut_id: int, user_id: UserId, uow: Uow):
    """Delete a shortcut; a timer running on its task is discarded."""
    return await DeleteShortcutUseCase(uow).execute(user_id, shortcut_id)


@router.post("/{shortcut_id}/use", response_model=ShortcutResponseDTO)
async def track_shortcut_use(
    shortcut_id: int,
    user_id: UserId,
    uow: Uow,
    clock: Annotated[Clock, Depends(get_clock)],
):
    return await TrackShortcutUseUseCase(uow, clock).execute(user_id, shortcut_id)
