"""
Timer shortcut DTOs.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from timetrack.domain.models.shortcut import TimerShortcut
from .base_dto import RequestDTO, ResponseDTO

COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


class CreateShortcutRequestDTO(RequestDTO):
    task_id: Optional[str] = Field(default=None, description="Task the shortcut starts")
    label: str = Field(min_length=1, max_length=100, description="Display label")
    description: Optional[str] = Field(default=None, max_length=500)
    color: str = Field(default="#3B82F6", pattern=COLOR_PATTERN)
    is_pinned: bool = Field(default=False)

    @field_validator('label')
    @classmethod
    def validate_label(cls, v):
        if not v.strip():
            raise ValueError('Label cannot be blank')
        return v.strip()


class UpdateShortcutRequestDTO(RequestDTO):
    """Only fields present in the request are applied."""

    task_id: Optional[str] = Field(default=None)
    label: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    color: Optional[str] = Field(default=None, pattern=COLOR_PATTERN)
    is_pinned: Optional[bool] = Field(default=None)


class ReorderShortcutsRequestDTO(RequestDTO):
    shortcut_ids: List[int] = Field(min_length=1, max_length=200, description="Shortcut IDs in their new order")

    @field_validator('shortcut_ids')
    @classmethod
    def validate_unique(cls, v):
        if len(set(v)) != len(v):
            raise ValueError('Shortcut IDs must be unique')
        return v


class ShortcutResponseDTO(ResponseDTO):
    id: int
    task_id: Optional[str] = None
    label: str
    description: Optional[str] = None
    color: str
    sort_order: int
    is_pinned: bool
    use_count: int
    last_used_at: Optional[datetime] = None
    is_orphaned: bool
    orphaned_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, shortcut: TimerShortcut) -> "ShortcutResponseDTO":
        return cls(
            id=shortcut.id,
            task_id=shortcut.task_id,
            label=shortcut.label,
            description=shortcut.description,
            color=shortcut.color,
            sort_order=shortcut.sort_order,
            is_pinned=shortcut.is_pinned,
            use_count=shortcut.use_count,
            last_used_at=shortcut.last_used_at,
            is_orphaned=shortcut.is_orphaned,
            orphaned_at=shortcut.orphaned_at,
            created_at=shortcut.created_at,
        )


class DeleteShortcutResponseDTO(ResponseDTO):
    stopped_timer: bool = Field(description="Whether a running timer on the shortcut's task was discarded")
