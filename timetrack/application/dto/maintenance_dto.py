"""
DTOs for maintenance and collaborator hooks.
"""

from pydantic import Field

from .base_dto import ResponseDTO


class ConsolidationResultDTO(ResponseDTO):
    groups_merged: int = Field(description="Duplicate (user, task, date) groups merged")
    entries_removed: int = Field(description="Non-survivor entries deleted")
    sessions_moved: int = Field(description="Sessions re-parented onto survivors")
    constraint_installed: bool = Field(description="Whether the unique index was created by this run")


class TaskDeletedResponseDTO(ResponseDTO):
    task_id: str
    discarded_timers: int
    orphaned_shortcuts: int


class TaskLoggedHoursResponseDTO(ResponseDTO):
    task_id: str
    logged_hours: float = Field(description="Hours logged on the task by all users")
