"""
Timer shortcut domain model.
A shortcut is a user-owned template for starting a timer on a task.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .base import BaseEntity, AuthorizationError, ValidationError, utc_now


@dataclass
class TimerShortcut(BaseEntity):
    """Ordered, user-owned timer template."""

    user_id: str = ""
    task_id: Optional[str] = None
    label: str = ""
    description: Optional[str] = None
    color: str = "#3B82F6"
    sort_order: int = 0
    is_pinned: bool = False
    use_count: int = 0
    last_used_at: Optional[datetime] = None
    orphaned_at: Optional[datetime] = None

    def __post_init__(self):
        super().__post_init__()
        self.validate()

    def validate(self) -> None:
        if not self.user_id:
            raise ValidationError("User ID is required", "user_id")
        if not self.label or not self.label.strip():
            raise ValidationError("Shortcut label is required", "label")
        if len(self.label) > 100:
            raise ValidationError("Shortcut label too long (max 100 characters)", "label")

    @property
    def is_orphaned(self) -> bool:
        """The referenced task was deleted."""
        return self.orphaned_at is not None

    def ensure_owner(self, user_id: str) -> None:
        if self.user_id != user_id:
            raise AuthorizationError("Not authorized to access this shortcut")

    def record_use(self, now: Optional[datetime] = None) -> None:
        self.use_count += 1
        self.last_used_at = now or utc_now()
        self.mark_as_updated()

    def mark_orphaned(self, now: Optional[datetime] = None) -> None:
        if self.orphaned_at is None:
            self.orphaned_at = now or utc_now()
            self.mark_as_updated()

    def retarget(self, task_id: Optional[str]) -> None:
        """Point the shortcut at a (new) live task, clearing the orphan mark."""
        self.task_id = task_id
        self.orphaned_at = None
        self.mark_as_updated()
