"""Active timer repository interface."""

from abc import ABC, abstractmethod
from typing import List, Optional

from timetrack.domain.models.time_entry import ActiveTimer


class ActiveTimerRepository(ABC):
    """At most one row per user; storage enforces it."""

    @abstractmethod
    def get(self, user_id: str, for_update: bool = False) -> Optional[ActiveTimer]:
        pass

    @abstractmethod
    def add(self, timer: ActiveTimer) -> ActiveTimer:
        """Insert a timer. Raises ConflictError if the user already has one."""
        pass

    @abstractmethod
    def save(self, timer: ActiveTimer) -> ActiveTimer:
        pass

    @abstractmethod
    def delete(self, user_id: str) -> bool:
        """Remove the user's timer. False if there was none."""
        pass

    @abstractmethod
    def delete_by_task(self, task_id: str) -> List[ActiveTimer]:
        """Remove every timer running on a task and return them."""
        pass
