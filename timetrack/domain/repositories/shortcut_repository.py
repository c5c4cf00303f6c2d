"""Timer shortcut repository interface."""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from timetrack.domain.models.shortcut import TimerShortcut


class ShortcutRepository(ABC):

    @abstractmethod
    def list_for_user(self, user_id: str) -> List[TimerShortcut]:
        """Pinned first, then sort order, then newest."""
        pass

    @abstractmethod
    def get_by_id(self, shortcut_id: int) -> Optional[TimerShortcut]:
        pass

    @abstractmethod
    def get_many(self, shortcut_ids: Sequence[int]) -> List[TimerShortcut]:
        pass

    @abstractmethod
    def find_by_task(self, task_id: str) -> List[TimerShortcut]:
        pass

    @abstractmethod
    def max_sort_order(self, user_id: str) -> Optional[int]:
        pass

    @abstractmethod
    def add(self, shortcut: TimerShortcut) -> TimerShortcut:
        pass

    @abstractmethod
    def save(self, shortcut: TimerShortcut) -> TimerShortcut:
        pass

    @abstractmethod
    def delete(self, shortcut_id: int) -> bool:
        pass
