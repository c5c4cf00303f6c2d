"""
Read-only view of data owned by other services: users, tasks and
approved time-off. Nothing here is written by time tracking.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence

from timetrack.domain.models.capacity import DateRange, UserCapacityProfile


class DirectoryRepository(ABC):

    @abstractmethod
    def user_exists(self, user_id: str) -> bool:
        pass

    @abstractmethod
    def get_user_timezone(self, user_id: str) -> Optional[str]:
        pass

    @abstractmethod
    def task_exists(self, task_id: str) -> bool:
        pass

    @abstractmethod
    def task_ids_for_project(self, project_id: str) -> List[str]:
        pass

    @abstractmethod
    def projects_for_tasks(self, task_ids: Sequence[str]) -> Dict[str, Dict[str, Any]]:
        """
        Map task id to ``{"project_id", "project_name", "project_code",
        "task_title"}``.
        """
        pass

    @abstractmethod
    def users_by_id(self, user_ids: Sequence[str]) -> Dict[str, Dict[str, Any]]:
        """Map user id to ``{"id", "email", "first_name", "last_name", "timezone"}``."""
        pass

    @abstractmethod
    def capacity_profiles(
        self,
        period: DateRange,
        user_ids: Optional[Sequence[str]] = None,
    ) -> List[UserCapacityProfile]:
        """
        Active users (or the given ones) with weekly baseline, approved
        time-off overlapping the period, and availability overrides.
        """
        pass
