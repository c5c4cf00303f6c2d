"""Time entry repository interface.
Defines the contract for daily entry and session persistence.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Dict, List, Optional, Sequence, Tuple

from timetrack.domain.models.time_entry import TimeEntry


class TimeEntryRepository(ABC):
    """
    Repository interface for TimeEntry aggregates and their sessions.
    Implementations run inside the caller's transaction.
    """

    @abstractmethod
    def get_by_id(self, entry_id: int, for_update: bool = False) -> Optional[TimeEntry]:
        """Find an entry with its sessions. Returns None if not found."""
        pass

    @abstractmethod
    def get_by_session_id(self, session_id: int, for_update: bool = False) -> Optional[TimeEntry]:
        """Find the entry that owns a session."""
        pass

    @abstractmethod
    def find_by_key(
        self,
        user_id: str,
        task_id: Optional[str],
        entry_date: date,
        for_update: bool = False,
    ) -> Optional[TimeEntry]:
        """Find the entry for a (user, task, date) natural key."""
        pass

    @abstractmethod
    def add(self, entry: TimeEntry) -> TimeEntry:
        """
        Insert a new entry with its sessions.
        Raises ConflictError if the natural key is taken.
        """
        pass

    @abstractmethod
    def find_or_create(self, user_id: str, task_id: Optional[str], entry_date: date) -> TimeEntry:
        """
        Atomically return the locked entry for a key, inserting an empty
        timer-based one if none exists.
        """
        pass

    @abstractmethod
    def save(self, entry: TimeEntry) -> TimeEntry:
        """
        Persist entry fields and its session set, then regenerate cached
        totals from the stored sessions.
        """
        pass

    @abstractmethod
    def delete(self, entry_id: int) -> bool:
        """Delete an entry and, by cascade, its sessions."""
        pass

    @abstractmethod
    def list_for_user(
        self,
        user_id: str,
        offset: int = 0,
        limit: int = 50,
        task_ids: Optional[Sequence[str]] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Tuple[List[TimeEntry], int]:
        """Page of a user's entries (newest day first) and the total count."""
        pass

    @abstractmethod
    def list_in_range(self, user_id: str, start_date: date, end_date: date) -> List[TimeEntry]:
        pass

    @abstractmethod
    def list_between(self, start_date: date, end_date: date) -> List[TimeEntry]:
        """Entries of every user dated inside the range, by user then day."""
        pass

    @abstractmethod
    def sum_hours_by_user(
        self,
        user_ids: Sequence[str],
        start_date: date,
        end_date: date,
    ) -> Dict[str, float]:
        """Total logged hours per user for entries dated inside the range."""
        pass

    @abstractmethod
    def sum_hours_by_task(self, task_ids: Sequence[str]) -> Dict[str, float]:
        """All-time logged hours per task, across users."""
        pass

    @abstractmethod
    def find_duplicate_entries(self) -> List[TimeEntry]:
        """Locked entries belonging to a natural key held by more than one entry."""
        pass

    @abstractmethod
    def delete_many(self, entry_ids: Sequence[int]) -> int:
        pass

    @abstractmethod
    def install_unique_key(self) -> bool:
        """Create the (user, task, date) unique index if missing. True if created."""
        pass
