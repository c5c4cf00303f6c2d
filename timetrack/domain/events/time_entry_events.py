"""
Domain events related to time tracking.
"""

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Optional

from .base import DomainEvent


@dataclass(kw_only=True)
class TimerStarted(DomainEvent):
    user_id: str
    task_id: Optional[str] = None

    def _get_event_data(self) -> Dict[str, Any]:
        return {"user_id": self.user_id, "task_id": self.task_id}


@dataclass(kw_only=True)
class TimerStopped(DomainEvent):
    user_id: str
    time_entry_id: int
    task_id: Optional[str] = None
    duration_hours: float = 0.0
    entry_date: Optional[date] = None

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "user_id": self.user_id,
            "time_entry_id": self.time_entry_id,
            "task_id": self.task_id,
            "duration_hours": self.duration_hours,
            "entry_date": self.entry_date.isoformat() if self.entry_date else None,
        }


@dataclass(kw_only=True)
class TimerDiscarded(DomainEvent):
    """A running timer was dropped without producing a session."""
    user_id: str
    task_id: Optional[str] = None
    reason: str = "user"

    def _get_event_data(self) -> Dict[str, Any]:
        return {"user_id": self.user_id, "task_id": self.task_id, "reason": self.reason}


@dataclass(kw_only=True)
class TimeEntryCreated(DomainEvent):
    time_entry_id: int
    user_id: str
    task_id: Optional[str] = None
    hours: float = 0.0
    entry_date: Optional[date] = None

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "time_entry_id": self.time_entry_id,
            "user_id": self.user_id,
            "task_id": self.task_id,
            "hours": self.hours,
            "entry_date": self.entry_date.isoformat() if self.entry_date else None,
        }


@dataclass(kw_only=True)
class TimeEntryDeleted(DomainEvent):
    time_entry_id: int
    user_id: str

    def _get_event_data(self) -> Dict[str, Any]:
        return {"time_entry_id": self.time_entry_id, "user_id": self.user_id}


@dataclass(kw_only=True)
class ShortcutOrphaned(DomainEvent):
    """The task behind a shortcut was deleted; the owner should be told."""
    user_id: str
    shortcut_id: int
    task_id: str
    label: str = ""

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "user_id": self.user_id,
            "shortcut_id": self.shortcut_id,
            "task_id": self.task_id,
            "label": self.label,
        }


@dataclass(kw_only=True)
class TimeEntriesConsolidated(DomainEvent):
    groups_merged: int
    entries_removed: int
    sessions_moved: int

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "groups_merged": self.groups_merged,
            "entries_removed": self.entries_removed,
            "sessions_moved": self.sessions_moved,
        }


@dataclass(kw_only=True)
class TaskLoggedHoursChanged(DomainEvent):
    """Hours logged against a task changed; the task service keeps its own copy."""
    task_id: str
    logged_hours: float

    def _get_event_data(self) -> Dict[str, Any]:
        return {"task_id": self.task_id, "logged_hours": self.logged_hours}
