"""
Repository interfaces for the domain layer.
"""

from .time_entry_repository import TimeEntryRepository
from .active_timer_repository import ActiveTimerRepository
from .shortcut_repository import ShortcutRepository
from .directory_repository import DirectoryRepository

__all__ = [
    "TimeEntryRepository",
    "ActiveTimerRepository",
    "ShortcutRepository",
    "DirectoryRepository",
]
