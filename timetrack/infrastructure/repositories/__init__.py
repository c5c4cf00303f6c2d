"""
SQLAlchemy repository implementations.
"""

from .time_entry_repository import SQLAlchemyTimeEntryRepository
from .active_timer_repository import SQLAlchemyActiveTimerRepository
from .shortcut_repository import SQLAlchemyShortcutRepository
from .directory_repository import SQLAlchemyDirectoryRepository

__all__ = [
    "SQLAlchemyTimeEntryRepository",
    "SQLAlchemyActiveTimerRepository",
    "SQLAlchemyShortcutRepository",
    "SQLAlchemyDirectoryRepository",
]
