"""
Mappers between domain entities and SQLAlchemy models.
"""

from .time_entry_mapper import TimeEntryMapper, ActiveTimerMapper
from .shortcut_mapper import ShortcutMapper

__all__ = ["TimeEntryMapper", "ActiveTimerMapper", "ShortcutMapper"]
