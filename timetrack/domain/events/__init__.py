"""
Domain events and the in-process dispatcher.
"""

from .base import DomainEvent, EventHandler, EventDispatcher, get_event_dispatcher, publish_event
from .time_entry_events import (
    TimerStarted,
    TimerStopped,
    TimerDiscarded,
    TimeEntryCreated,
    TimeEntryDeleted,
    ShortcutOrphaned,
    TimeEntriesConsolidated,
    TaskLoggedHoursChanged,
)

__all__ = [
    "DomainEvent",
    "EventHandler",
    "EventDispatcher",
    "get_event_dispatcher",
    "publish_event",
    "TimerStarted",
    "TimerStopped",
    "TimerDiscarded",
    "TimeEntryCreated",
    "TimeEntryDeleted",
    "ShortcutOrphaned",
    "TimeEntriesConsolidated",
    "TaskLoggedHoursChanged",
]
