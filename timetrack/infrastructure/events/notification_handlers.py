"""
Event handlers that turn domain events into log records and user notices.
"""

import logging

from timetrack.domain.events.base import DomainEvent, EventHandler
from timetrack.domain.events.time_entry_events import (
    ShortcutOrphaned,
    TaskLoggedHoursChanged,
    TimeEntriesConsolidated,
    TimerDiscarded,
    TimerStopped,
)


logger = logging.getLogger(__name__)


class AuditLogHandler(EventHandler):
    """Records every event for debugging."""

    def can_handle(self, event: DomainEvent) -> bool:
        return True

    async def handle(self, event: DomainEvent) -> None:
        logger.info(f"Audit: {event.event_type} (ID: {event.event_id})")


class TimeTrackingNotificationHandler(EventHandler):
    """Handler for timer and entry notifications."""

    def __init__(self, long_session_hours: float = 10.0):
        self.long_session_hours = long_session_hours

    def can_handle(self, event: DomainEvent) -> bool:
        return isinstance(event, (TimerStopped, TimerDiscarded, TimeEntriesConsolidated))

    async def handle(self, event: DomainEvent) -> None:
        if isinstance(event, TimerStopped):
            if event.duration_hours >= self.long_session_hours:
                logger.warning(
                    f"Long session recorded for user {event.user_id}: "
                    f"{event.duration_hours:.2f}h on entry {event.time_entry_id}"
                )
            else:
                logger.info(
                    f"Timer stopped for user {event.user_id}: "
                    f"{event.duration_hours:.2f}h on entry {event.time_entry_id}"
                )
        elif isinstance(event, TimerDiscarded):
            logger.info(f"Timer discarded for user {event.user_id} ({event.reason})")
        elif isinstance(event, TimeEntriesConsolidated):
            logger.info(
                f"Consolidated {event.groups_merged} duplicate group(s), "
                f"removed {event.entries_removed} entries"
            )


class ShortcutNotificationHandler(EventHandler):
    """Tells shortcut owners that a shortcut lost its task."""

    def can_handle(self, event: DomainEvent) -> bool:
        return isinstance(event, ShortcutOrphaned)

    async def handle(self, event: DomainEvent) -> None:
        logger.info(
            f"Notify user {event.user_id}: shortcut '{event.label}' "
            f"({event.shortcut_id}) points to deleted task {event.task_id}"
        )


class TaskHoursHandler(EventHandler):
    """Forwards a task's new logged total to the task service."""

    def can_handle(self, event: DomainEvent) -> bool:
        return isinstance(event, TaskLoggedHoursChanged)

    async def handle(self, event: DomainEvent) -> None:
        logger.info(f"Task {event.task_id} actual hours now {event.logged_hours:.2f}h")
