"""
Event system setup and configuration.
Registers all event handlers with the event dispatcher.
"""

import logging

from timetrack.domain.events.base import get_event_dispatcher
from .notification_handlers import (
    AuditLogHandler,
    ShortcutNotificationHandler,
    TaskHoursHandler,
    TimeTrackingNotificationHandler,
)

logger = logging.getLogger(__name__)


def setup_event_handlers():
    """Set up and register all event handlers."""

    dispatcher = get_event_dispatcher()
    dispatcher.clear_handlers()

    time_handler = TimeTrackingNotificationHandler()
    shortcut_handler = ShortcutNotificationHandler()

    dispatcher.register_global_handler(AuditLogHandler())

    dispatcher.register_handler("TimerStopped", time_handler)
    dispatcher.register_handler("TimerDiscarded", time_handler)
    dispatcher.register_handler("TimeEntriesConsolidated", time_handler)
    dispatcher.register_handler("ShortcutOrphaned", shortcut_handler)
    dispatcher.register_handler("TaskLoggedHoursChanged", TaskHoursHandler())

    registered = dispatcher.get_registered_handlers()
    for event_type, handlers in registered.items():
        logger.info(f"Event {event_type}: {', '.join(handlers)} handlers")


def initialize_event_system():
    """Initialize the complete event system."""
    try:
        setup_event_handlers()
        logger.info("Event system initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize event system: {str(e)}")
        raise
