"""
Domain event wiring.
"""

from .event_setup import initialize_event_system, setup_event_handlers

__all__ = ["initialize_event_system", "setup_event_handlers"]
