"""
API routers.
"""

from . import capacity, shortcuts, tasks, time_entries, timer

__all__ = ["capacity", "shortcuts", "tasks", "time_entries", "timer"]
