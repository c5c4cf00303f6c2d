"""
Domain models for the time tracking service.
This module exports all domain entities and value objects.
"""

# Base classes
from .base import (
    BaseEntity,
    AggregateRoot,
    DomainException,
    ValidationError,
    BusinessRuleViolation,
    ConflictError,
    NotFoundError,
    EntityNotFoundError,
    InvalidIntervalError,
    AuthorizationError,
    StorageUnavailableError,
    utc_now,
    ensure_utc,
)

# Time tracking
from .time_entry import (
    TimeEntry,
    TimeEntrySession,
    ActiveTimer,
    UNSET,
    hours_between,
    task_key_for,
)

from .shortcut import TimerShortcut

# Capacity
from .capacity import (
    UtilizationBucket,
    DateRange,
    TimeOffPeriod,
    UserCapacityProfile,
    UtilizationRow,
    UtilizationReport,
    UNASSIGNED_DEPARTMENT,
)

__all__ = [
    "BaseEntity",
    "AggregateRoot",
    "DomainException",
    "ValidationError",
    "BusinessRuleViolation",
    "ConflictError",
    "NotFoundError",
    "EntityNotFoundError",
    "InvalidIntervalError",
    "AuthorizationError",
    "StorageUnavailableError",
    "utc_now",
    "ensure_utc",
    "TimeEntry",
    "TimeEntrySession",
    "ActiveTimer",
    "UNSET",
    "hours_between",
    "task_key_for",
    "TimerShortcut",
    "UtilizationBucket",
    "DateRange",
    "TimeOffPeriod",
    "UserCapacityProfile",
    "UtilizationRow",
    "UtilizationReport",
    "UNASSIGNED_DEPARTMENT",
]
