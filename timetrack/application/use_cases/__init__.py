"""
Application use cases.
"""

from .base_use_case import BaseUseCase, CommandUseCase, QueryUseCase, Repositories, UnitOfWork
from .timer_use_cases import (
    StartTimerUseCase,
    GetActiveTimerUseCase,
    UpdateRunningTimerUseCase,
    StopTimerUseCase,
    DiscardTimerUseCase,
)
from .time_entry_use_cases import (
    CreateManualTimeEntryUseCase,
    ListTimeEntriesUseCase,
    GetTimeEntryUseCase,
    UpdateTimeEntryUseCase,
    DeleteTimeEntryUseCase,
    AddSessionUseCase,
    EditSessionUseCase,
    DeleteSessionUseCase,
    GetDailyReportUseCase,
    GetWeeklyReportUseCase,
    GetMonthlyReportUseCase,
    ExportTimeCardsUseCase,
)
from .shortcut_use_cases import (
    ListShortcutsUseCase,
    CreateShortcutUseCase,
    UpdateShortcutUseCase,
    DeleteShortcutUseCase,
    ReorderShortcutsUseCase,
    TrackShortcutUseUseCase,
)
from .task_use_cases import HandleTaskDeletedUseCase, GetTaskLoggedHoursUseCase
from .consolidation_use_cases import ConsolidateTimeEntriesUseCase
from .capacity_use_cases import GetUtilizationUseCase

__all__ = [
    "BaseUseCase",
    "CommandUseCase",
    "QueryUseCase",
    "Repositories",
    "UnitOfWork",
    "StartTimerUseCase",
    "GetActiveTimerUseCase",
    "UpdateRunningTimerUseCase",
    "StopTimerUseCase",
    "DiscardTimerUseCase",
    "CreateManualTimeEntryUseCase",
    "ListTimeEntriesUseCase",
    "GetTimeEntryUseCase",
    "UpdateTimeEntryUseCase",
    "DeleteTimeEntryUseCase",
    "AddSessionUseCase",
    "EditSessionUseCase",
    "DeleteSessionUseCase",
    "GetDailyReportUseCase",
    "GetWeeklyReportUseCase",
    "GetMonthlyReportUseCase",
    "ExportTimeCardsUseCase",
    "ListShortcutsUseCase",
    "CreateShortcutUseCase",
    "UpdateShortcutUseCase",
    "DeleteShortcutUseCase",
    "ReorderShortcutsUseCase",
    "TrackShortcutUseUseCase",
    "HandleTaskDeletedUseCase",
    "GetTaskLoggedHoursUseCase",
    "ConsolidateTimeEntriesUseCase",
    "GetUtilizationUseCase",
]
