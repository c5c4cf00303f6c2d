"""
Data transfer objects.
"""

from .base_dto import (
    BaseDTO,
    RequestDTO,
    ResponseDTO,
    ListRequestDTO,
    ListResponseDTO,
    HealthCheckResponseDTO,
    ErrorResponseDTO,
)
from .time_entry_dto import (
    StartTimerRequestDTO,
    UpdateTimerRequestDTO,
    CreateTimeEntryRequestDTO,
    UpdateTimeEntryRequestDTO,
    CreateSessionRequestDTO,
    UpdateSessionRequestDTO,
    ListTimeEntriesRequestDTO,
    ActiveTimerResponseDTO,
    TimeEntryResponseDTO,
    TimeEntrySessionResponseDTO,
    TimeEntryListResponseDTO,
    DeleteSessionResponseDTO,
    DailyReportResponseDTO,
    WeeklyReportResponseDTO,
    MonthlyReportResponseDTO,
)
from .shortcut_dto import (
    CreateShortcutRequestDTO,
    UpdateShortcutRequestDTO,
    ReorderShortcutsRequestDTO,
    ShortcutResponseDTO,
    DeleteShortcutResponseDTO,
)
from .capacity_dto import UtilizationRequestDTO, UtilizationRowDTO, UtilizationResponseDTO
from .maintenance_dto import ConsolidationResultDTO, TaskDeletedResponseDTO

__all__ = [
    "BaseDTO",
    "RequestDTO",
    "ResponseDTO",
    "ListRequestDTO",
    "ListResponseDTO",
    "HealthCheckResponseDTO",
    "ErrorResponseDTO",
    "StartTimerRequestDTO",
    "UpdateTimerRequestDTO",
    "CreateTimeEntryRequestDTO",
    "UpdateTimeEntryRequestDTO",
    "CreateSessionRequestDTO",
    "UpdateSessionRequestDTO",
    "ListTimeEntriesRequestDTO",
    "ActiveTimerResponseDTO",
    "TimeEntryResponseDTO",
    "TimeEntrySessionResponseDTO",
    "TimeEntryListResponseDTO",
    "DeleteSessionResponseDTO",
    "DailyReportResponseDTO",
    "WeeklyReportResponseDTO",
    "MonthlyReportResponseDTO",
    "CreateShortcutRequestDTO",
    "UpdateShortcutRequestDTO",
    "ReorderShortcutsRequestDTO",
    "ShortcutResponseDTO",
    "DeleteShortcutResponseDTO",
    "UtilizationRequestDTO",
    "UtilizationRowDTO",
    "UtilizationResponseDTO",
    "ConsolidationResultDTO",
    "TaskDeletedResponseDTO",
]
