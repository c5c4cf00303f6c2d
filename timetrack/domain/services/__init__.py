"""
Domain services: stateless rules shared by the use cases.
"""

from .timer_service import TimerService
from .consolidation_service import ConsolidationService, MergePlan, MergeOutcome
from .capacity_service import CapacityService, is_weekend
from .report_service import TimeReportService

__all__ = [
    "TimerService",
    "ConsolidationService",
    "MergePlan",
    "MergeOutcome",
    "CapacityService",
    "is_weekend",
    "TimeReportService",
]
