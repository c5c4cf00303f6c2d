"""
Capacity and utilization DTOs.
"""

from datetime import date
from typing import Dict, List, Optional

from pydantic import Field

from timetrack.domain.models.capacity import UtilizationReport, UtilizationRow
from .base_dto import RequestDTO, ResponseDTO, round_hours


class UtilizationRequestDTO(RequestDTO):
    start_date: date = Field(description="First day of the period")
    end_date: date = Field(description="Last day of the period (inclusive)")
    user_ids: Optional[List[str]] = Field(default=None, description="Restrict to these users")


class UtilizationRowDTO(ResponseDTO):
    key: str
    label: Optional[str] = None
    department: Optional[str] = None
    member_count: int = 1
    available_hours: float
    logged_hours: float
    utilization: float
    bucket: str

    @classmethod
    def from_domain(cls, row: UtilizationRow) -> "UtilizationRowDTO":
        return cls(
            key=row.key,
            label=row.label,
            department=row.department,
            member_count=row.member_count,
            available_hours=round_hours(row.available_hours),
            logged_hours=round_hours(row.logged_hours),
            utilization=round(row.utilization, 2),
            bucket=row.bucket.value,
        )


class UtilizationResponseDTO(ResponseDTO):
    start_date: date
    end_date: date
    working_days: int
    per_user: List[UtilizationRowDTO]
    per_department: List[UtilizationRowDTO]
    summary: UtilizationRowDTO
    bucket_counts: Dict[str, int]

    @classmethod
    def from_domain(cls, report: UtilizationReport) -> "UtilizationResponseDTO":
        return cls(
            start_date=report.period.start,
            end_date=report.period.end,
            working_days=report.working_days,
            per_user=[UtilizationRowDTO.from_domain(r) for r in report.per_user],
            per_department=[UtilizationRowDTO.from_domain(r) for r in report.per_department],
            summary=UtilizationRowDTO.from_domain(report.summary),
            bucket_counts={bucket.value: count for bucket, count in report.bucket_counts.items()},
        )
