"""
Capacity accounting value objects.
Inputs describe who is available when; outputs describe how much of that
availability was spent on logged work.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Dict, List, Optional

from .base import ValidationError

UNASSIGNED_DEPARTMENT = "Unassigned"


class UtilizationBucket(str, Enum):
    """Five-band utilization classification."""
    CRITICAL = "critical"
    LOW = "low"
    MODERATE = "moderate"
    OPTIMAL = "optimal"
    OVER_ALLOCATED = "over-allocated"

    @classmethod
    def classify(cls, utilization: float) -> "UtilizationBucket":
        """
        Bands: critical [0,25), low [25,50), moderate [50,80),
        optimal [80,100], over-allocated (100, inf).
        """
        if utilization < 25:
            return cls.CRITICAL
        if utilization < 50:
            return cls.LOW
        if utilization < 80:
            return cls.MODERATE
        if utilization <= 100:
            return cls.OPTIMAL
        return cls.OVER_ALLOCATED


@dataclass(frozen=True)
class DateRange:
    """Inclusive calendar range."""

    start: date
    end: date

    def __post_init__(self):
        if self.end < self.start:
            raise ValidationError("End date must be on or after start date", "end_date")

    def days(self) -> List[date]:
        count = (self.end - self.start).days + 1
        return [date.fromordinal(self.start.toordinal() + i) for i in range(count)]

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


@dataclass(frozen=True)
class TimeOffPeriod:
    """Approved time-off; ``hours`` is the total over the whole span."""

    start_date: date
    end_date: date
    hours: float


@dataclass
class UserCapacityProfile:
    """What the directory knows about one user's availability."""

    user_id: str
    weekly_hours: float = 40.0
    name: Optional[str] = None
    department: Optional[str] = None
    time_off: List[TimeOffPeriod] = field(default_factory=list)
    overrides: Dict[date, float] = field(default_factory=dict)

    @property
    def daily_hours(self) -> float:
        return self.weekly_hours / 5

    @property
    def department_name(self) -> str:
        return self.department or UNASSIGNED_DEPARTMENT


@dataclass
class UtilizationRow:
    """Available versus logged hours for one user or one group."""

    key: str
    available_hours: float
    logged_hours: float
    label: Optional[str] = None
    department: Optional[str] = None
    member_count: int = 1

    @property
    def utilization(self) -> float:
        if self.available_hours <= 0:
            return 0.0
        return self.logged_hours / self.available_hours * 100

    @property
    def bucket(self) -> UtilizationBucket:
        return UtilizationBucket.classify(self.utilization)


@dataclass
class UtilizationReport:
    """Result of a utilization query."""

    period: DateRange
    working_days: int
    per_user: List[UtilizationRow]
    per_department: List[UtilizationRow]
    summary: UtilizationRow
    bucket_counts: Dict[UtilizationBucket, int]
