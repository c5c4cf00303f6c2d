"""
Capacity accounting.
Computes available hours from weekly baselines, overrides and approved
time-off, then rolls logged hours up into utilization per user, per
department and overall.
"""

from collections import OrderedDict
from datetime import date
from typing import Dict, Iterable, List, Mapping

from timetrack.domain.models.capacity import (
    DateRange,
    TimeOffPeriod,
    UserCapacityProfile,
    UtilizationBucket,
    UtilizationReport,
    UtilizationRow,
)


def is_weekend(day: date) -> bool:
    return day.weekday() >= 5


def weekday_count(start: date, end: date) -> int:
    return sum(1 for day in DateRange(start, end).days() if not is_weekend(day))


class CapacityService:
    """Read-side utilization engine. Holds no state between calls."""

    def working_days(self, period: DateRange) -> int:
        return sum(1 for day in period.days() if not is_weekend(day))

    def base_hours(self, profile: UserCapacityProfile, day: date) -> float:
        """Hours the user could work on a day before time-off."""
        if day in profile.overrides:
            return max(0.0, profile.overrides[day])
        return 0.0 if is_weekend(day) else profile.daily_hours

    def time_off_hours(self, periods: Iterable[TimeOffPeriod], day: date) -> float:
        """
        Time-off hours falling on a day. A request's total is spread evenly
        over the weekdays it spans.
        """
        hours = 0.0
        for period in periods:
            if not (period.start_date <= day <= period.end_date) or is_weekend(day):
                continue
            span_weekdays = weekday_count(period.start_date, period.end_date)
            if span_weekdays:
                hours += period.hours / span_weekdays
        return hours

    def available_hours(self, profile: UserCapacityProfile, period: DateRange) -> float:
        total = 0.0
        for day in period.days():
            base = self.base_hours(profile, day)
            off = min(self.time_off_hours(profile.time_off, day), base)
            total += base - off
        return total

    def build_report(
        self,
        period: DateRange,
        profiles: Iterable[UserCapacityProfile],
        logged_hours: Mapping[str, float],
    ) -> UtilizationReport:
        """
        Per-user rows first; department and overall rows sum the hours of
        their members and only then divide.
        """
        per_user: List[UtilizationRow] = []
        departments: Dict[str, UtilizationRow] = OrderedDict()

        for profile in profiles:
            row = UtilizationRow(
                key=profile.user_id,
                label=profile.name,
                department=profile.department_name,
                available_hours=self.available_hours(profile, period),
                logged_hours=float(logged_hours.get(profile.user_id, 0.0)),
            )
            per_user.append(row)

            dept = departments.get(row.department)
            if dept is None:
                departments[row.department] = UtilizationRow(
                    key=row.department,
                    label=row.department,
                    available_hours=row.available_hours,
                    logged_hours=row.logged_hours,
                )
            else:
                dept.available_hours += row.available_hours
                dept.logged_hours += row.logged_hours
                dept.member_count += 1

        summary = UtilizationRow(
            key="all",
            label="All users",
            available_hours=sum(r.available_hours for r in per_user),
            logged_hours=sum(r.logged_hours for r in per_user),
            member_count=len(per_user),
        )

        bucket_counts = {bucket: 0 for bucket in UtilizationBucket}
        for row in per_user:
            bucket_counts[row.bucket] += 1

        return UtilizationReport(
            period=period,
            working_days=self.working_days(period),
            per_user=sorted(per_user, key=lambda r: r.utilization, reverse=True),
            per_department=sorted(departments.values(), key=lambda r: r.key),
            summary=summary,
            bucket_counts=bucket_counts,
        )
