"""
Time report rollups (daily, weekly, monthly) over daily time entries.
"""

from calendar import monthrange
from collections import OrderedDict
from datetime import date, timedelta
from typing import Any, Dict, List, Mapping, Optional

from timetrack.domain.models.time_entry import TimeEntry


def round_hours(value: float) -> float:
    return round(value, 2)


class TimeReportService:
    """Pure aggregation; callers load the entries and task-to-project map."""

    def _totals(self, entries: List[TimeEntry]) -> Dict[str, Any]:
        total = sum(e.total_hours for e in entries)
        billable = sum(e.billable_hours for e in entries)
        return {
            "total_hours": round_hours(total),
            "billable_hours": round_hours(billable),
            "non_billable_hours": round_hours(total - billable),
            "entry_count": len(entries),
        }

    def _by_project(
        self,
        entries: List[TimeEntry],
        projects: Mapping[str, Dict[str, Any]],
    ) -> List[Dict[str, Any]]:
        """Group hours by the project of each entry's task; untasked time is skipped."""
        grouped: Dict[str, Dict[str, Any]] = {}
        for entry in entries:
            project = projects.get(entry.task_id) if entry.task_id else None
            if not project:
                continue
            row = grouped.setdefault(project["project_id"], {
                "project_id": project["project_id"],
                "project_name": project.get("project_name"),
                "hours": 0.0,
                "entries": 0,
            })
            row["hours"] += entry.total_hours
            row["entries"] += 1
        for row in grouped.values():
            row["hours"] = round_hours(row["hours"])
        return sorted(grouped.values(), key=lambda r: r["hours"], reverse=True)

    def daily(
        self,
        day: date,
        entries: List[TimeEntry],
        projects: Optional[Mapping[str, Dict[str, Any]]] = None,
    ) -> Dict[str, Any]:
        todays = [e for e in entries if e.entry_date == day]
        return {
            "date": day,
            **self._totals(todays),
            "by_project": self._by_project(todays, projects or {}),
        }

    def weekly(
        self,
        week_start: date,
        entries: List[TimeEntry],
        projects: Optional[Mapping[str, Dict[str, Any]]] = None,
    ) -> Dict[str, Any]:
        week_end = week_start + timedelta(days=6)
        in_week = [e for e in entries if week_start <= e.entry_date <= week_end]

        by_day = []
        for offset in range(7):
            day = week_start + timedelta(days=offset)
            day_entries = [e for e in in_week if e.entry_date == day]
            by_day.append({
                "date": day,
                "hours": round_hours(sum(e.total_hours for e in day_entries)),
                "entries": len(day_entries),
            })

        return {
            "week_start": week_start,
            "week_end": week_end,
            **self._totals(in_week),
            "by_day": by_day,
            "by_project": self._by_project(in_week, projects or {}),
        }

    def monthly(
        self,
        year: int,
        month: int,
        entries: List[TimeEntry],
        projects: Optional[Mapping[str, Dict[str, Any]]] = None,
    ) -> Dict[str, Any]:
        month_start = date(year, month, 1)
        month_end = date(year, month, monthrange(year, month)[1])
        in_month = [e for e in entries if month_start <= e.entry_date <= month_end]

        weeks: Dict[int, Dict[str, Any]] = {}
        for entry in in_month:
            week_number = entry.entry_date.isocalendar()[1]
            row = weeks.setdefault(week_number, {"week_number": week_number, "hours": 0.0, "entries": 0})
            row["hours"] += entry.total_hours
            row["entries"] += 1
        for row in weeks.values():
            row["hours"] = round_hours(row["hours"])

        return {
            "year": year,
            "month": month,
            "month_start": month_start,
            "month_end": month_end,
            **self._totals(in_month),
            "by_week": [weeks[k] for k in sorted(weeks)],
            "by_project": self._by_project(in_month, projects or {}),
        }

    def timecards(
        self,
        entries: List[TimeEntry],
        users: Mapping[str, Dict[str, Any]],
        projects: Optional[Mapping[str, Dict[str, Any]]] = None,
    ) -> List[Dict[str, Any]]:
        """
        One card per user with time in the range: hours per day, and every
        session of each day with its task and project.
        """
        projects = projects or {}
        cards: Dict[str, Dict[str, Any]] = OrderedDict()

        for entry in sorted(entries, key=lambda e: (e.user_id, e.entry_date, e.id or 0)):
            card = cards.get(entry.user_id)
            if card is None:
                card = cards[entry.user_id] = {
                    "user": users.get(entry.user_id) or {"id": entry.user_id},
                    "summary": OrderedDict(),
                    "details": OrderedDict(),
                }

            day = card["summary"].setdefault(entry.entry_date, {
                "date": entry.entry_date,
                "total_hours": 0.0,
                "billable_hours": 0.0,
            })
            day["total_hours"] += entry.total_hours
            day["billable_hours"] += entry.billable_hours

            task = projects.get(entry.task_id, {}) if entry.task_id else {}
            sessions = card["details"].setdefault(entry.entry_date, [])
            for session in entry.sessions:
                sessions.append({
                    "task_id": entry.task_id,
                    "task_title": task.get("task_title"),
                    "project_id": task.get("project_id"),
                    "project_name": task.get("project_name"),
                    "project_code": task.get("project_code"),
                    "start_time": session.start_time,
                    "end_time": session.end_time,
                    "duration_hours": round_hours(session.duration_hours),
                    "is_billable": session.is_billable,
                    "note": session.note,
                })

        result = []
        for card in cards.values():
            for day in card["summary"].values():
                day["total_hours"] = round_hours(day["total_hours"])
                day["billable_hours"] = round_hours(day["billable_hours"])
            result.append({
                "user": card["user"],
                "summary": list(card["summary"].values()),
                "details": [
                    {"date": day, "sessions": sorted(sessions, key=lambda s: s["start_time"])}
                    for day, sessions in card["details"].items()
                ],
            })
        return result
