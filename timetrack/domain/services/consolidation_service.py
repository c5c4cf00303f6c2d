"""
Consolidation of daily time entries.

Repairs data written before the (user, task, date) uniqueness rule existed:
duplicates are grouped, one deterministic survivor is kept, every session
moves onto it and its totals are regenerated. The planner is pure so the
repair can be re-run at any time; consolidated data yields an empty plan.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, time, timedelta, timezone
from typing import Dict, Iterable, List, Tuple

from timetrack.domain.models.time_entry import TimeEntry, TimeEntrySession

logger = logging.getLogger(__name__)

NaturalKey = Tuple[str, str, object]

# Below this, hours are rounding noise rather than a lost manual total.
HOURS_EPSILON = 1e-6


@dataclass
class MergePlan:
    """One violating group: the entry to keep and the entries to fold into it."""

    key: NaturalKey
    survivor: TimeEntry
    absorbed: List[TimeEntry]


@dataclass
class MergeOutcome:
    survivor: TimeEntry
    removed_entry_ids: List[int] = field(default_factory=list)
    moved_sessions: List[TimeEntrySession] = field(default_factory=list)
    synthesized_sessions: List[TimeEntrySession] = field(default_factory=list)


class ConsolidationService:
    """Plans and applies merges of duplicate daily entries."""

    @staticmethod
    def survivor_order(entry: TimeEntry):
        """Earliest created wins; ids break ties."""
        return (entry.created_at, entry.id if entry.id is not None else 0)

    def group(self, entries: Iterable[TimeEntry]) -> Dict[NaturalKey, List[TimeEntry]]:
        groups: Dict[NaturalKey, List[TimeEntry]] = defaultdict(list)
        for entry in entries:
            groups[entry.natural_key].append(entry)
        return groups

    def plan(self, entries: Iterable[TimeEntry]) -> List[MergePlan]:
        """Merge plans for every group with more than one member."""
        plans = []
        for key, members in self.group(entries).items():
            if len(members) < 2:
                continue
            ordered = sorted(members, key=self.survivor_order)
            plans.append(MergePlan(key=key, survivor=ordered[0], absorbed=ordered[1:]))
        plans.sort(key=lambda p: (p.key[0], p.key[1], p.key[2]))
        return plans

    def apply(self, plan: MergePlan) -> MergeOutcome:
        """
        Fold the absorbed entries into the survivor in memory.
        The caller persists the survivor and deletes the absorbed entries.
        """
        survivor = plan.survivor
        outcome = MergeOutcome(survivor=survivor)

        for member in [survivor, *plan.absorbed]:
            outcome.synthesized_sessions.extend(self._preserve_manual_total(member))

        for member in plan.absorbed:
            for session in list(member.sessions):
                session.time_entry_id = survivor.id
                survivor.sessions.append(session)
                outcome.moved_sessions.append(session)
            member.sessions.clear()
            if member.is_timer_based:
                survivor.is_timer_based = True
            if member.id is not None:
                outcome.removed_entry_ids.append(member.id)

        survivor.sessions.sort(key=lambda s: s.start_time)
        survivor.recalculate_totals()
        survivor.increment_version()

        logger.info(
            f"Consolidated entry {survivor.id} for {plan.key}: "
            f"absorbed {len(outcome.removed_entry_ids)} entries, "
            f"moved {len(outcome.moved_sessions)} sessions, "
            f"total {survivor.total_hours:.2f}h"
        )
        return outcome

    def _preserve_manual_total(self, entry: TimeEntry) -> List[TimeEntrySession]:
        """
        A manual total may exceed its session sum. Once merged the totals
        become derived, so the shortfall is materialized as sessions.
        """
        if entry.has_derived_totals:
            return []

        session_total = sum(s.duration_hours for s in entry.sessions)
        session_billable = sum(s.duration_hours for s in entry.sessions if s.is_billable)
        billable_gap = max(0.0, entry.billable_hours - session_billable)
        non_billable_gap = max(0.0, (entry.total_hours - session_total) - billable_gap)

        cursor = max(
            [s.end_time for s in entry.sessions],
            default=datetime.combine(entry.entry_date, time.min, tzinfo=timezone.utc),
        )
        created = []
        for gap, billable in ((billable_gap, True), (non_billable_gap, False)):
            if gap <= HOURS_EPSILON:
                continue
            session = TimeEntrySession.create(
                start_time=cursor,
                end_time=cursor + timedelta(hours=gap),
                is_billable=billable,
                note="Consolidated manual total",
            )
            session.time_entry_id = entry.id
            entry.sessions.append(session)
            created.append(session)
            cursor = session.end_time
        return created
