"""
Time entry repository implementation using SQLAlchemy.
"""

import logging
from datetime import date
from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy import and_, case, desc, func, inspect
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from timetrack.domain.models.base import ConflictError, EntityNotFoundError
from timetrack.domain.models.time_entry import TimeEntry, task_key_for
from timetrack.domain.repositories.time_entry_repository import TimeEntryRepository as TimeEntryRepositoryInterface
from timetrack.infrastructure.db.models import (
    UNIQUE_ENTRY_INDEX,
    TimeEntryModel,
    TimeEntrySessionModel,
)
from timetrack.infrastructure.mappers.time_entry_mapper import TimeEntryMapper

logger = logging.getLogger(__name__)


class SQLAlchemyTimeEntryRepository(TimeEntryRepositoryInterface):
    """SQLAlchemy implementation of time entry repository."""

    def __init__(self, session: Session):
        self.session = session
        self.mapper = TimeEntryMapper()
        self.model = TimeEntryModel

    def _query(self, for_update: bool = False):
        # selectinload keeps FOR UPDATE off the outer join on PostgreSQL
        query = self.session.query(TimeEntryModel).options(
            selectinload(TimeEntryModel.sessions)
        )
        if for_update:
            query = query.with_for_update(of=TimeEntryModel)
        return query

    def _get_model(self, entry_id: int, for_update: bool = False) -> Optional[TimeEntryModel]:
        return self._query(for_update).filter(TimeEntryModel.id == entry_id).first()

    def get_by_id(self, entry_id: int, for_update: bool = False) -> Optional[TimeEntry]:
        """Get time entry by ID."""
        model = self._get_model(entry_id, for_update)
        if not model:
            return None
        return self.mapper.model_to_domain(model)

    def get_by_session_id(self, session_id: int, for_update: bool = False) -> Optional[TimeEntry]:
        entry_id = self.session.query(TimeEntrySessionModel.time_entry_id).filter(
            TimeEntrySessionModel.id == session_id
        ).scalar()
        if entry_id is None:
            return None
        return self.get_by_id(entry_id, for_update)

    def find_by_key(
        self,
        user_id: str,
        task_id: Optional[str],
        entry_date: date,
        for_update: bool = False,
    ) -> Optional[TimeEntry]:
        """Find the entry for a (user, task, date) key."""
        model = self._query(for_update).filter(
            and_(
                TimeEntryModel.user_id == user_id,
                TimeEntryModel.task_key == task_key_for(task_id),
                TimeEntryModel.entry_date == entry_date,
            )
        ).order_by(TimeEntryModel.created_at, TimeEntryModel.id).first()

        if not model:
            return None
        return self.mapper.model_to_domain(model)

    def add(self, entry: TimeEntry) -> TimeEntry:
        """Insert a new entry with its sessions inside a savepoint."""
        model = self.mapper.domain_to_model(entry)
        try:
            with self.session.begin_nested():
                self.session.add(model)
                self.session.flush()
        except IntegrityError as e:
            logger.info(
                f"Entry key already taken: user={entry.user_id} "
                f"task={entry.task_key!r} date={entry.entry_date}"
            )
            raise ConflictError(
                "A time entry already exists for this task and date"
            ) from e

        return self.mapper.model_to_domain(model)

    def find_or_create(self, user_id: str, task_id: Optional[str], entry_date: date) -> TimeEntry:
        """Return the locked entry for a key, creating it if needed."""
        existing = self.find_by_key(user_id, task_id, entry_date, for_update=True)
        if existing:
            return existing

        try:
            created = self.add(TimeEntry.for_timer(user_id, task_id, entry_date))
        except ConflictError:
            # Lost the insert race; the winner's row is committed now
            winner = self.find_by_key(user_id, task_id, entry_date, for_update=True)
            if winner is None:
                raise
            logger.info(f"Reusing concurrently created entry {winner.id} for user {user_id}")
            return winner

        return self.get_by_id(created.id, for_update=True)

    def save(self, entry: TimeEntry) -> TimeEntry:
        """Persist the entry and its session set, then regenerate totals."""
        model = self._get_model(entry.id)
        if not model:
            raise EntityNotFoundError("TimeEntry", entry.id)

        self.mapper.copy_entry_to_model(entry, model)
        self._sync_sessions(entry, model)
        try:
            self.session.flush()
        except IntegrityError as e:
            raise ConflictError(
                "A time entry already exists for this task and date"
            ) from e

        if entry.has_derived_totals:
            total, billable = self.session.query(
                func.coalesce(func.sum(TimeEntrySessionModel.duration_hours), 0.0),
                func.coalesce(
                    func.sum(
                        case(
                            (TimeEntrySessionModel.is_billable.is_(True), TimeEntrySessionModel.duration_hours),
                            else_=0.0,
                        )
                    ),
                    0.0,
                ),
            ).filter(TimeEntrySessionModel.time_entry_id == model.id).one()
            model.total_hours = float(total)
            model.billable_hours = float(billable)
            self.session.flush()

        return self.mapper.model_to_domain(model)

    def _sync_sessions(self, entry: TimeEntry, model: TimeEntryModel) -> None:
        current = {s.id: s for s in model.sessions}
        wanted_ids = set()

        for session in entry.sessions:
            if session.id is None:
                model.sessions.append(self.mapper.session_to_model(session))
                continue

            wanted_ids.add(session.id)
            session_model = current.get(session.id)
            if session_model is None:
                # Session moved in from another entry
                session_model = self.session.get(TimeEntrySessionModel, session.id)
                if session_model is None:
                    raise EntityNotFoundError("Session", session.id)
                model.sessions.append(session_model)
            self.mapper.copy_session_to_model(session, session_model)

        for session_id, session_model in current.items():
            if session_id not in wanted_ids:
                model.sessions.remove(session_model)

    def delete(self, entry_id: int) -> bool:
        """Delete time entry by ID."""
        model = self._get_model(entry_id)
        if not model:
            return False

        self.session.delete(model)
        self.session.flush()
        return True

    def list_for_user(
        self,
        user_id: str,
        offset: int = 0,
        limit: int = 50,
        task_ids: Optional[Sequence[str]] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Tuple[List[TimeEntry], int]:
        """Get a page of a user's entries, newest day first."""
        query = self.session.query(TimeEntryModel).filter(TimeEntryModel.user_id == user_id)

        if task_ids is not None:
            query = query.filter(TimeEntryModel.task_key.in_([task_key_for(t) for t in task_ids]))
        if start_date:
            query = query.filter(TimeEntryModel.entry_date >= start_date)
        if end_date:
            query = query.filter(TimeEntryModel.entry_date <= end_date)

        total = query.count()
        models = query.options(selectinload(TimeEntryModel.sessions)).order_by(
            desc(TimeEntryModel.entry_date), desc(TimeEntryModel.id)
        ).offset(offset).limit(limit).all()

        return [self.mapper.model_to_domain(model) for model in models], total

    def list_in_range(self, user_id: str, start_date: date, end_date: date) -> List[TimeEntry]:
        models = self._query().filter(
            and_(
                TimeEntryModel.user_id == user_id,
                TimeEntryModel.entry_date >= start_date,
                TimeEntryModel.entry_date <= end_date,
            )
        ).order_by(TimeEntryModel.entry_date, TimeEntryModel.id).all()

        return [self.mapper.model_to_domain(model) for model in models]

    def list_between(self, start_date: date, end_date: date) -> List[TimeEntry]:
        models = self._query().filter(
            and_(
                TimeEntryModel.entry_date >= start_date,
                TimeEntryModel.entry_date <= end_date,
            )
        ).order_by(TimeEntryModel.user_id, TimeEntryModel.entry_date, TimeEntryModel.id).all()

        return [self.mapper.model_to_domain(model) for model in models]

    def sum_hours_by_user(
        self,
        user_ids: Sequence[str],
        start_date: date,
        end_date: date,
    ) -> Dict[str, float]:
        """Logged hours per user over a date range."""
        if not user_ids:
            return {}

        rows = self.session.query(
            TimeEntryModel.user_id,
            func.sum(TimeEntryModel.total_hours),
        ).filter(
            and_(
                TimeEntryModel.user_id.in_(list(user_ids)),
                TimeEntryModel.entry_date >= start_date,
                TimeEntryModel.entry_date <= end_date,
            )
        ).group_by(TimeEntryModel.user_id).all()

        return {user_id: float(hours or 0.0) for user_id, hours in rows}

    def sum_hours_by_task(self, task_ids: Sequence[str]) -> Dict[str, float]:
        """Logged hours per task; tasks without entries are absent."""
        if not task_ids:
            return {}

        rows = self.session.query(
            TimeEntryModel.task_id,
            func.sum(TimeEntryModel.total_hours),
        ).filter(
            TimeEntryModel.task_id.in_(list(task_ids))
        ).group_by(TimeEntryModel.task_id).all()

        return {task_id: float(hours or 0.0) for task_id, hours in rows}

    def find_duplicate_entries(self) -> List[TimeEntry]:
        """Lock every entry whose natural key is shared with another entry."""
        duplicates = self.session.query(
            TimeEntryModel.user_id.label("user_id"),
            TimeEntryModel.task_key.label("task_key"),
            TimeEntryModel.entry_date.label("entry_date"),
        ).group_by(
            TimeEntryModel.user_id,
            TimeEntryModel.task_key,
            TimeEntryModel.entry_date,
        ).having(func.count(TimeEntryModel.id) > 1).subquery()

        models = self._query(for_update=True).join(
            duplicates,
            and_(
                TimeEntryModel.user_id == duplicates.c.user_id,
                TimeEntryModel.task_key == duplicates.c.task_key,
                TimeEntryModel.entry_date == duplicates.c.entry_date,
            ),
        ).order_by(
            TimeEntryModel.user_id,
            TimeEntryModel.task_key,
            TimeEntryModel.entry_date,
            TimeEntryModel.created_at,
            TimeEntryModel.id,
        ).all()

        return [self.mapper.model_to_domain(model) for model in models]

    def delete_many(self, entry_ids: Sequence[int]) -> int:
        if not entry_ids:
            return 0

        self.session.flush()
        deleted = self.session.query(TimeEntryModel).filter(
            TimeEntryModel.id.in_(list(entry_ids))
        ).delete(synchronize_session=False)
        self.session.expire_all()
        return deleted

    def install_unique_key(self) -> bool:
        """Create the natural-key unique index unless it is already there."""
        connection = self.session.connection()
        existing = {index["name"] for index in inspect(connection).get_indexes(TimeEntryModel.__tablename__)}
        if UNIQUE_ENTRY_INDEX.name in existing:
            return False

        UNIQUE_ENTRY_INDEX.create(bind=connection)
        logger.info(f"Installed unique index {UNIQUE_ENTRY_INDEX.name}")
        return True
