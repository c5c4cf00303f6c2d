"""
Active timer repository implementation using SQLAlchemy.
"""

import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from timetrack.domain.models.base import ConflictError, EntityNotFoundError
from timetrack.domain.models.time_entry import ActiveTimer
from timetrack.domain.repositories.active_timer_repository import ActiveTimerRepository as ActiveTimerRepositoryInterface
from timetrack.infrastructure.db.models import ActiveTimerModel
from timetrack.infrastructure.mappers.time_entry_mapper import ActiveTimerMapper

logger = logging.getLogger(__name__)


class SQLAlchemyActiveTimerRepository(ActiveTimerRepositoryInterface):
    """SQLAlchemy implementation of the running-timer register."""

    def __init__(self, session: Session):
        self.session = session
        self.mapper = ActiveTimerMapper()

    def _get_model(self, user_id: str, for_update: bool = False) -> Optional[ActiveTimerModel]:
        query = self.session.query(ActiveTimerModel).filter(ActiveTimerModel.user_id == user_id)
        if for_update:
            query = query.with_for_update()
        return query.first()

    def get(self, user_id: str, for_update: bool = False) -> Optional[ActiveTimer]:
        model = self._get_model(user_id, for_update)
        if not model:
            return None
        return self.mapper.model_to_domain(model)

    def add(self, timer: ActiveTimer) -> ActiveTimer:
        """Insert a timer; the unique user_id rejects a second one."""
        model = self.mapper.domain_to_model(timer)
        try:
            with self.session.begin_nested():
                self.session.add(model)
                self.session.flush()
        except IntegrityError as e:
            logger.info(f"Rejected second running timer for user {timer.user_id}")
            raise ConflictError("A timer is already running") from e

        return self.mapper.model_to_domain(model)

    def save(self, timer: ActiveTimer) -> ActiveTimer:
        model = self._get_model(timer.user_id)
        if not model:
            raise EntityNotFoundError("ActiveTimer", timer.user_id)

        model.task_id = timer.task_id
        model.note = timer.note
        self.session.flush()
        return self.mapper.model_to_domain(model)

    def delete(self, user_id: str) -> bool:
        deleted = self.session.query(ActiveTimerModel).filter(
            ActiveTimerModel.user_id == user_id
        ).delete(synchronize_session=False)
        return deleted > 0

    def delete_by_task(self, task_id: str) -> List[ActiveTimer]:
        models = self.session.query(ActiveTimerModel).filter(
            ActiveTimerModel.task_id == task_id
        ).with_for_update().all()

        timers = [self.mapper.model_to_domain(model) for model in models]
        for model in models:
            self.session.delete(model)
        self.session.flush()
        return timers
