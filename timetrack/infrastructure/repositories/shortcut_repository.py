"""
Timer shortcut repository implementation using SQLAlchemy.
"""

from typing import List, Optional, Sequence

from sqlalchemy import asc, desc, func
from sqlalchemy.orm import Session

from timetrack.domain.models.base import EntityNotFoundError
from timetrack.domain.models.shortcut import TimerShortcut
from timetrack.domain.repositories.shortcut_repository import ShortcutRepository as ShortcutRepositoryInterface
from timetrack.infrastructure.db.models import TimerShortcutModel
from timetrack.infrastructure.mappers.shortcut_mapper import ShortcutMapper


class SQLAlchemyShortcutRepository(ShortcutRepositoryInterface):
    """SQLAlchemy implementation of shortcut repository."""

    def __init__(self, session: Session):
        self.session = session
        self.mapper = ShortcutMapper()

    def list_for_user(self, user_id: str) -> List[TimerShortcut]:
        models = self.session.query(TimerShortcutModel).filter(
            TimerShortcutModel.user_id == user_id
        ).order_by(
            desc(TimerShortcutModel.is_pinned),
            asc(TimerShortcutModel.sort_order),
            desc(TimerShortcutModel.created_at),
            desc(TimerShortcutModel.id),
        ).all()
        return [self.mapper.model_to_domain(model) for model in models]

    def get_by_id(self, shortcut_id: int) -> Optional[TimerShortcut]:
        model = self.session.get(TimerShortcutModel, shortcut_id)
        if not model:
            return None
        return self.mapper.model_to_domain(model)

    def get_many(self, shortcut_ids: Sequence[int]) -> List[TimerShortcut]:
        if not shortcut_ids:
            return []
        models = self.session.query(TimerShortcutModel).filter(
            TimerShortcutModel.id.in_(list(shortcut_ids))
        ).with_for_update().all()
        return [self.mapper.model_to_domain(model) for model in models]

    def find_by_task(self, task_id: str) -> List[TimerShortcut]:
        models = self.session.query(TimerShortcutModel).filter(
            TimerShortcutModel.task_id == task_id
        ).order_by(TimerShortcutModel.id).all()
        return [self.mapper.model_to_domain(model) for model in models]

    def max_sort_order(self, user_id: str) -> Optional[int]:
        return self.session.query(func.max(TimerShortcutModel.sort_order)).filter(
            TimerShortcutModel.user_id == user_id
        ).scalar()

    def add(self, shortcut: TimerShortcut) -> TimerShortcut:
        model = self.mapper.domain_to_model(shortcut)
        self.session.add(model)
        self.session.flush()
        return self.mapper.model_to_domain(model)

    def save(self, shortcut: TimerShortcut) -> TimerShortcut:
        model = self.session.get(TimerShortcutModel, shortcut.id)
        if not model:
            raise EntityNotFoundError("Shortcut", shortcut.id)

        self.mapper.copy_to_model(shortcut, model)
        self.session.flush()
        return self.mapper.model_to_domain(model)

    def delete(self, shortcut_id: int) -> bool:
        model = self.session.get(TimerShortcutModel, shortcut_id)
        if not model:
            return False

        self.session.delete(model)
        self.session.flush()
        return True
