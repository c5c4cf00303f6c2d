"""
Timer shortcut mapper.
"""

from timetrack.domain.models.base import ensure_utc
from timetrack.domain.models.shortcut import TimerShortcut
from timetrack.infrastructure.db.models import TimerShortcutModel


class ShortcutMapper:
    """Maps between TimerShortcut domain entity and TimerShortcutModel."""

    def domain_to_model(self, shortcut: TimerShortcut) -> TimerShortcutModel:
        model = TimerShortcutModel()
        self.copy_to_model(shortcut, model)
        return model

    def copy_to_model(self, shortcut: TimerShortcut, model: TimerShortcutModel) -> None:
        model.user_id = shortcut.user_id
        model.task_id = shortcut.task_id
        model.label = shortcut.label
        model.description = shortcut.description
        model.color = shortcut.color
        model.sort_order = shortcut.sort_order
        model.is_pinned = shortcut.is_pinned
        model.use_count = shortcut.use_count
        model.last_used_at = shortcut.last_used_at
        model.orphaned_at = shortcut.orphaned_at

    def model_to_domain(self, model: TimerShortcutModel) -> TimerShortcut:
        return TimerShortcut(
            id=model.id,
            user_id=model.user_id,
            task_id=model.task_id,
            label=model.label,
            description=model.description,
            color=model.color or "#3B82F6",
            sort_order=model.sort_order or 0,
            is_pinned=bool(model.is_pinned),
            use_count=model.use_count or 0,
            last_used_at=ensure_utc(model.last_used_at),
            orphaned_at=ensure_utc(model.orphaned_at),
            created_at=ensure_utc(model.created_at),
            updated_at=ensure_utc(model.updated_at),
        )
