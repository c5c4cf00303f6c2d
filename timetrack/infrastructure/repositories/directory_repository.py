"""
Read-only directory of users, tasks and time-off, backed by SQLAlchemy.
"""

from collections import defaultdict
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import and_
from sqlalchemy.orm import Session

from timetrack.domain.models.capacity import DateRange, TimeOffPeriod, UserCapacityProfile
from timetrack.domain.repositories.directory_repository import DirectoryRepository as DirectoryRepositoryInterface
from timetrack.infrastructure.db.models import (
    ProjectModel,
    TaskModel,
    TimeOffRequestModel,
    TimeOffStatus,
    UserAvailabilityModel,
    UserModel,
    UserStatus,
)


class SQLAlchemyDirectoryRepository(DirectoryRepositoryInterface):
    """Reads collaborator tables; never writes them."""

    def __init__(self, session: Session):
        self.session = session

    def user_exists(self, user_id: str) -> bool:
        return self.session.query(UserModel.id).filter(UserModel.id == user_id).first() is not None

    def get_user_timezone(self, user_id: str) -> Optional[str]:
        return self.session.query(UserModel.timezone).filter(UserModel.id == user_id).scalar()

    def task_exists(self, task_id: str) -> bool:
        return self.session.query(TaskModel.id).filter(TaskModel.id == task_id).first() is not None

    def task_ids_for_project(self, project_id: str) -> List[str]:
        rows = self.session.query(TaskModel.id).filter(TaskModel.project_id == project_id).all()
        return [row[0] for row in rows]

    def projects_for_tasks(self, task_ids: Sequence[str]) -> Dict[str, Dict[str, Any]]:
        if not task_ids:
            return {}

        rows = self.session.query(
            TaskModel.id, TaskModel.title, ProjectModel.id, ProjectModel.name, ProjectModel.code
        ).outerjoin(
            ProjectModel, TaskModel.project_id == ProjectModel.id
        ).filter(TaskModel.id.in_(list(task_ids))).all()

        return {
            task_id: {
                "project_id": project_id,
                "project_name": project_name,
                "project_code": project_code,
                "task_title": task_title,
            }
            for task_id, task_title, project_id, project_name, project_code in rows
        }

    def users_by_id(self, user_ids: Sequence[str]) -> Dict[str, Dict[str, Any]]:
        if not user_ids:
            return {}

        users = self.session.query(UserModel).filter(UserModel.id.in_(list(user_ids))).all()
        return {
            user.id: {
                "id": user.id,
                "email": user.email,
                "first_name": user.first_name,
                "last_name": user.last_name,
                "timezone": user.timezone,
            }
            for user in users
        }

    def capacity_profiles(
        self,
        period: DateRange,
        user_ids: Optional[Sequence[str]] = None,
    ) -> List[UserCapacityProfile]:
        query = self.session.query(UserModel)
        if user_ids is not None:
            query = query.filter(UserModel.id.in_(list(user_ids)))
        else:
            query = query.filter(UserModel.status == UserStatus.ACTIVE)
        users = query.order_by(UserModel.id).all()
        if not users:
            return []

        ids = [user.id for user in users]

        time_off = defaultdict(list)
        requests = self.session.query(TimeOffRequestModel).filter(
            and_(
                TimeOffRequestModel.user_id.in_(ids),
                TimeOffRequestModel.status == TimeOffStatus.APPROVED,
                TimeOffRequestModel.start_date <= period.end,
                TimeOffRequestModel.end_date >= period.start,
            )
        ).all()
        for request in requests:
            time_off[request.user_id].append(
                TimeOffPeriod(request.start_date, request.end_date, request.hours)
            )

        overrides = defaultdict(dict)
        availability = self.session.query(UserAvailabilityModel).filter(
            and_(
                UserAvailabilityModel.user_id.in_(ids),
                UserAvailabilityModel.date >= period.start,
                UserAvailabilityModel.date <= period.end,
            )
        ).all()
        for row in availability:
            overrides[row.user_id][row.date] = row.available_hours

        return [
            UserCapacityProfile(
                user_id=user.id,
                weekly_hours=user.default_weekly_hours if user.default_weekly_hours is not None else 40.0,
                name=user.full_name,
                department=user.department,
                time_off=time_off[user.id],
                overrides=overrides[user.id],
            )
            for user in users
        ]
