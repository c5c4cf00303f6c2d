"""
SQLAlchemy models for the database.
Maps domain entities to database tables.
"""

from enum import Enum

from sqlalchemy import (
    Column, Integer, String, DateTime, Text, Boolean, Float,
    Date, ForeignKey, Enum as SQLEnum, Index, UniqueConstraint, CheckConstraint
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


class UserStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class TimeOffStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


class TimeOffType(str, Enum):
    VACATION = "vacation"
    SICK = "sick"
    PERSONAL = "personal"
    HOLIDAY = "holiday"
    OTHER = "other"


# --- Collaborator data (owned elsewhere, read here) ---

class UserModel(Base):
    """User directory table"""
    __tablename__ = 'users'

    id = Column(String(64), primary_key=True)
    email = Column(String(255))
    first_name = Column(String(100))
    last_name = Column(String(100))
    department = Column(String(100))
    timezone = Column(String(64))
    default_weekly_hours = Column(Float, nullable=False, default=40.0)
    status = Column(SQLEnum(UserStatus), nullable=False, default=UserStatus.ACTIVE)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part) or self.id


class ProjectModel(Base):
    """Project table"""
    __tablename__ = 'projects'

    id = Column(String(64), primary_key=True)
    name = Column(String(255), nullable=False)
    code = Column(String(50))

    tasks = relationship("TaskModel", back_populates="project")


class TaskModel(Base):
    """Task table"""
    __tablename__ = 'tasks'

    id = Column(String(64), primary_key=True)
    project_id = Column(String(64), ForeignKey('projects.id'))
    title = Column(String(255), nullable=False)

    project = relationship("ProjectModel", back_populates="tasks")


class TimeOffRequestModel(Base):
    """Time-off request table"""
    __tablename__ = 'time_off_requests'

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(64), ForeignKey('users.id'), nullable=False)
    type = Column(SQLEnum(TimeOffType), nullable=False, default=TimeOffType.VACATION)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    hours = Column(Float, nullable=False)
    status = Column(SQLEnum(TimeOffStatus), nullable=False, default=TimeOffStatus.PENDING)
    reason = Column(Text)

    __table_args__ = (
        Index('ix_time_off_requests_user_dates', 'user_id', 'start_date', 'end_date'),
        CheckConstraint('end_date >= start_date', name='ck_time_off_date_order'),
    )


class UserAvailabilityModel(Base):
    """Per-day availability override table"""
    __tablename__ = 'user_availability'

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(64), ForeignKey('users.id'), nullable=False)
    date = Column(Date, nullable=False)
    available_hours = Column(Float, nullable=False)
    notes = Column(Text)

    __table_args__ = (
        UniqueConstraint('user_id', 'date', name='uq_user_availability_user_date'),
    )


# --- Time tracking ---

class TimeEntryModel(Base):
    """Daily time entry table; one row per (user, task, date)."""
    __tablename__ = 'time_entries'

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(64), nullable=False, index=True)
    task_id = Column(String(64))
    # task_id or '' so that "no task" takes part in the unique key
    task_key = Column(String(64), nullable=False, default='')
    entry_date = Column(Date, nullable=False)

    total_hours = Column(Float, nullable=False, default=0.0)
    billable_hours = Column(Float, nullable=False, default=0.0)
    is_timer_based = Column(Boolean, nullable=False, default=False)
    version = Column(Integer, nullable=False, default=1)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    sessions = relationship(
        "TimeEntrySessionModel",
        back_populates="time_entry",
        cascade="all, delete-orphan",
        order_by="TimeEntrySessionModel.start_time",
        passive_deletes=True,
    )


UNIQUE_ENTRY_INDEX = Index(
    'ux_time_entries_user_task_date',
    TimeEntryModel.user_id,
    TimeEntryModel.task_key,
    TimeEntryModel.entry_date,
    unique=True,
)


class TimeEntrySessionModel(Base):
    """Worked interval table"""
    __tablename__ = 'time_entry_sessions'

    id = Column(Integer, primary_key=True, autoincrement=True)
    time_entry_id = Column(
        Integer,
        ForeignKey('time_entries.id', ondelete='CASCADE'),
        nullable=False,
        index=True,
    )
    start_time = Column(DateTime(timezone=True), nullable=False, index=True)
    end_time = Column(DateTime(timezone=True), nullable=False)
    duration_hours = Column(Float, nullable=False)
    is_billable = Column(Boolean, nullable=False, default=True)
    note = Column(Text)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    time_entry = relationship("TimeEntryModel", back_populates="sessions")

    __table_args__ = (
        CheckConstraint('duration_hours > 0', name='ck_session_positive_duration'),
    )


class ActiveTimerModel(Base):
    """Running timer table; the unique user_id is the concurrency guard."""
    __tablename__ = 'active_timers'

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(64), nullable=False, unique=True)
    task_id = Column(String(64), index=True)
    start_time = Column(DateTime(timezone=True), nullable=False)
    note = Column(Text)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class TimerShortcutModel(Base):
    """Timer shortcut table"""
    __tablename__ = 'timer_shortcuts'

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(64), nullable=False, index=True)
    task_id = Column(String(64), index=True)
    label = Column(String(100), nullable=False)
    description = Column(Text)
    color = Column(String(20), nullable=False, default='#3B82F6')
    sort_order = Column(Integer, nullable=False, default=0)
    is_pinned = Column(Boolean, nullable=False, default=False)
    use_count = Column(Integer, nullable=False, default=0)
    last_used_at = Column(DateTime(timezone=True))
    orphaned_at = Column(DateTime(timezone=True))

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


def create_all_tables(bind) -> None:
    """Create every table (and the natural-key index) that does not exist yet."""
    Base.metadata.create_all(bind=bind)
