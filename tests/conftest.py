"""
Shared fixtures: an in-memory database seeded with a small directory of
users, projects and tasks, plus a controllable clock.
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from timetrack.domain.events.base import EventHandler, get_event_dispatcher
from timetrack.infrastructure.db.database import Base, create_db_engine, create_session_factory
from timetrack.infrastructure.db.models import (
    ProjectModel,
    TaskModel,
    TimeOffRequestModel,
    TimeOffStatus,
    UserAvailabilityModel,
    UserModel,
    UserStatus,
)
from timetrack.infrastructure.db.unit_of_work import SQLAlchemyUnitOfWork


class FixedClock:
    """Clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


@pytest.fixture
def engine():
    engine = create_db_engine("sqlite://", echo=False)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def seeded(session_factory):
    """Users u1..u4, projects p1/p2 and tasks t1..t3."""
    session = session_factory()
    session.add_all([
        UserModel(id="u1", first_name="Ada", last_name="Lovelace", department="Engineering",
                  timezone="UTC", default_weekly_hours=40.0, status=UserStatus.ACTIVE),
        UserModel(id="u2", first_name="Grace", last_name="Hopper", department="Engineering",
                  timezone="America/New_York", default_weekly_hours=40.0, status=UserStatus.ACTIVE),
        UserModel(id="u3", first_name="Alan", last_name="Turing", department=None,
                  timezone=None, default_weekly_hours=20.0, status=UserStatus.ACTIVE),
        UserModel(id="u4", first_name="Former", last_name="Member", department="Design",
                  timezone="UTC", default_weekly_hours=40.0, status=UserStatus.INACTIVE),
        ProjectModel(id="p1", name="Website", code="WEB"),
        ProjectModel(id="p2", name="Mobile", code="MOB"),
    ])
    session.flush()
    session.add_all([
        TaskModel(id="t1", project_id="p1", title="Landing page"),
        TaskModel(id="t2", project_id="p1", title="Checkout"),
        TaskModel(id="t3", project_id="p2", title="Push notifications"),
    ])
    session.commit()
    session.close()
    return session_factory


@pytest.fixture
def add_time_off(session_factory):
    def _add(user_id, start, end, hours, status=TimeOffStatus.APPROVED):
        session = session_factory()
        session.add(TimeOffRequestModel(
            user_id=user_id, start_date=start, end_date=end, hours=hours, status=status
        ))
        session.commit()
        session.close()
    return _add


@pytest.fixture
def add_availability(session_factory):
    def _add(user_id, day, hours):
        session = session_factory()
        session.add(UserAvailabilityModel(user_id=user_id, date=day, available_hours=hours))
        session.commit()
        session.close()
    return _add


@pytest.fixture
def uow(seeded):
    return SQLAlchemyUnitOfWork(seeded, retry_attempts=1, retry_delay=0)


@pytest.fixture
def clock():
    # Monday
    return FixedClock(datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc))


@pytest.fixture
def monday():
    return date(2024, 1, 1)


class EventRecorder(EventHandler):

    def __init__(self):
        self.events = []

    async def handle(self, event):
        self.events.append(event)

    def can_handle(self, event):
        return True

    def of_type(self, event_type):
        return [e for e in self.events if e.event_type == event_type]


@pytest.fixture
def recorder():
    dispatcher = get_event_dispatcher()
    dispatcher.clear_handlers()
    handler = EventRecorder()
    dispatcher.register_global_handler(handler)
    yield handler
    dispatcher.clear_handlers()
