"""
Shared FastAPI dependencies for routers.
"""

from functools import lru_cache

from timetrack.application.use_cases.base_use_case import Clock, UnitOfWork
from timetrack.domain.models.base import utc_now
from timetrack.infrastructure.db.unit_of_work import SQLAlchemyUnitOfWork


@lru_cache()
def get_unit_of_work() -> UnitOfWork:
    """Process-wide unit of work bound to the configured database."""
    return SQLAlchemyUnitOfWork()


def get_clock() -> Clock:
    return utc_now
