"""
Database infrastructure for the time tracking service.
"""

from .database import engine, SessionLocal, Base, create_db_engine, create_session_factory
from .unit_of_work import SQLAlchemyUnitOfWork, Repositories

__all__ = [
    "engine",
    "SessionLocal",
    "Base",
    "create_db_engine",
    "create_session_factory",
    "SQLAlchemyUnitOfWork",
    "Repositories",
]
