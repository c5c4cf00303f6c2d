"""
Infrastructure layer for the time tracking service.

This layer contains the implementation details for external systems integration:
- Database (SQLAlchemy; PostgreSQL in production, SQLite for development and tests)
- Authentication (bearer JWT)
- Event handler registration
- HTTP routers and middleware (FastAPI)

The infrastructure layer implements interfaces defined in the domain layer.
"""
