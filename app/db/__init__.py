"""Database bootstrap utilities for the feedback submission service.

Exposes engine construction and the SQL migrations runner. ORM models are
not used; repositories issue SQL through SQLAlchemy Core so route handlers
never see persistence details.
"""

from app.db.base import get_engine
from app.db.migrations_runner import apply_migrations

__all__ = [
    "get_engine",
    "apply_migrations",
]
