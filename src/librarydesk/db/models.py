"""SQLAlchemy declarative base and shared column helpers.

Tables (declared by the feature packages):
- books: Catalog records
- members: Registered members
- lending_records: Issue/return history
"""

from datetime import datetime, timezone

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)
