"""Pytest configuration and shared fixtures.

This module provides fixtures for testing the librarydesk application,
including in-memory databases, a controllable clock and sample data.
"""

from datetime import datetime, timedelta, timezone
from typing import Generator

import pytest

from librarydesk.circulation import CirculationService
from librarydesk.config import Config, reset_config
from librarydesk.db.sqlite import Database, reset_db


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


# ============================================================================
# Global State
# ============================================================================


@pytest.fixture(autouse=True)
def reset_globals(monkeypatch) -> Generator[None, None, None]:
    """Reset global database and config between tests."""
    for key in (
        "LIBRARYDESK_MAX_BOOKS",
        "LIBRARYDESK_LOAN_PERIOD_DAYS",
        "LIBRARYDESK_FINE_PER_DAY",
        "LIBRARYDESK_FIRST_BOOK_ID",
        "LIBRARYDESK_FIRST_MEMBER_ID",
        "LIBRARYDESK_LOG_LEVEL",
    ):
        monkeypatch.delenv(key, raising=False)
    reset_db()
    reset_config()
    yield
    reset_db()
    reset_config()


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
def db() -> Database:
    """Create an in-memory database for testing."""
    database = Database()
    database.create_tables()
    return database


@pytest.fixture
def clock() -> FakeClock:
    """Clock frozen at the start of 2025."""
    return FakeClock(datetime(2025, 1, 1, 9, 0, tzinfo=timezone.utc))


@pytest.fixture
def config() -> Config:
    """Default circulation rules."""
    return Config(
        max_books=3,
        loan_period_days=14,
        fine_per_day=1.0,
        first_book_id=1001,
        first_member_id=1,
        log_level="WARNING",
    )


@pytest.fixture
def service(db: Database, config: Config, clock: FakeClock) -> CirculationService:
    """Create a CirculationService with test database and clock."""
    return CirculationService(db, config=config, clock=clock)


# ============================================================================
# Sample Data Fixtures
# ============================================================================


@pytest.fixture
def gatsby(service: CirculationService) -> int:
    """Add The Great Gatsby and return its id."""
    return service.add_book("The Great Gatsby", "F. Scott Fitzgerald", "9780743273565")


@pytest.fixture
def sample_books(service: CirculationService) -> list[int]:
    """Add several books and return their ids."""
    return [
        service.add_book("Dune", "Frank Herbert", "9780441172719"),
        service.add_book("Emma", "Jane Austen", "9780141439587"),
        service.add_book("Persuasion", "Jane Austen", "9780141439686"),
        service.add_book("Project Hail Mary", "Andy Weir", "0593135202"),
        service.add_book("The Martian", "Andy Weir", "9780553418026"),
    ]


@pytest.fixture
def alice(service: CirculationService) -> int:
    """Register Alice and return the member id."""
    return service.add_member("Alice Smith", "alice@example.com")


@pytest.fixture
def bob(service: CirculationService) -> int:
    """Register Bob and return the member id."""
    return service.add_member("Bob Jones", "555-1234")
