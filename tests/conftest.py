"""Shared test fixtures for Smart Scheduler tests.

This module provides common fixtures used across all test modules:
- Database isolation with temporary files
- A calendar store seeded with the standard "test1" busy block
- Quiet structlog configuration

Usage:
    def test_something(seeded_store):
        # seeded_store lives in a temp database removed after the test
        ...
"""

import os
import tempfile
from collections.abc import Generator
from datetime import datetime
from pathlib import Path

import pytest

from smart_scheduler.calendar.models import parse_instant
from smart_scheduler.calendar.store import SQLiteCalendarStore
from smart_scheduler.logging_config import setup_logging


# ─────────────────────────────────────────────────────────────────────────────
# Path Constants
# ─────────────────────────────────────────────────────────────────────────────

PROJECT_ROOT = Path(__file__).parent.parent
PACKAGE_DIR = PROJECT_ROOT / "smart_scheduler"


def at(hhmm: str, day: str = "2024-09-01") -> datetime:
    """UTC instant on the standard test day, e.g. at("10:30")."""
    return parse_instant(f"{day}T{hhmm}:00Z")


# ─────────────────────────────────────────────────────────────────────────────
# Logging
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture(autouse=True, scope="session")
def quiet_logging() -> None:
    setup_logging(level="WARNING")


# ─────────────────────────────────────────────────────────────────────────────
# Database Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def temp_db() -> Generator[Path, None, None]:
    """Create a temporary database file for testing.

    The database file is automatically deleted after the test completes.

    Yields:
        Path to the temporary database file
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    yield db_path

    # Cleanup
    if db_path.exists():
        os.unlink(db_path)


@pytest.fixture
def store(temp_db: Path) -> SQLiteCalendarStore:
    """Empty calendar store on the temporary database."""
    return SQLiteCalendarStore(temp_db)


# ─────────────────────────────────────────────────────────────────────────────
# Participant Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def seeded_store(store: SQLiteCalendarStore) -> SQLiteCalendarStore:
    """Store with participants test1, test2, test3 and free.

    test1 has one entry: "Existing Meeting" 2024-09-01 10:00-11:00 UTC.
    The others have empty calendars.
    """
    store.add_participant("test1", "Test User 1")
    store.add_participant("test2", "Test User 2")
    store.add_participant("test3", "Test User 3")
    store.add_participant("free", "Always Free")
    store.create_entry("Existing Meeting", at("10:00"), at("11:00"), "test1")
    return store


@pytest.fixture
def schedule_payload() -> dict:
    """Standard Schedule request for test1 over the working day."""
    return {
        "participant_ids": ["test1"],
        "duration_minutes": 60,
        "time_range": {
            "start": "2024-09-01T09:00:00Z",
            "end": "2024-09-01T17:00:00Z",
        },
    }
