"""
Tool: Calendar Store
Purpose: Persist calendar entries and participants, answer availability queries

Defines the narrow interface the scheduling core depends on, plus a SQLite
implementation. The core never talks to SQLite directly; every component
receives a CalendarStore in its constructor.

Usage:
    from smart_scheduler.calendar.store import SQLiteCalendarStore

    store = SQLiteCalendarStore(Path("data/scheduler.db"))
    store.add_participant("alice", "Alice")
    store.create_entry("Standup", start, end, "alice")
    busy = store.find_overlapping("alice", start, end)

Dependencies:
    - sqlite3 (stdlib)
"""

import sqlite3
import threading
from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path

from smart_scheduler.calendar.models import CalendarEntry, Participant, ensure_utc
from smart_scheduler.errors import CalendarStoreError
from smart_scheduler.logging_config import get_logger

logger = get_logger(__name__)


class CalendarStore(ABC):
    """
    Abstract calendar store and participant directory.

    Overlap is open-interval: an entry [s, e) overlaps [start, end) iff
    s < end and e > start. Implementations raise CalendarStoreError when the
    backing storage fails.
    """

    # =========================================================================
    # Participant directory
    # =========================================================================

    @abstractmethod
    def participants_exist(self, participant_ids: Iterable[str]) -> set[str]:
        """Return the subset of ids that exist in the directory."""

    @abstractmethod
    def add_participant(self, participant_id: str, name: str = "") -> Participant:
        """Create or rename a participant."""

    # =========================================================================
    # Calendar queries
    # =========================================================================

    @abstractmethod
    def find_overlapping(self, participant_id: str, start: datetime, end: datetime) -> list[CalendarEntry]:
        """Entries owned by the participant that overlap [start, end)."""

    @abstractmethod
    def find_latest_end_at_or_before(self, participant_id: str, instant: datetime) -> datetime | None:
        """Latest entry end <= instant, or None."""

    @abstractmethod
    def find_earliest_start_at_or_after(self, participant_id: str, instant: datetime) -> datetime | None:
        """Earliest entry start >= instant, or None."""

    @abstractmethod
    def find_entries(self, participant_id: str, window_start: datetime, window_end: datetime) -> list[CalendarEntry]:
        """Entries fully contained in [window_start, window_end]."""

    # =========================================================================
    # Writes
    # =========================================================================

    @abstractmethod
    def create_entry(self, title: str, start: datetime, end: datetime, participant_id: str) -> CalendarEntry:
        """Persist a new entry for the participant."""

    @abstractmethod
    def delete_entry(self, entry_id: str) -> None:
        """Remove an entry. Missing ids are ignored."""


def _to_db(value: datetime) -> str:
    # Fixed-width UTC text so SQL string comparison is chronological
    return ensure_utc(value).isoformat(timespec="microseconds")


def _from_db(value: str | None) -> datetime | None:
    if value is None:
        return None
    return datetime.fromisoformat(value)


def _row_to_entry(row: sqlite3.Row) -> CalendarEntry:
    return CalendarEntry(
        id=row["id"],
        title=row["title"],
        start_time=_from_db(row["start_time"]),
        end_time=_from_db(row["end_time"]),
        owner_id=row["owner_id"],
    )


class SQLiteCalendarStore(CalendarStore):
    """
    SQLite-backed calendar store.

    One connection is opened per call, so the store can be shared between the
    scheduler's worker threads.

    Args:
        db_path: Database file, created with its parent directory if missing
        timeout: Seconds sqlite3 waits on a locked database before failing
    """

    def __init__(self, db_path: Path, timeout: float = 5.0):
        self.db_path = Path(db_path)
        self.timeout = timeout
        self._schema_ready = False
        self._schema_lock = threading.Lock()

    def get_connection(self) -> sqlite3.Connection:
        """Get database connection, creating tables if needed."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(self.db_path), timeout=self.timeout)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")

        with self._schema_lock:
            if not self._schema_ready:
                self._create_schema(conn)
                self._schema_ready = True

        return conn

    @staticmethod
    def _create_schema(conn: sqlite3.Connection) -> None:
        cursor = conn.cursor()

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS participants (
                id TEXT PRIMARY KEY,
                name TEXT DEFAULT '',
                created_at DATETIME DEFAULT CURRENT_TIMESTAMP
            )
        """)

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS calendar_entries (
                id TEXT PRIMARY KEY,
                title TEXT NOT NULL,
                start_time TEXT NOT NULL,
                end_time TEXT NOT NULL,
                owner_id TEXT NOT NULL,
                created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
                CHECK(start_time < end_time),
                FOREIGN KEY(owner_id) REFERENCES participants(id)
            )
        """)

        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_entries_owner_start "
            "ON calendar_entries(owner_id, start_time)"
        )
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_entries_owner_end "
            "ON calendar_entries(owner_id, end_time)"
        )

        conn.commit()

    @contextmanager
    def _connection(self, operation: str) -> Iterator[sqlite3.Connection]:
        """Open a connection, commit on success, wrap sqlite errors."""
        try:
            conn = self.get_connection()
        except sqlite3.Error as e:
            logger.error(f"Calendar store unavailable during {operation}: {e}")
            raise CalendarStoreError(f"Calendar store unavailable: {e}") from e

        try:
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            logger.error(f"Calendar store {operation} failed: {e}")
            raise CalendarStoreError(f"Calendar store {operation} failed: {e}") from e
        finally:
            conn.close()

    # =========================================================================
    # Participant directory
    # =========================================================================

    def participants_exist(self, participant_ids: Iterable[str]) -> set[str]:
        ids = list(dict.fromkeys(participant_ids))
        if not ids:
            return set()

        placeholders = ", ".join("?" for _ in ids)
        with self._connection("participants_exist") as conn:
            rows = conn.execute(
                f"SELECT id FROM participants WHERE id IN ({placeholders})",
                ids,
            ).fetchall()
        return {row["id"] for row in rows}

    def add_participant(self, participant_id: str, name: str = "") -> Participant:
        with self._connection("add_participant") as conn:
            conn.execute(
                """
                INSERT INTO participants (id, name) VALUES (?, ?)
                ON CONFLICT(id) DO UPDATE SET name = excluded.name
                """,
                (participant_id, name),
            )
        return Participant(id=participant_id, name=name)

    def list_participants(self) -> list[Participant]:
        with self._connection("list_participants") as conn:
            rows = conn.execute("SELECT id, name FROM participants ORDER BY id").fetchall()
        return [Participant(id=row["id"], name=row["name"] or "") for row in rows]

    # =========================================================================
    # Calendar queries
    # =========================================================================

    def find_overlapping(self, participant_id: str, start: datetime, end: datetime) -> list[CalendarEntry]:
        with self._connection("find_overlapping") as conn:
            rows = conn.execute(
                """
                SELECT * FROM calendar_entries
                WHERE owner_id = ? AND start_time < ? AND end_time > ?
                ORDER BY start_time
                """,
                (participant_id, _to_db(end), _to_db(start)),
            ).fetchall()
        return [_row_to_entry(row) for row in rows]

    def find_latest_end_at_or_before(self, participant_id: str, instant: datetime) -> datetime | None:
        with self._connection("find_latest_end_at_or_before") as conn:
            row = conn.execute(
                "SELECT MAX(end_time) AS value FROM calendar_entries WHERE owner_id = ? AND end_time <= ?",
                (participant_id, _to_db(instant)),
            ).fetchone()
        return _from_db(row["value"])

    def find_earliest_start_at_or_after(self, participant_id: str, instant: datetime) -> datetime | None:
        with self._connection("find_earliest_start_at_or_after") as conn:
            row = conn.execute(
                "SELECT MIN(start_time) AS value FROM calendar_entries WHERE owner_id = ? AND start_time >= ?",
                (participant_id, _to_db(instant)),
            ).fetchone()
        return _from_db(row["value"])

    def find_entries(self, participant_id: str, window_start: datetime, window_end: datetime) -> list[CalendarEntry]:
        with self._connection("find_entries") as conn:
            rows = conn.execute(
                """
                SELECT * FROM calendar_entries
                WHERE owner_id = ? AND start_time >= ? AND end_time <= ?
                ORDER BY start_time
                """,
                (participant_id, _to_db(window_start), _to_db(window_end)),
            ).fetchall()
        return [_row_to_entry(row) for row in rows]

    # =========================================================================
    # Writes
    # =========================================================================

    def create_entry(self, title: str, start: datetime, end: datetime, participant_id: str) -> CalendarEntry:
        entry = CalendarEntry(
            id=CalendarEntry.generate_id(),
            title=title,
            start_time=ensure_utc(start),
            end_time=ensure_utc(end),
            owner_id=participant_id,
        )

        with self._connection("create_entry") as conn:
            conn.execute(
                """
                INSERT INTO calendar_entries (id, title, start_time, end_time, owner_id)
                VALUES (?, ?, ?, ?, ?)
                """,
                (entry.id, entry.title, _to_db(entry.start_time), _to_db(entry.end_time), entry.owner_id),
            )

        logger.debug(f"Created entry {entry.id} for {participant_id}")
        return entry

    def delete_entry(self, entry_id: str) -> None:
        with self._connection("delete_entry") as conn:
            conn.execute("DELETE FROM calendar_entries WHERE id = ?", (entry_id,))
        logger.debug(f"Deleted entry {entry_id}")
