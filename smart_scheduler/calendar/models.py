"""
Tool: Calendar Models
Purpose: Data structures for calendar entries, windows, slots and meetings

Usage:
    from smart_scheduler.calendar.models import CalendarEntry, TimeWindow, Slot, Meeting

Every instant handled by these models is a timezone-aware datetime in UTC.
Strings crossing the public boundary are ISO-8601 with an explicit offset;
output always uses the "Z" suffix (e.g. 2024-09-01T11:00:00Z).
"""

import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any


UTC = timezone.utc


def ensure_utc(value: datetime) -> datetime:
    """Convert an aware datetime to UTC. Naive datetimes are rejected."""
    if value.tzinfo is None or value.tzinfo.utcoffset(value) is None:
        raise ValueError(f"Timestamp has no UTC offset: {value.isoformat()}")
    try:
        return value.astimezone(UTC)
    except OverflowError as e:
        raise ValueError(f"Timestamp is outside the representable UTC range: {value.isoformat()}") from e


def parse_instant(text: str) -> datetime:
    """
    Parse an ISO-8601 timestamp into an aware UTC datetime.

    Raises:
        ValueError: if the text is malformed or carries no offset
    """
    if not isinstance(text, str) or not text.strip():
        raise ValueError(f"Invalid timestamp: {text!r}")
    cleaned = text.strip()
    if cleaned.endswith(("Z", "z")):
        cleaned = cleaned[:-1] + "+00:00"
    parsed = datetime.fromisoformat(cleaned)
    return ensure_utc(parsed)


def format_instant(value: datetime) -> str:
    """Render an instant as UTC ISO-8601 with a Z suffix."""
    value = ensure_utc(value)
    timespec = "microseconds" if value.microsecond else "seconds"
    return value.replace(tzinfo=None).isoformat(timespec=timespec) + "Z"


def minutes_between(start: datetime, end: datetime) -> int:
    """Whole minutes from start to end, truncated toward zero."""
    return int((end - start).total_seconds() / 60)


@dataclass(frozen=True)
class TimeWindow:
    """Half-open interval [start, end)."""

    start: datetime
    end: datetime

    @property
    def duration_minutes(self) -> int:
        return minutes_between(self.start, self.end)

    def contains(self, other: "TimeWindow") -> bool:
        return self.start <= other.start and other.end <= self.end


@dataclass(frozen=True)
class Slot:
    """A fixed-duration candidate interval [start, end) considered during search."""

    start: datetime
    end: datetime

    @classmethod
    def starting_at(cls, start: datetime, duration_minutes: int) -> "Slot":
        return cls(start=start, end=start + timedelta(minutes=duration_minutes))

    @property
    def duration_minutes(self) -> int:
        return minutes_between(self.start, self.end)

    def overlaps(self, start: datetime, end: datetime) -> bool:
        """Open-interval overlap; touching boundaries do not overlap."""
        return start < self.end and end > self.start

    def to_dict(self) -> dict[str, Any]:
        return {
            "start_time": format_instant(self.start),
            "end_time": format_instant(self.end),
        }


@dataclass
class Participant:
    """A user who can own calendar entries."""

    id: str
    name: str = ""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class CalendarEntry:
    """
    One busy block on a participant's calendar.

    Entries are owned by the calendar store; the scheduling core only reads
    them and asks the store to create new ones.
    """

    id: str
    title: str
    start_time: datetime
    end_time: datetime
    owner_id: str

    @property
    def duration_minutes(self) -> int:
        """Get entry duration in minutes."""
        return minutes_between(self.start_time, self.end_time)

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        d = asdict(self)
        d["start_time"] = format_instant(self.start_time)
        d["end_time"] = format_instant(self.end_time)
        return d

    def to_summary(self) -> dict[str, Any]:
        """The public GetCalendar shape: title and times only."""
        return {
            "title": self.title,
            "start_time": format_instant(self.start_time),
            "end_time": format_instant(self.end_time),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CalendarEntry":
        """Create from dict."""
        data = data.copy()
        for time_field in ["start_time", "end_time"]:
            if isinstance(data.get(time_field), str):
                data[time_field] = parse_instant(data[time_field])
        return cls(**data)

    @staticmethod
    def generate_id() -> str:
        """Generate a new internal ID."""
        return uuid.uuid4().hex[:12]


@dataclass
class Meeting:
    """A booked slot shared by every participant."""

    meeting_id: str
    title: str
    participant_ids: list[str]
    start_time: datetime
    end_time: datetime
    entries: list[CalendarEntry] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "meeting_id": self.meeting_id,
            "title": self.title,
            "participant_ids": list(self.participant_ids),
            "start_time": format_instant(self.start_time),
            "end_time": format_instant(self.end_time),
        }

    @staticmethod
    def generate_id() -> str:
        return f"meeting-{uuid.uuid4()}"
