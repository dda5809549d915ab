"""Tests for smart_scheduler/calendar/models.py"""

from datetime import datetime, timedelta, timezone

import pytest

from smart_scheduler.calendar.models import (
    CalendarEntry,
    Meeting,
    Slot,
    TimeWindow,
    ensure_utc,
    format_instant,
    minutes_between,
    parse_instant,
)


UTC = timezone.utc


class TestParseInstant:
    def test_parses_z_suffix(self):
        value = parse_instant("2024-09-01T10:00:00Z")
        assert value == datetime(2024, 9, 1, 10, 0, tzinfo=UTC)

    def test_converts_offsets_to_utc(self):
        value = parse_instant("2024-09-01T12:00:00+02:00")
        assert value == datetime(2024, 9, 1, 10, 0, tzinfo=UTC)
        assert value.utcoffset() == timedelta(0)

    def test_accepts_fractional_seconds(self):
        value = parse_instant("2024-09-01T10:00:00.250Z")
        assert value.microsecond == 250000

    def test_rejects_naive_timestamp(self):
        with pytest.raises(ValueError, match="offset"):
            parse_instant("2024-09-01T10:00:00")

    def test_rejects_instant_before_utc_range(self):
        # 00:00 at +01:00 on day one is still in year 0 in UTC
        with pytest.raises(ValueError, match="range"):
            parse_instant("0001-01-01T00:00:00+01:00")

    @pytest.mark.parametrize("text", ["", "   ", "yesterday", "2024-13-01T10:00:00Z"])
    def test_rejects_malformed(self, text):
        with pytest.raises(ValueError):
            parse_instant(text)


class TestFormatInstant:
    def test_uses_z_suffix_without_fraction(self):
        assert format_instant(datetime(2024, 9, 1, 11, 0, tzinfo=UTC)) == "2024-09-01T11:00:00Z"

    def test_keeps_fraction_when_present(self):
        value = datetime(2024, 9, 1, 11, 0, 0, 5000, tzinfo=UTC)
        assert format_instant(value) == "2024-09-01T11:00:00.005000Z"

    def test_normalizes_other_offsets(self):
        value = datetime(2024, 9, 1, 13, 0, tzinfo=timezone(timedelta(hours=2)))
        assert format_instant(value) == "2024-09-01T11:00:00Z"

    def test_rejects_naive(self):
        with pytest.raises(ValueError):
            ensure_utc(datetime(2024, 9, 1, 11, 0))


class TestMinutesBetween:
    def test_whole_minutes(self):
        start = datetime(2024, 9, 1, 9, 0, tzinfo=UTC)
        assert minutes_between(start, start + timedelta(minutes=90)) == 90

    def test_truncates_partial_minutes(self):
        start = datetime(2024, 9, 1, 9, 0, tzinfo=UTC)
        assert minutes_between(start, start + timedelta(minutes=14, seconds=59)) == 14


class TestSlot:
    def test_starting_at_sets_end(self):
        start = datetime(2024, 9, 1, 9, 0, tzinfo=UTC)
        slot = Slot.starting_at(start, 45)
        assert slot.end == start + timedelta(minutes=45)
        assert slot.duration_minutes == 45

    def test_back_to_back_does_not_overlap(self):
        slot = Slot.starting_at(datetime(2024, 9, 1, 11, 0, tzinfo=UTC), 60)
        before = (datetime(2024, 9, 1, 10, 0, tzinfo=UTC), datetime(2024, 9, 1, 11, 0, tzinfo=UTC))
        after = (datetime(2024, 9, 1, 12, 0, tzinfo=UTC), datetime(2024, 9, 1, 13, 0, tzinfo=UTC))
        assert not slot.overlaps(*before)
        assert not slot.overlaps(*after)

    def test_partial_overlap(self):
        slot = Slot.starting_at(datetime(2024, 9, 1, 11, 0, tzinfo=UTC), 60)
        assert slot.overlaps(datetime(2024, 9, 1, 11, 59, tzinfo=UTC), datetime(2024, 9, 1, 13, 0, tzinfo=UTC))

    def test_to_dict(self):
        slot = Slot.starting_at(datetime(2024, 9, 1, 11, 0, tzinfo=UTC), 60)
        assert slot.to_dict() == {
            "start_time": "2024-09-01T11:00:00Z",
            "end_time": "2024-09-01T12:00:00Z",
        }


class TestTimeWindow:
    def test_contains(self):
        window = TimeWindow(datetime(2024, 9, 1, 9, 0, tzinfo=UTC), datetime(2024, 9, 1, 17, 0, tzinfo=UTC))
        inner = TimeWindow(datetime(2024, 9, 1, 16, 0, tzinfo=UTC), datetime(2024, 9, 1, 17, 0, tzinfo=UTC))
        outer = TimeWindow(datetime(2024, 9, 1, 16, 30, tzinfo=UTC), datetime(2024, 9, 1, 17, 30, tzinfo=UTC))
        assert window.contains(inner)
        assert not window.contains(outer)
        assert window.duration_minutes == 480


class TestCalendarEntry:
    def test_summary_shape(self):
        entry = CalendarEntry(
            id="abc",
            title="Existing Meeting",
            start_time=datetime(2024, 9, 1, 10, 0, tzinfo=UTC),
            end_time=datetime(2024, 9, 1, 11, 0, tzinfo=UTC),
            owner_id="test1",
        )
        assert entry.to_summary() == {
            "title": "Existing Meeting",
            "start_time": "2024-09-01T10:00:00Z",
            "end_time": "2024-09-01T11:00:00Z",
        }
        assert entry.duration_minutes == 60

    def test_dict_round_trip(self):
        entry = CalendarEntry(
            id="abc",
            title="Standup",
            start_time=datetime(2024, 9, 1, 10, 0, tzinfo=UTC),
            end_time=datetime(2024, 9, 1, 10, 15, tzinfo=UTC),
            owner_id="test1",
        )
        assert CalendarEntry.from_dict(entry.to_dict()) == entry

    def test_generated_ids_are_unique(self):
        assert CalendarEntry.generate_id() != CalendarEntry.generate_id()


class TestMeeting:
    def test_meeting_id_prefix(self):
        assert Meeting.generate_id().startswith("meeting-")

    def test_to_dict(self):
        meeting = Meeting(
            meeting_id="meeting-1",
            title="New Meeting",
            participant_ids=["a", "b"],
            start_time=datetime(2024, 9, 1, 11, 0, tzinfo=UTC),
            end_time=datetime(2024, 9, 1, 12, 0, tzinfo=UTC),
        )
        assert meeting.to_dict() == {
            "meeting_id": "meeting-1",
            "title": "New Meeting",
            "participant_ids": ["a", "b"],
            "start_time": "2024-09-01T11:00:00Z",
            "end_time": "2024-09-01T12:00:00Z",
        }
