"""
Tool: Calendar Reader
Purpose: Return a participant's calendar entries inside a window

Read-only. Entries are included only when fully contained in the window
(start >= window.start and end <= window.end), in store order.

Usage:
    from smart_scheduler.calendar.reader import CalendarReader

    reader = CalendarReader(store)
    entries = reader.get_events("alice", TimeWindow(start, end))
"""

from smart_scheduler.calendar.models import CalendarEntry, TimeWindow
from smart_scheduler.calendar.store import CalendarStore


class CalendarReader:
    def __init__(self, store: CalendarStore):
        self.store = store

    def get_events(self, participant_id: str, window: TimeWindow) -> list[CalendarEntry]:
        return self.store.find_entries(participant_id, window.start, window.end)
