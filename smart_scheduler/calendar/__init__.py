"""Calendar - Entries, participants and read access

Components:
    models.py: CalendarEntry, Participant, TimeWindow, Slot, Meeting
    store.py: CalendarStore interface and SQLite implementation
    reader.py: Read a participant's entries inside a window
"""
