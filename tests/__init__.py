"""Smart Scheduler Test Suite

Test organization:
- unit/calendar/: Calendar models, SQLite store, calendar reader
- unit/scheduling/: Availability, scoring, search, booking, requests, service
- unit/: Configuration, logging and CLI

Running tests:
    # All tests
    pytest

    # Specific area
    pytest tests/unit/scheduling/
"""
