"""Scheduling Engine - Find the best common slot and book it for everyone

Philosophy:
    Earliest is usually best, but not at any price. A slot that leaves
    everyone with a ten-minute dead gap before their next meeting is worse
    than one that lines up back-to-back. The engine keeps earliness as the
    main driver and lets the other heuristics break near-ties.

Components:
    availability.py: Is a slot free for every participant?
    scorer.py: How desirable is a free slot?
    search.py: Walk the window, keep the best-scoring free slot
    booking.py: Write one entry per participant, all or nothing
    requests.py: Validated Schedule / GetCalendar inputs
    service.py: Public operations and the worker pool

Usage:
    from smart_scheduler.scheduling.service import MeetingScheduler

    scheduler = MeetingScheduler(store)
    result = scheduler.schedule_meeting({
        "participant_ids": ["alice", "bob"],
        "duration_minutes": 60,
        "time_range": {"start": "2024-09-01T09:00:00Z", "end": "2024-09-01T17:00:00Z"},
    })
    print(result["data"]["start_time"])
"""

# Candidate grid
DEFAULT_STEP_MINUTES = 15

# Longest meeting a request may ask for (one year)
MAX_DURATION_MINUTES = 366 * 24 * 60

# Heuristic 1: earliness
EARLINESS_BASE = 100_000

# Heuristic 2: working hours (UTC)
WORKING_HOURS_START = 9
WORKING_HOURS_END = 17
WORKING_HOURS_BONUS = 500

# Heuristic 3: gap shaping, per participant per side
BACK_TO_BACK_BONUS = 100
SMALL_GAP_LIMIT_MINUTES = 30
SMALL_GAP_PENALTY = -50
AMPLE_GAP_MINUTES = 60
AMPLE_GAP_BONUS = 50

# Heuristic 4: buffer, per participant per side
BUFFER_MINUTES = 15
BUFFER_BONUS = 25

DEFAULT_MEETING_TITLE = "New Meeting"

__all__ = [
    "DEFAULT_STEP_MINUTES",
    "MAX_DURATION_MINUTES",
    "EARLINESS_BASE",
    "WORKING_HOURS_START",
    "WORKING_HOURS_END",
    "WORKING_HOURS_BONUS",
    "BACK_TO_BACK_BONUS",
    "SMALL_GAP_LIMIT_MINUTES",
    "SMALL_GAP_PENALTY",
    "AMPLE_GAP_MINUTES",
    "AMPLE_GAP_BONUS",
    "BUFFER_MINUTES",
    "BUFFER_BONUS",
    "DEFAULT_MEETING_TITLE",
]
