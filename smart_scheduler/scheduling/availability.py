"""
Tool: Availability Checker
Purpose: Decide whether a slot is free for every participant

A participant is busy when any of their entries overlaps the slot under
open-interval semantics. Touching boundaries (an entry ending exactly when
the slot starts) are not a conflict.

The check stops at the first busy participant. Callers rely on this: the
store is not queried for the remaining participants of that candidate.
"""

from collections.abc import Iterable

from smart_scheduler.calendar.models import Slot
from smart_scheduler.calendar.store import CalendarStore
from smart_scheduler.logging_config import get_logger

logger = get_logger(__name__)


class AvailabilityChecker:
    def __init__(self, store: CalendarStore):
        self.store = store

    def is_participant_free(self, participant_id: str, slot: Slot) -> bool:
        return not self.store.find_overlapping(participant_id, slot.start, slot.end)

    def is_available(self, participant_ids: Iterable[str], slot: Slot) -> bool:
        for participant_id in participant_ids:
            if not self.is_participant_free(participant_id, slot):
                logger.debug(
                    "slot_busy",
                    participant=participant_id,
                    start=slot.start.isoformat(),
                )
                return False
        return True
