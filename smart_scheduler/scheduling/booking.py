"""
Tool: Booking Executor
Purpose: Write the chosen slot onto every participant's calendar, all or nothing

One entry is created per participant. If any write fails, every entry this
booking already created is deleted again before the error is raised, so a
partial booking is never left behind.

With recheck_before_write enabled, each participant's availability is checked
again immediately before their entry is written. This narrows the window in
which a concurrent request can book the same participant between search and
booking; a slot that became busy aborts the booking with SlotConflictError.
"""

from collections.abc import Sequence

from smart_scheduler.calendar.models import CalendarEntry, Meeting, Slot
from smart_scheduler.calendar.store import CalendarStore
from smart_scheduler.errors import BookingError, CalendarStoreError, SlotConflictError
from smart_scheduler.logging_config import get_logger
from smart_scheduler.scheduling import DEFAULT_MEETING_TITLE
from smart_scheduler.scheduling.availability import AvailabilityChecker

logger = get_logger(__name__)


class BookingExecutor:
    def __init__(
        self,
        store: CalendarStore,
        title: str = DEFAULT_MEETING_TITLE,
        recheck_before_write: bool = True,
        availability: AvailabilityChecker | None = None,
    ):
        self.store = store
        self.title = title
        self.recheck_before_write = recheck_before_write
        self.availability = availability or AvailabilityChecker(store)

    def book(self, participant_ids: Sequence[str], slot: Slot) -> Meeting:
        meeting_id = Meeting.generate_id()
        created: list[CalendarEntry] = []

        try:
            for participant_id in participant_ids:
                if self.recheck_before_write and not self.availability.is_participant_free(participant_id, slot):
                    raise SlotConflictError(
                        f"Slot {slot.start.isoformat()} is no longer free for {participant_id}"
                    )
                created.append(self.store.create_entry(self.title, slot.start, slot.end, participant_id))
        except SlotConflictError:
            self._roll_back(meeting_id, created)
            raise
        except Exception as e:
            self._roll_back(meeting_id, created)
            raise BookingError(f"Booking {meeting_id} failed and was rolled back: {e}") from e

        logger.info(f"Booked {meeting_id} for {len(created)} participant(s) at {slot.start.isoformat()}")

        return Meeting(
            meeting_id=meeting_id,
            title=self.title,
            participant_ids=list(participant_ids),
            start_time=slot.start,
            end_time=slot.end,
            entries=created,
        )

    def _roll_back(self, meeting_id: str, created: list[CalendarEntry]) -> None:
        if not created:
            return

        logger.warning(f"Rolling back {len(created)} entr(ies) of {meeting_id}")

        failed: list[str] = []
        for entry in reversed(created):
            try:
                self.store.delete_entry(entry.id)
            except CalendarStoreError as e:
                logger.error(f"Could not delete entry {entry.id} during rollback of {meeting_id}: {e}")
                failed.append(entry.id)

        if failed:
            raise BookingError(
                f"Rollback of {meeting_id} incomplete; entries left behind: {', '.join(failed)}"
            )
