"""
Scheduling failures.

Each exception carries a stable ``error_type`` so the public operations can
report typed failures in their result dicts:

    {"success": False, "error": str(exc), "error_type": exc.error_type}
"""


class SchedulingError(Exception):
    """Base class for every failure raised by the scheduler."""

    error_type = "scheduling_error"


class InvalidRequestError(SchedulingError):
    """Malformed timestamps, empty participants, bad duration or window."""

    error_type = "invalid_input"


class UnknownParticipantError(SchedulingError):
    """One or more participant ids are not in the directory."""

    error_type = "unknown_participant"

    def __init__(self, missing: list[str]):
        self.missing = list(missing)
        super().__init__(f"Unknown participants: {', '.join(self.missing)}")


class NoSlotAvailableError(SchedulingError):
    """The search exhausted the window without a feasible candidate."""

    error_type = "no_slot"


class SlotConflictError(SchedulingError):
    """The chosen slot was taken between search and booking."""

    error_type = "conflict"


class CalendarStoreError(SchedulingError):
    """A calendar store operation failed (I/O, lock timeout, constraint)."""

    error_type = "store_failure"


class BookingError(CalendarStoreError):
    """Entry creation failed partway; the booking was rolled back."""
