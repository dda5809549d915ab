"""
Tool: Meeting Scheduler Service
Purpose: Public Schedule and GetCalendar operations over an injected store

Wires the search engine, booking executor and calendar reader around one
CalendarStore, validates requests, and reports every outcome in the
project's result convention:

    {"success": True, "data": {...}}
    {"success": False, "error": "...", "error_type": "invalid_input"}

error_type is one of: invalid_input, unknown_participant, no_slot,
conflict, store_failure.

Requests can also be submitted to a worker pool; submit_* returns a
concurrent.futures.Future resolving to the same result dict. Each request
still runs its search and booking on a single worker thread.

Usage:
    from smart_scheduler.calendar.store import SQLiteCalendarStore
    from smart_scheduler.scheduling.service import MeetingScheduler

    with MeetingScheduler(SQLiteCalendarStore(db_path)) as scheduler:
        future = scheduler.submit_schedule(payload)
        result = future.result(timeout=30)
"""

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any

import structlog

from smart_scheduler.calendar.models import CalendarEntry, Meeting
from smart_scheduler.calendar.reader import CalendarReader
from smart_scheduler.calendar.store import CalendarStore
from smart_scheduler.config_models import SchedulerConfig
from smart_scheduler.errors import NoSlotAvailableError, SchedulingError, UnknownParticipantError
from smart_scheduler.logging_config import get_logger
from smart_scheduler.scheduling.booking import BookingExecutor
from smart_scheduler.scheduling.requests import (
    CalendarQuery,
    ScheduleRequest,
    parse_calendar_query,
    parse_schedule_request,
)
from smart_scheduler.scheduling.search import SlotSearchEngine

logger = get_logger(__name__)


def _failure(error: SchedulingError) -> dict[str, Any]:
    return {"success": False, "error": str(error), "error_type": error.error_type}


class MeetingScheduler:
    """
    Schedule and GetCalendar over one calendar store.

    Args:
        store: Calendar store and participant directory
        config: Scheduler settings (defaults when omitted)
    """

    def __init__(self, store: CalendarStore, config: SchedulerConfig | None = None):
        self.store = store
        self.config = config or SchedulerConfig()

        settings = self.config.scheduler
        self.engine = SlotSearchEngine(store, step_minutes=settings.step_minutes)
        self.booking = BookingExecutor(
            store,
            title=settings.meeting_title,
            recheck_before_write=settings.recheck_before_write,
        )
        self.reader = CalendarReader(store)

        self._executor: ThreadPoolExecutor | None = None
        self._executor_lock = threading.Lock()

    # =========================================================================
    # Raising API
    # =========================================================================

    def check_participants(self, participant_ids: list[str]) -> None:
        existing = self.store.participants_exist(participant_ids)
        missing = [p for p in participant_ids if p not in existing]
        if missing:
            raise UnknownParticipantError(missing)

    def schedule(self, payload: dict[str, Any] | ScheduleRequest) -> Meeting:
        """
        Validate, search and book.

        Raises:
            InvalidRequestError, UnknownParticipantError: before any search work
            NoSlotAvailableError: nobody-busy slot does not exist in the window
            SlotConflictError: the slot was taken before booking finished
            CalendarStoreError: the store failed; nothing is left booked
        """
        request = parse_schedule_request(payload, self.config.scheduler.min_duration_minutes)
        self.check_participants(request.participant_ids)

        window = request.time_range.to_window()
        slot = self.engine.find_best_slot(request.participant_ids, window, request.duration_minutes)
        if slot is None:
            raise NoSlotAvailableError("No available time slot found for all participants.")

        return self.booking.book(request.participant_ids, slot)

    def calendar_entries(self, payload: dict[str, Any] | CalendarQuery) -> list[CalendarEntry]:
        query = parse_calendar_query(payload)
        return self.reader.get_events(query.participant_id, query.to_window())

    # =========================================================================
    # Result-dict API
    # =========================================================================

    def schedule_meeting(self, payload: dict[str, Any] | ScheduleRequest) -> dict[str, Any]:
        """
        Schedule operation.

        Returns:
            {
                "success": bool,
                "data": {"meeting_id", "title", "participant_ids", "start_time", "end_time"},
                "error": str,
                "error_type": str,
            }
        """
        with structlog.contextvars.bound_contextvars(operation="schedule"):
            try:
                meeting = self.schedule(payload)
            except SchedulingError as e:
                logger.warning(f"Schedule failed ({e.error_type}): {e}")
                return _failure(e)

        return {
            "success": True,
            "data": meeting.to_dict(),
            "message": f"Meeting {meeting.meeting_id} booked for {len(meeting.participant_ids)} participant(s)",
        }

    def get_calendar(self, payload: dict[str, Any] | CalendarQuery) -> dict[str, Any]:
        """
        GetCalendar operation.

        Returns:
            {
                "success": bool,
                "data": {"participant_id", "events": [{"title", "start_time", "end_time"}], "total"},
            }
        """
        with structlog.contextvars.bound_contextvars(operation="get_calendar"):
            try:
                query = parse_calendar_query(payload)
                entries = self.reader.get_events(query.participant_id, query.to_window())
            except SchedulingError as e:
                logger.warning(f"GetCalendar failed ({e.error_type}): {e}")
                return _failure(e)

        return {
            "success": True,
            "data": {
                "participant_id": query.participant_id,
                "events": [entry.to_summary() for entry in entries],
                "total": len(entries),
            },
        }

    # =========================================================================
    # Worker pool
    # =========================================================================

    @property
    def executor(self) -> ThreadPoolExecutor:
        with self._executor_lock:
            if self._executor is None:
                pool = self.config.pool
                self._executor = ThreadPoolExecutor(
                    max_workers=pool.max_workers,
                    thread_name_prefix=pool.thread_name_prefix,
                )
            return self._executor

    def submit_schedule(self, payload: dict[str, Any] | ScheduleRequest) -> "Future[dict[str, Any]]":
        return self.executor.submit(self.schedule_meeting, payload)

    def submit_calendar(self, payload: dict[str, Any] | CalendarQuery) -> "Future[dict[str, Any]]":
        return self.executor.submit(self.get_calendar, payload)

    def shutdown(self, wait: bool = True) -> None:
        with self._executor_lock:
            if self._executor is not None:
                self._executor.shutdown(wait=wait)
                self._executor = None

    def __enter__(self) -> "MeetingScheduler":
        return self

    def __exit__(self, *exc_info) -> None:
        self.shutdown()
