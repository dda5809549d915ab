"""
Tool: Slot Search Engine
Purpose: Pick the best slot in a window that every participant can attend

Algorithm:
    1. Generate candidate starts from window.start in fixed steps, keeping
       only candidates whose end does not pass window.end.
    2. Skip candidates where anyone is busy (never scored).
    3. Score the rest; keep the highest score. Candidates arrive in start
       order, so on equal scores the first one seen (the earliest) stays.

The search is single-threaded per request; the tie-break depends on the
candidate order.
"""

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from smart_scheduler.calendar.models import Slot, TimeWindow
from smart_scheduler.calendar.store import CalendarStore
from smart_scheduler.errors import InvalidRequestError
from smart_scheduler.logging_config import get_logger
from smart_scheduler.scheduling import DEFAULT_STEP_MINUTES
from smart_scheduler.scheduling.availability import AvailabilityChecker
from smart_scheduler.scheduling.scorer import SlotScorer

logger = get_logger(__name__)


@dataclass
class SearchOutcome:
    """Best slot (or None) plus counters for logging."""

    best: Slot | None = None
    best_score: int | None = None
    candidates: int = 0
    feasible: int = 0
    scores: list[tuple[Slot, int]] = field(default_factory=list)


def validate_search_input(window: TimeWindow, duration_minutes: int) -> None:
    """Reject inputs that would make the search loop meaningless."""
    if isinstance(duration_minutes, bool) or not isinstance(duration_minutes, int):
        raise InvalidRequestError(f"Duration must be a whole number of minutes, got {duration_minutes!r}")
    if duration_minutes <= 0:
        raise InvalidRequestError(f"Duration must be positive, got {duration_minutes}")
    if window.start >= window.end:
        raise InvalidRequestError("Time range start must be before its end")
    try:
        duration = timedelta(minutes=duration_minutes)
    except OverflowError as e:
        raise InvalidRequestError(f"Duration of {duration_minutes} minutes is out of range") from e
    if window.end - window.start < duration:
        raise InvalidRequestError(
            f"Time range ({window.duration_minutes} min) is shorter than the duration ({duration_minutes} min)"
        )


def _shift(instant: datetime, delta: timedelta) -> datetime | None:
    """instant + delta, or None past the end of the datetime range."""
    try:
        return instant + delta
    except OverflowError:
        return None


def candidate_slots(window: TimeWindow, duration_minutes: int, step_minutes: int = DEFAULT_STEP_MINUTES) -> Iterator[Slot]:
    """Yield candidates in increasing start order; none ends after window.end."""
    step = timedelta(minutes=step_minutes)
    duration = timedelta(minutes=duration_minutes)

    start = window.start
    while start is not None:
        end = _shift(start, duration)
        # An end beyond datetime.max is also beyond window.end
        if end is None or end > window.end:
            break
        yield Slot(start=start, end=end)
        start = _shift(start, step)


class SlotSearchEngine:
    """
    Walks a window and returns the best slot for all participants.

    Args:
        store: Calendar store shared by the checker and scorer
        step_minutes: Spacing between candidate starts
        availability: Override the availability checker (tests)
        scorer: Override the slot scorer (tests)
    """

    def __init__(
        self,
        store: CalendarStore,
        step_minutes: int = DEFAULT_STEP_MINUTES,
        availability: AvailabilityChecker | None = None,
        scorer: SlotScorer | None = None,
    ):
        if step_minutes <= 0:
            raise ValueError(f"step_minutes must be positive, got {step_minutes}")
        self.step_minutes = step_minutes
        self.availability = availability or AvailabilityChecker(store)
        self.scorer = scorer or SlotScorer(store)

    def search(self, participant_ids: Sequence[str], window: TimeWindow, duration_minutes: int) -> SearchOutcome:
        validate_search_input(window, duration_minutes)

        outcome = SearchOutcome()

        for slot in candidate_slots(window, duration_minutes, self.step_minutes):
            outcome.candidates += 1

            if not self.availability.is_available(participant_ids, slot):
                continue

            outcome.feasible += 1
            score = self.scorer.score(participant_ids, slot, window.start)
            outcome.scores.append((slot, score))
            logger.debug("candidate_scored", start=slot.start.isoformat(), score=score)

            # Strictly greater only: an equal later score never displaces the earlier slot
            if outcome.best_score is None or score > outcome.best_score:
                outcome.best = slot
                outcome.best_score = score

        if outcome.best is None:
            logger.info(
                f"No free slot for {len(participant_ids)} participant(s) "
                f"across {outcome.candidates} candidate(s)"
            )
        else:
            logger.info(
                f"Best slot {outcome.best.start.isoformat()} scored {outcome.best_score} "
                f"({outcome.feasible}/{outcome.candidates} feasible)"
            )

        return outcome

    def find_best_slot(self, participant_ids: Sequence[str], window: TimeWindow, duration_minutes: int) -> Slot | None:
        return self.search(participant_ids, window, duration_minutes).best
