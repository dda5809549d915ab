"""
Tool: Slot Scorer
Purpose: Rate a free slot with four additive heuristics (all in UTC)

Heuristics:
    1. Earliness: EARLINESS_BASE minus minutes from the window start.
       Dominates the total for any window longer than a few hours.
    2. Working hours: flat bonus when the slot starts at or after 09:00 and
       ends on an exact hour no later than 17:00. A slot ending 16:30 or
       17:01 gets nothing.
    3. Gap shaping, per participant and per side (before / after):
         gap == 0          -> back-to-back bonus
         0 < gap < 30      -> awkward gap penalty
         30 <= gap < 60    -> nothing
         gap >= 60         -> ample gap bonus
       A side with no neighbouring entry contributes nothing.
    4. Buffer, per participant and per side: bonus when a neighbour exists
       and the gap is at least 15 minutes. Stacks with heuristic 3, so a
       60+ minute gap earns both bonuses.

Scores are only comparable between candidates of the same search.
"""

from collections.abc import Iterable
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any

from smart_scheduler.calendar.models import Slot, minutes_between
from smart_scheduler.calendar.store import CalendarStore
from smart_scheduler.scheduling import (
    AMPLE_GAP_BONUS,
    AMPLE_GAP_MINUTES,
    BACK_TO_BACK_BONUS,
    BUFFER_BONUS,
    BUFFER_MINUTES,
    EARLINESS_BASE,
    SMALL_GAP_LIMIT_MINUTES,
    SMALL_GAP_PENALTY,
    WORKING_HOURS_BONUS,
    WORKING_HOURS_END,
    WORKING_HOURS_START,
)


@dataclass
class ScoreBreakdown:
    """Per-heuristic contributions; total is their sum."""

    earliness: int = 0
    working_hours: int = 0
    gaps: int = 0
    buffers: int = 0

    @property
    def total(self) -> int:
        return self.earliness + self.working_hours + self.gaps + self.buffers

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        d["total"] = self.total
        return d


def earliness_score(slot: Slot, window_start: datetime) -> int:
    return EARLINESS_BASE - minutes_between(window_start, slot.start)


def working_hours_score(slot: Slot) -> int:
    # End must land on an exact hour; minute-granular ends lose the bonus
    if (
        slot.start.hour >= WORKING_HOURS_START
        and slot.end.hour <= WORKING_HOURS_END
        and slot.end.minute <= 0
    ):
        return WORKING_HOURS_BONUS
    return 0


def gap_score(gap_minutes: int | None) -> int:
    if gap_minutes is None:
        return 0
    if gap_minutes == 0:
        return BACK_TO_BACK_BONUS
    if gap_minutes < SMALL_GAP_LIMIT_MINUTES:
        return SMALL_GAP_PENALTY
    if gap_minutes >= AMPLE_GAP_MINUTES:
        return AMPLE_GAP_BONUS
    return 0


def buffer_score(gap_minutes: int | None) -> int:
    if gap_minutes is not None and gap_minutes >= BUFFER_MINUTES:
        return BUFFER_BONUS
    return 0


class SlotScorer:
    def __init__(self, store: CalendarStore):
        self.store = store

    def neighbour_gaps(self, participant_id: str, slot: Slot) -> tuple[int | None, int | None]:
        """
        Minutes between the slot and the participant's nearest entries.

        Returns:
            (gap_before, gap_after); None on a side with no neighbouring entry
        """
        prev_end = self.store.find_latest_end_at_or_before(participant_id, slot.start)
        next_start = self.store.find_earliest_start_at_or_after(participant_id, slot.end)

        gap_before = minutes_between(prev_end, slot.start) if prev_end is not None else None
        gap_after = minutes_between(slot.end, next_start) if next_start is not None else None
        return gap_before, gap_after

    def breakdown(self, participant_ids: Iterable[str], slot: Slot, window_start: datetime) -> ScoreBreakdown:
        result = ScoreBreakdown(
            earliness=earliness_score(slot, window_start),
            working_hours=working_hours_score(slot),
        )

        for participant_id in participant_ids:
            for gap in self.neighbour_gaps(participant_id, slot):
                result.gaps += gap_score(gap)
                result.buffers += buffer_score(gap)

        return result

    def score(self, participant_ids: Iterable[str], slot: Slot, window_start: datetime) -> int:
        return self.breakdown(participant_ids, slot, window_start).total
