"""
Tool: Request Validation
Purpose: Turn raw Schedule and GetCalendar payloads into validated requests

Timestamps must carry a UTC offset and are normalised to UTC. Participant
ids are opaque: they are checked, never rewritten, apart from collapsing
repeats. Any pydantic ValidationError surfaces as InvalidRequestError.

Usage:
    from smart_scheduler.scheduling.requests import parse_schedule_request

    request = parse_schedule_request(payload, min_duration_minutes=15)
    window = request.time_range.to_window()
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, ValidationInfo, field_validator, model_validator

from smart_scheduler.calendar.models import TimeWindow, ensure_utc, parse_instant
from smart_scheduler.errors import InvalidRequestError
from smart_scheduler.scheduling import MAX_DURATION_MINUTES


def _coerce_instant(value: Any) -> datetime:
    if isinstance(value, datetime):
        return ensure_utc(value)
    if isinstance(value, str):
        return parse_instant(value)
    raise ValueError(f"Invalid timestamp: {value!r}")


class TimeRange(BaseModel):
    model_config = ConfigDict(extra="forbid")
    start: datetime
    end: datetime

    @field_validator("start", "end", mode="before")
    @classmethod
    def parse_timestamp(cls, value: Any) -> datetime:
        return _coerce_instant(value)

    @model_validator(mode="after")
    def check_order(self) -> TimeRange:
        if self.start >= self.end:
            raise ValueError("start must be before end")
        return self

    def to_window(self) -> TimeWindow:
        return TimeWindow(start=self.start, end=self.end)


class ScheduleRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")
    participant_ids: list[str] = Field(min_length=1)
    duration_minutes: int = Field(le=MAX_DURATION_MINUTES)
    time_range: TimeRange

    @field_validator("participant_ids")
    @classmethod
    def check_participants(cls, value: list[str]) -> list[str]:
        if any(not p.strip() for p in value):
            raise ValueError("participant ids must not be blank")
        # Duplicates would book the same calendar twice
        return list(dict.fromkeys(value))

    @field_validator("duration_minutes")
    @classmethod
    def check_duration(cls, value: int, info: ValidationInfo) -> int:
        minimum = (info.context or {}).get("min_duration_minutes", 1)
        if value < minimum:
            raise ValueError(f"duration must be at least {minimum} minutes")
        return value

    @model_validator(mode="after")
    def check_fits_window(self) -> ScheduleRequest:
        span = self.time_range.end - self.time_range.start
        try:
            needed = timedelta(minutes=self.duration_minutes)
        except OverflowError as e:
            raise ValueError(f"duration of {self.duration_minutes} minutes is out of range") from e
        if span < needed:
            raise ValueError("time range is shorter than the duration")
        return self


class CalendarQuery(BaseModel):
    model_config = ConfigDict(extra="forbid")
    participant_id: str = Field(min_length=1)
    start: datetime
    end: datetime

    @field_validator("start", "end", mode="before")
    @classmethod
    def parse_timestamp(cls, value: Any) -> datetime:
        return _coerce_instant(value)

    @model_validator(mode="after")
    def check_order(self) -> CalendarQuery:
        if self.start >= self.end:
            raise ValueError("start must be before end")
        return self

    def to_window(self) -> TimeWindow:
        return TimeWindow(start=self.start, end=self.end)


def _describe(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"])
        message = item["msg"].removeprefix("Value error, ")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts)


def parse_schedule_request(payload: dict[str, Any] | ScheduleRequest, min_duration_minutes: int = 1) -> ScheduleRequest:
    """
    Validate a Schedule payload.

    Raises:
        InvalidRequestError: on any malformed or inconsistent field
    """
    if isinstance(payload, ScheduleRequest):
        payload = payload.model_dump()
    try:
        return ScheduleRequest.model_validate(payload, context={"min_duration_minutes": min_duration_minutes})
    except ValidationError as e:
        raise InvalidRequestError(f"Invalid schedule request: {_describe(e)}") from e


def parse_calendar_query(payload: dict[str, Any] | CalendarQuery) -> CalendarQuery:
    if isinstance(payload, CalendarQuery):
        return payload
    try:
        return CalendarQuery.model_validate(payload)
    except ValidationError as e:
        raise InvalidRequestError(f"Invalid calendar query: {_describe(e)}") from e
