"""Calendar availability: vacation days and blocked exception ranges."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .errors import InvalidAvailability

DayLike = Union[date, datetime, str]

DEFAULT_LOOKAHEAD_DAYS = 365


def as_calendar_date(value: DayLike) -> date:
    """Truncate a day-like value to its calendar date, ignoring time-of-day."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value.strip()[:10])


class ExceptionRange(BaseModel):
    """Inclusive run of blocked calendar dates."""

    model_config = ConfigDict(populate_by_name=True)

    from_: date = Field(alias="from")
    to: date

    def contains(self, day: date) -> bool:
        return self.from_ <= day <= self.to


class AvailabilityRule(BaseModel):
    """Days a learner has declared unavailable for study."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    vacation_days: List[date] = Field(default_factory=list)
    exception_ranges: List[ExceptionRange] = Field(default_factory=list)

    def validate_ranges(self) -> None:
        for index, exception in enumerate(self.exception_ranges):
            if exception.from_ > exception.to:
                raise InvalidAvailability(exception.from_, exception.to, index=index)

    def is_blocked(self, day: DayLike) -> bool:
        return is_blocked(day, self.vacation_days, self.exception_ranges)


def is_blocked(
    day: DayLike,
    vacation_days: Iterable[DayLike],
    exception_ranges: Iterable[ExceptionRange],
) -> bool:
    """Return True when ``day`` is a vacation day or inside any exception range."""
    target = as_calendar_date(day)
    if any(as_calendar_date(vacation) == target for vacation in vacation_days):
        return True
    return any(exception.contains(target) for exception in exception_ranges)


def next_open_day(
    day: DayLike,
    availability: AvailabilityRule,
    *,
    lookahead_days: int = DEFAULT_LOOKAHEAD_DAYS,
) -> Optional[date]:
    """First unblocked date on or after ``day``; None if the look-ahead or the calendar runs out."""
    candidate = as_calendar_date(day)
    vacations = {as_calendar_date(vacation) for vacation in availability.vacation_days}
    for _ in range(max(lookahead_days, 1)):
        if not is_blocked(candidate, vacations, availability.exception_ranges):
            return candidate
        try:
            candidate += timedelta(days=1)
        except OverflowError:
            return None
    return None


__all__ = [
    "AvailabilityRule",
    "DEFAULT_LOOKAHEAD_DAYS",
    "DayLike",
    "ExceptionRange",
    "as_calendar_date",
    "is_blocked",
    "next_open_day",
]
