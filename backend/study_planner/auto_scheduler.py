"""Greedy, order-preserving placement of study tasks into a daily work window."""

from __future__ import annotations

import logging
from collections import deque
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Annotated, Deque, List, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from .availability import DEFAULT_LOOKAHEAD_DAYS, AvailabilityRule, next_open_day
from .errors import SchedulingExhausted, UnplaceableTask
from .models import Task

logger = logging.getLogger(__name__)


DEFAULT_WINDOW_START_HOUR = 18
DEFAULT_WINDOW_END_HOUR = 22
DEFAULT_BREAK_MINUTES = 10

SchedulingIssue = Annotated[Union[UnplaceableTask, SchedulingExhausted], Field(discriminator="code")]


class ScheduleOptions(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    window_start_hour: int = Field(default=DEFAULT_WINDOW_START_HOUR, ge=0, le=23)
    window_end_hour: int = Field(default=DEFAULT_WINDOW_END_HOUR, ge=1, le=24)
    break_minutes: int = Field(default=DEFAULT_BREAK_MINUTES, ge=0)
    lookahead_days: int = Field(default=DEFAULT_LOOKAHEAD_DAYS, ge=1)
    now: datetime

    @model_validator(mode="after")
    def _check_window(self) -> "ScheduleOptions":
        if self.window_end_hour <= self.window_start_hour:
            raise ValueError("window_end_hour must be later than window_start_hour.")
        return self


class ScheduleResult(BaseModel):
    """Tasks in input order, with slots filled where placement succeeded."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    tasks: List[Task] = Field(default_factory=list)
    unscheduled_ids: List[str] = Field(default_factory=list)
    exhausted: bool = False
    issues: List[SchedulingIssue] = Field(default_factory=list)

    @property
    def placed(self) -> List[Task]:
        return [task for task in self.tasks if task.is_scheduled]


def _ceil_to_minute(moment: datetime) -> datetime:
    if moment.second == 0 and moment.microsecond == 0:
        return moment
    return moment.replace(second=0, microsecond=0) + timedelta(minutes=1)


class AutoScheduler:
    """Assigns contiguous slots to tasks inside a recurring daily work window."""

    def __init__(
        self,
        *,
        window_start_hour: int = DEFAULT_WINDOW_START_HOUR,
        window_end_hour: int = DEFAULT_WINDOW_END_HOUR,
        break_minutes: int = DEFAULT_BREAK_MINUTES,
        lookahead_days: int = DEFAULT_LOOKAHEAD_DAYS,
    ) -> None:
        if not 0 <= window_start_hour < window_end_hour <= 24:
            raise ValueError(
                f"Invalid work window {window_start_hour}:00-{window_end_hour}:00; "
                "expected 0 <= start < end <= 24."
            )
        if break_minutes < 0:
            raise ValueError("break_minutes cannot be negative.")
        if lookahead_days < 1:
            raise ValueError("lookahead_days must be at least 1.")
        self._window_start_hour = window_start_hour
        self._window_end_hour = window_end_hour
        self._break = timedelta(minutes=break_minutes)
        self._lookahead_days = lookahead_days

    @classmethod
    def from_options(cls, options: ScheduleOptions) -> "AutoScheduler":
        return cls(
            window_start_hour=options.window_start_hour,
            window_end_hour=options.window_end_hour,
            break_minutes=options.break_minutes,
            lookahead_days=options.lookahead_days,
        )

    @property
    def window_minutes(self) -> int:
        return (self._window_end_hour - self._window_start_hour) * 60

    def schedule(
        self,
        tasks: Sequence[Task],
        availability: AvailabilityRule,
        *,
        now: datetime,
    ) -> ScheduleResult:
        availability.validate_ranges()

        pending: Deque[Task] = deque(tasks)
        results: List[Task] = []
        unscheduled_ids: List[str] = []
        exhausted_ids: List[str] = []
        issues: List[Union[UnplaceableTask, SchedulingExhausted]] = []
        cursor = self._settle(now, availability)

        while pending:
            task = pending[0]
            if task.duration_minutes > self.window_minutes:
                pending.popleft()
                logger.warning(
                    "Task %s needs %s minutes but the work window is %s minutes",
                    task.id,
                    task.duration_minutes,
                    self.window_minutes,
                )
                issues.append(
                    UnplaceableTask(
                        message=f"'{task.title}' is longer than the daily work window.",
                        task_id=task.id,
                        duration_minutes=task.duration_minutes,
                        window_minutes=self.window_minutes,
                    )
                )
                results.append(task.unscheduled())
                unscheduled_ids.append(task.id)
                continue

            if cursor is None:
                pending.popleft()
                results.append(task.unscheduled())
                unscheduled_ids.append(task.id)
                exhausted_ids.append(task.id)
                continue

            end = cursor + task.duration
            if end > self._window_end(cursor.date(), cursor.tzinfo):
                # Retry the same task on the next open day.
                cursor = self._next_window_start(cursor.date(), availability, cursor.tzinfo)
                continue

            pending.popleft()
            results.append(task.model_copy(update={"scheduled_start": cursor, "scheduled_end": end}))
            logger.debug("Placed task %s at %s", task.id, cursor.isoformat())
            cursor = self._settle(end + self._break, availability)

        if exhausted_ids:
            logger.warning(
                "No open day within %s days; leaving %s task(s) unscheduled",
                self._lookahead_days,
                len(exhausted_ids),
            )
            issues.append(
                SchedulingExhausted(
                    message=f"No open day found within {self._lookahead_days} days.",
                    task_ids=exhausted_ids,
                    lookahead_days=self._lookahead_days,
                )
            )

        return ScheduleResult(
            tasks=results,
            unscheduled_ids=unscheduled_ids,
            exhausted=bool(exhausted_ids),
            issues=issues,
        )

    def _window_start(self, day: date, tz: Optional[tzinfo]) -> datetime:
        return datetime.combine(day, time.min, tzinfo=tz) + timedelta(hours=self._window_start_hour)

    def _window_end(self, day: date, tz: Optional[tzinfo]) -> datetime:
        return datetime.combine(day, time.min, tzinfo=tz) + timedelta(hours=self._window_end_hour)

    def _next_window_start(
        self,
        day: date,
        availability: AvailabilityRule,
        tz: Optional[tzinfo],
    ) -> Optional[datetime]:
        """Window start on the first open day after ``day``; None past the calendar's end."""
        try:
            open_day = next_open_day(day + timedelta(days=1), availability, lookahead_days=self._lookahead_days)
            if open_day is None:
                return None
            return self._window_start(open_day, tz)
        except OverflowError:
            return None

    def _settle(self, moment: datetime, availability: AvailabilityRule) -> Optional[datetime]:
        """Move ``moment`` to the earliest usable instant inside an open work window."""
        day = moment.date()
        tz = moment.tzinfo
        window_start = self._window_start(day, tz)
        if moment < window_start:
            moment = window_start
        moment = _ceil_to_minute(moment)
        if moment >= self._window_end(day, tz) or availability.is_blocked(day):
            return self._next_window_start(day, availability, tz)
        return moment


def schedule(
    tasks: Sequence[Task],
    availability: AvailabilityRule,
    options: ScheduleOptions,
) -> ScheduleResult:
    """Place ``tasks`` in order, starting from ``options.now``."""
    return AutoScheduler.from_options(options).schedule(tasks, availability, now=options.now)


__all__ = [
    "AutoScheduler",
    "DEFAULT_BREAK_MINUTES",
    "DEFAULT_WINDOW_END_HOUR",
    "DEFAULT_WINDOW_START_HOUR",
    "ScheduleOptions",
    "ScheduleResult",
    "SchedulingIssue",
    "schedule",
]
