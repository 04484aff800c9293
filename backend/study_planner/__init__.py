"""Study planner backend: auto-scheduling and progress aggregation."""

from .auto_scheduler import AutoScheduler, ScheduleOptions, ScheduleResult, schedule
from .availability import AvailabilityRule, ExceptionRange, is_blocked, next_open_day
from .errors import InvalidAvailability, MalformedTimestamp, PlannerError, SchedulingExhausted, UnplaceableTask
from .models import SessionRecord, Task
from .progress import build_progress_report, heatmap, summarize, trailing_window_start, week_start

__all__ = [
    "AutoScheduler",
    "AvailabilityRule",
    "ExceptionRange",
    "InvalidAvailability",
    "MalformedTimestamp",
    "PlannerError",
    "ScheduleOptions",
    "ScheduleResult",
    "SchedulingExhausted",
    "SessionRecord",
    "Task",
    "UnplaceableTask",
    "build_progress_report",
    "heatmap",
    "is_blocked",
    "next_open_day",
    "schedule",
    "summarize",
    "trailing_window_start",
    "week_start",
]
