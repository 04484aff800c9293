"""Error taxonomy shared by the scheduler and the progress aggregator."""

from __future__ import annotations

from datetime import date
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class PlannerError(Exception):
    """Base class for planner failures that abort a whole call."""


class InvalidAvailability(PlannerError, ValueError):
    """Raised when an exception range ends before it starts."""

    def __init__(self, from_: date, to: date, *, index: Optional[int] = None) -> None:
        self.from_ = from_
        self.to = to
        self.index = index
        position = f" at position {index}" if index is not None else ""
        super().__init__(
            f"Exception range{position} starts on {from_.isoformat()} after it ends on {to.isoformat()}."
        )


class PlannerIssue(BaseModel):
    """Per-item problem reported next to a best-effort result."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    code: str
    message: str
    detail: Optional[str] = None


class UnplaceableTask(PlannerIssue):
    code: Literal["unplaceable_task"] = "unplaceable_task"
    task_id: str
    duration_minutes: int
    window_minutes: int


class SchedulingExhausted(PlannerIssue):
    code: Literal["scheduling_exhausted"] = "scheduling_exhausted"
    task_ids: List[str] = Field(default_factory=list)
    lookahead_days: int


class MalformedTimestamp(PlannerIssue):
    code: Literal["malformed_timestamp"] = "malformed_timestamp"
    index: int = Field(ge=0)


__all__ = [
    "InvalidAvailability",
    "MalformedTimestamp",
    "PlannerError",
    "PlannerIssue",
    "SchedulingExhausted",
    "UnplaceableTask",
]
