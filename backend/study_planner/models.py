"""Task and study-session models exchanged with the storage layer."""

from __future__ import annotations

import math
import uuid
from datetime import datetime, timedelta
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

DEFAULT_SUBJECT = "General"
DEFAULT_TASK_TITLE = "Untitled task"
DEFAULT_DURATION_MINUTES = 30
DEFAULT_PRIORITY = 3

TaskStatus = Literal["todo", "in-progress", "done"]


def _coerce_identifier(value: Any) -> Any:
    if value is None or isinstance(value, str):
        return value
    return str(value)


class Task(BaseModel):
    """Single study task inside a plan."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    title: str = DEFAULT_TASK_TITLE
    description: str = ""
    subject: str = DEFAULT_SUBJECT
    duration_minutes: int = Field(default=DEFAULT_DURATION_MINUTES, ge=1)
    priority: int = Field(default=DEFAULT_PRIORITY, ge=1, le=5)
    status: TaskStatus = "todo"
    scheduled_start: Optional[datetime] = None
    scheduled_end: Optional[datetime] = None

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Any:
        if value is None:
            return uuid.uuid4().hex
        return _coerce_identifier(value)

    @field_validator("title", mode="before")
    @classmethod
    def _default_title(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return DEFAULT_TASK_TITLE
        return value

    @field_validator("description", mode="before")
    @classmethod
    def _default_description(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("subject", mode="before")
    @classmethod
    def _default_subject(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return DEFAULT_SUBJECT
        return value

    @field_validator("duration_minutes", mode="before")
    @classmethod
    def _default_duration(cls, value: Any) -> int:
        if isinstance(value, bool):
            return DEFAULT_DURATION_MINUTES
        try:
            minutes = float(value)
        except (TypeError, ValueError):
            return DEFAULT_DURATION_MINUTES
        if not math.isfinite(minutes) or minutes <= 0:
            return DEFAULT_DURATION_MINUTES
        return int(math.ceil(minutes))

    @field_validator("priority", mode="before")
    @classmethod
    def _default_priority(cls, value: Any) -> Any:
        return DEFAULT_PRIORITY if value is None else value

    @model_validator(mode="after")
    def _check_slot(self) -> "Task":
        if self.scheduled_end is None:
            return self
        if self.scheduled_start is None:
            raise ValueError("scheduled_end requires scheduled_start.")
        if self.scheduled_end <= self.scheduled_start:
            raise ValueError("scheduled_end must be later than scheduled_start.")
        return self

    @property
    def duration(self) -> timedelta:
        return timedelta(minutes=self.duration_minutes)

    @property
    def is_scheduled(self) -> bool:
        return self.scheduled_start is not None and self.scheduled_end is not None

    def unscheduled(self) -> "Task":
        return self.model_copy(update={"scheduled_start": None, "scheduled_end": None})


class SessionRecord(BaseModel):
    """Logged study session. An open session has no ``stopped_at``."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    task_id: Optional[str] = None
    subject: Optional[str] = None
    started_at: datetime
    stopped_at: Optional[datetime] = None
    notes: Optional[str] = None
    mood: Optional[str] = None

    @field_validator("task_id", mode="before")
    @classmethod
    def _stringify_task_id(cls, value: Any) -> Any:
        return _coerce_identifier(value)

    @property
    def subject_label(self) -> str:
        if self.subject and self.subject.strip():
            return self.subject
        return DEFAULT_SUBJECT

    @property
    def is_inverted(self) -> bool:
        return self.stopped_at is not None and self.stopped_at < self.started_at

    def elapsed_seconds(self, now: datetime) -> float:
        stop = self.stopped_at if self.stopped_at is not None else now
        return max(0.0, (stop - self.started_at).total_seconds())


__all__ = [
    "DEFAULT_DURATION_MINUTES",
    "DEFAULT_PRIORITY",
    "DEFAULT_SUBJECT",
    "DEFAULT_TASK_TITLE",
    "SessionRecord",
    "Task",
    "TaskStatus",
]
