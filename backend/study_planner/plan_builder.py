"""Plan assembly helpers: goals to tasks, today's agenda, and task edits."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Iterable, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .availability import DayLike, as_calendar_date
from .models import DEFAULT_SUBJECT, Task, TaskStatus

logger = logging.getLogger(__name__)


class StudyGoal(BaseModel):
    """Loose goal description supplied by the learner before planning."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: Optional[str] = None
    description: Optional[str] = None
    subject: Optional[str] = None
    duration_minutes: Optional[float] = None
    priority: Optional[int] = Field(default=None, ge=1, le=5)

    @field_validator("priority", mode="before")
    @classmethod
    def _unset_priority(cls, value: Any) -> Any:
        # 0 means "not chosen"; the task default applies.
        return None if value in (None, 0, "") else value


def build_tasks_from_goals(
    goals: Iterable[StudyGoal],
    subjects: Optional[Sequence[str]] = None,
) -> List[Task]:
    fallback_subject = subjects[0] if subjects else DEFAULT_SUBJECT
    tasks: List[Task] = []
    for index, goal in enumerate(goals):
        tasks.append(
            Task(
                title=goal.title or f"Task {index + 1}",
                description=goal.description or "",
                subject=goal.subject or fallback_subject,
                duration_minutes=goal.duration_minutes,
                priority=goal.priority,
            )
        )
    logger.info("Built %s task(s) from goals", len(tasks))
    return tasks


def tasks_for_day(tasks: Iterable[Task], day: DayLike) -> List[Task]:
    """Open tasks slotted on ``day`` plus open tasks that have no slot yet."""
    target = as_calendar_date(day)
    agenda: List[Task] = []
    for task in tasks:
        if task.status == "done":
            continue
        if task.scheduled_start is None:
            if task.scheduled_end is None:
                agenda.append(task)
            continue
        if task.scheduled_start.date() == target:
            agenda.append(task)
    return agenda


def next_task(tasks: Iterable[Task]) -> Optional[Task]:
    return next((task for task in tasks if task.status != "done"), None)


def _replace_task(tasks: Sequence[Task], task_id: str, **updates: object) -> List[Task]:
    updated: List[Task] = []
    found = False
    for task in tasks:
        if task.id == task_id:
            task = task.model_copy(update=updates)
            found = True
        updated.append(task)
    if not found:
        raise KeyError(task_id)
    return updated


def move_task(
    tasks: Sequence[Task],
    task_id: str,
    new_start: datetime,
    new_end: datetime,
) -> List[Task]:
    """Re-slot one task by hand. Returns a new list; the input is untouched."""
    if new_end <= new_start:
        raise ValueError("A task's new end must be later than its new start.")
    return _replace_task(tasks, task_id, scheduled_start=new_start, scheduled_end=new_end)


def set_task_status(tasks: Sequence[Task], task_id: str, status: TaskStatus) -> List[Task]:
    return _replace_task(tasks, task_id, status=status)


__all__ = [
    "StudyGoal",
    "build_tasks_from_goals",
    "move_task",
    "next_task",
    "set_task_status",
    "tasks_for_day",
]
