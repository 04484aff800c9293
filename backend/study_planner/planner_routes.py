"""Stateless planner endpoints: plan generation, auto-scheduling, and agenda views."""

from __future__ import annotations

import logging
from datetime import date, datetime
from time import perf_counter
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from .auto_scheduler import ScheduleOptions, ScheduleResult, schedule
from .availability import AvailabilityRule
from .clock import resolve_now
from .config import Settings, get_settings
from .errors import InvalidAvailability
from .models import Task
from .plan_builder import StudyGoal, build_tasks_from_goals, move_task, next_task, tasks_for_day
from .telemetry import emit_event


router = APIRouter(prefix="/api/planner", tags=["planner"])
logger = logging.getLogger(__name__)


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ScheduleRequest(_CamelModel):
    tasks: List[Task] = Field(default_factory=list)
    availability: AvailabilityRule = Field(default_factory=AvailabilityRule)
    window_start_hour: Optional[int] = Field(default=None, ge=0, le=23)
    window_end_hour: Optional[int] = Field(default=None, ge=1, le=24)
    break_minutes: Optional[int] = Field(default=None, ge=0)
    now: Optional[datetime] = None


class GeneratePlanRequest(_CamelModel):
    goals: List[StudyGoal] = Field(default_factory=list)
    subjects: List[str] = Field(default_factory=list)


class TaskListResponse(_CamelModel):
    tasks: List[Task] = Field(default_factory=list)


class AgendaRequest(_CamelModel):
    tasks: List[Task] = Field(default_factory=list)
    day: Optional[date] = None


class AgendaResponse(_CamelModel):
    day: date
    tasks: List[Task] = Field(default_factory=list)
    next_task: Optional[Task] = None


class MoveTaskRequest(_CamelModel):
    tasks: List[Task] = Field(default_factory=list)
    task_id: str = Field(..., min_length=1)
    new_start: datetime
    new_end: datetime

    @model_validator(mode="after")
    def _check_range(self) -> "MoveTaskRequest":
        if self.new_end <= self.new_start:
            raise ValueError("newEnd must be later than newStart.")
        return self


def _schedule_options(request: ScheduleRequest, settings: Settings) -> ScheduleOptions:
    return ScheduleOptions(
        window_start_hour=(
            request.window_start_hour if request.window_start_hour is not None else settings.window_start_hour
        ),
        window_end_hour=request.window_end_hour if request.window_end_hour is not None else settings.window_end_hour,
        break_minutes=request.break_minutes if request.break_minutes is not None else settings.break_minutes,
        lookahead_days=settings.lookahead_days,
        now=resolve_now(request.now, settings.timezone),
    )


@router.post("/schedule", response_model=ScheduleResult, status_code=status.HTTP_200_OK)
def schedule_plan(request: ScheduleRequest, settings: Settings = Depends(get_settings)) -> ScheduleResult:
    try:
        options = _schedule_options(request, settings)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc

    started = perf_counter()
    try:
        result = schedule(request.tasks, request.availability, options)
    except InvalidAvailability as exc:
        emit_event("schedule_rejected", reason=str(exc), task_count=len(request.tasks))
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc

    emit_event(
        "schedule_generated",
        task_count=len(result.tasks),
        placed_count=len(result.placed),
        unscheduled_count=len(result.unscheduled_ids),
        exhausted=result.exhausted,
        now=options.now,
        duration_ms=round((perf_counter() - started) * 1000, 2),
    )
    return result


@router.post("/generate", response_model=TaskListResponse, status_code=status.HTTP_200_OK)
def generate_plan(request: GeneratePlanRequest) -> TaskListResponse:
    tasks = build_tasks_from_goals(request.goals, request.subjects)
    emit_event("plan_generated", task_count=len(tasks), subjects=sorted({task.subject for task in tasks}))
    return TaskListResponse(tasks=tasks)


@router.post("/today", response_model=AgendaResponse, status_code=status.HTTP_200_OK)
def today_agenda(request: AgendaRequest, settings: Settings = Depends(get_settings)) -> AgendaResponse:
    day = request.day or resolve_now(None, settings.timezone).date()
    agenda = tasks_for_day(request.tasks, day)
    return AgendaResponse(day=day, tasks=agenda, next_task=next_task(agenda))


@router.post("/move", response_model=TaskListResponse, status_code=status.HTTP_200_OK)
def move_planned_task(request: MoveTaskRequest) -> TaskListResponse:
    try:
        tasks = move_task(request.tasks, request.task_id, request.new_start, request.new_end)
    except KeyError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Task '{request.task_id}' was not found in the plan.",
        ) from exc
    logger.info("Moved task %s to %s", request.task_id, request.new_start.isoformat())
    return TaskListResponse(tasks=tasks)


__all__ = ["router"]
