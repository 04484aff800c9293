"""Stateless progress endpoints backing the dashboard."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from .clock import resolve_now
from .config import Settings, get_settings
from .progress import (
    HEATMAP_DAYS,
    Heatmap,
    ProgressReport,
    build_progress_report,
    heatmap,
    trailing_window_start,
    week_start,
)
from .telemetry import emit_event


router = APIRouter(prefix="/api/progress", tags=["progress"])
logger = logging.getLogger(__name__)

FIRST_WEEKDAY: Dict[str, int] = {
    "monday": 0,
    "sunday": 6,
}


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProgressSummaryRequest(_CamelModel):
    # Raw records so one bad entry does not reject the whole request.
    sessions: List[Any] = Field(default_factory=list)
    window_start: Optional[datetime] = None
    week_start: Optional[Literal["monday", "sunday"]] = None
    now: Optional[datetime] = None
    target_hours: Optional[float] = Field(default=None, gt=0)

    @model_validator(mode="after")
    def _require_window(self) -> "ProgressSummaryRequest":
        if self.window_start is None and self.week_start is None:
            raise ValueError("Provide either windowStart or weekStart ('monday' or 'sunday').")
        return self


class HeatmapRequest(_CamelModel):
    sessions: List[Any] = Field(default_factory=list)
    window_start: Optional[datetime] = None
    now: Optional[datetime] = None


class HeatmapResponse(_CamelModel):
    window_start: datetime
    days: int = HEATMAP_DAYS
    mastery: Heatmap = Field(default_factory=dict)


@router.post("/summary", response_model=ProgressReport, status_code=status.HTTP_200_OK)
def progress_summary(
    request: ProgressSummaryRequest,
    settings: Settings = Depends(get_settings),
) -> ProgressReport:
    now = resolve_now(request.now, settings.timezone)
    window_start = request.window_start
    if window_start is None:
        window_start = week_start(now, FIRST_WEEKDAY[str(request.week_start)])
    target_hours = request.target_hours if request.target_hours is not None else settings.weekly_target_hours

    try:
        report = build_progress_report(
            request.sessions,
            week_start_at=window_start,
            now=now,
            target_hours=target_hours,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    if report.skipped:
        logger.info("Skipped %s malformed session record(s)", len(report.skipped))
    emit_event(
        "progress_summarized",
        session_count=len(request.sessions),
        skipped_count=len(report.skipped),
        hours=report.hours_this_week,
        window_start=window_start,
        subjects=sorted(report.mastery),
    )
    return report


@router.post("/heatmap", response_model=HeatmapResponse, status_code=status.HTTP_200_OK)
def progress_heatmap(
    request: HeatmapRequest,
    settings: Settings = Depends(get_settings),
) -> HeatmapResponse:
    now = resolve_now(request.now, settings.timezone)
    window_start = request.window_start or trailing_window_start(now)
    try:
        mastery = heatmap(request.sessions, window_start, now)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    return HeatmapResponse(window_start=window_start, mastery=mastery)


__all__ = ["router"]
