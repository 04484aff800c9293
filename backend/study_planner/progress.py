"""Session-log aggregation: weekly hours and the per-subject mastery heatmap."""

from __future__ import annotations

import logging
import math
from datetime import datetime, time, timedelta
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from .errors import MalformedTimestamp
from .models import SessionRecord

logger = logging.getLogger(__name__)


HEATMAP_DAYS = 7
FULL_INTENSITY_HOURS = 2.0
SECONDS_PER_HOUR = 3600.0

SessionInput = Union[SessionRecord, Mapping[str, Any]]
Heatmap = Dict[str, List[float]]


class ProgressSummary(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    hours: float = Field(default=0.0, ge=0.0)
    target_hours: Optional[float] = None
    progress: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    session_count: int = Field(default=0, ge=0)
    skipped: List[MalformedTimestamp] = Field(default_factory=list)


class ProgressReport(BaseModel):
    """Dashboard payload: this week's hours plus the trailing mastery heatmap."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    hours_this_week: float = 0.0
    target_hours: Optional[float] = None
    progress: Optional[float] = None
    mastery: Heatmap = Field(default_factory=dict)
    skipped: List[MalformedTimestamp] = Field(default_factory=list)


def week_start(now: datetime, first_weekday: int) -> datetime:
    """Midnight of the most recent ``first_weekday`` (0=Monday ... 6=Sunday) on or before ``now``."""
    if not 0 <= first_weekday <= 6:
        raise ValueError("first_weekday must be between 0 (Monday) and 6 (Sunday).")
    offset = (now.weekday() - first_weekday) % 7
    return datetime.combine(now.date() - timedelta(days=offset), time.min, tzinfo=now.tzinfo)


def trailing_window_start(now: datetime, days: int = HEATMAP_DAYS) -> datetime:
    """Midnight ``days - 1`` days before ``now`` so the window covers ``days`` calendar days."""
    if days < 1:
        raise ValueError("days must be at least 1.")
    return datetime.combine(now.date() - timedelta(days=days - 1), time.min, tzinfo=now.tzinfo)


def _is_aware(moment: datetime) -> bool:
    return moment.tzinfo is not None and moment.utcoffset() is not None


def _check_reference(window_start: datetime, now: datetime) -> None:
    if _is_aware(window_start) != _is_aware(now):
        raise ValueError("window_start and now must both be timezone-aware or both naive.")


def _malformed(index: int, detail: str) -> MalformedTimestamp:
    logger.debug("Skipping session record %s: %s", index, detail)
    return MalformedTimestamp(
        message="Session record skipped because of malformed timestamps.",
        detail=detail,
        index=index,
    )


def _coerce_sessions(
    sessions: Iterable[SessionInput],
    reference: datetime,
) -> Tuple[List[SessionRecord], List[MalformedTimestamp]]:
    """Validate raw records, separating usable sessions from malformed ones."""
    valid: List[SessionRecord] = []
    skipped: List[MalformedTimestamp] = []
    reference_aware = _is_aware(reference)
    for index, raw in enumerate(sessions):
        if isinstance(raw, SessionRecord):
            record = raw
        else:
            try:
                record = SessionRecord.model_validate(raw)
            except ValidationError as exc:
                skipped.append(_malformed(index, f"{exc.error_count()} validation error(s): {exc.errors()[0]['msg']}"))
                continue
        stamps = [record.started_at] if record.stopped_at is None else [record.started_at, record.stopped_at]
        if any(_is_aware(stamp) != reference_aware for stamp in stamps):
            skipped.append(_malformed(index, "Timestamps mix timezone-aware and naive values."))
            continue
        if record.is_inverted:
            skipped.append(_malformed(index, "stoppedAt is earlier than startedAt."))
            continue
        valid.append(record)
    return valid, skipped


def _in_window(sessions: Iterable[SessionRecord], window_start: datetime) -> List[SessionRecord]:
    return [session for session in sessions if session.started_at >= window_start]


def summarize(
    sessions: Iterable[SessionInput],
    window_start: datetime,
    now: datetime,
    *,
    target_hours: Optional[float] = None,
) -> ProgressSummary:
    """Total study hours for sessions started on or after ``window_start``."""
    _check_reference(window_start, now)
    records, skipped = _coerce_sessions(sessions, window_start)
    in_window = _in_window(records, window_start)
    seconds = sum(session.elapsed_seconds(now) for session in in_window)
    hours = round(seconds / SECONDS_PER_HOUR, 2)

    progress: Optional[float] = None
    if target_hours is not None:
        progress = min(1.0, hours / target_hours) if target_hours > 0 else 0.0

    return ProgressSummary(
        hours=hours,
        target_hours=target_hours,
        progress=progress,
        session_count=len(in_window),
        skipped=skipped,
    )


def heatmap(
    sessions: Iterable[SessionInput],
    window_start: datetime,
    now: datetime,
    *,
    days: int = HEATMAP_DAYS,
) -> Heatmap:
    """Per-subject daily intensity, each cell normalized to ``min(1, hours / 2)``."""
    if days < 1:
        raise ValueError("days must be at least 1.")
    _check_reference(window_start, now)
    records, _ = _coerce_sessions(sessions, window_start)
    mastery: Heatmap = {}
    for session in _in_window(records, window_start):
        offset = (session.started_at - window_start) / timedelta(days=1)
        day_index = min(days - 1, max(0, math.floor(offset)))
        subject = session.subject_label
        if subject not in mastery:
            mastery[subject] = [0.0] * days
        mastery[subject][day_index] += session.elapsed_seconds(now) / SECONDS_PER_HOUR

    return {
        subject: [min(1.0, hours / FULL_INTENSITY_HOURS) for hours in cells]
        for subject, cells in mastery.items()
    }


def build_progress_report(
    sessions: Iterable[SessionInput],
    *,
    week_start_at: datetime,
    now: datetime,
    target_hours: Optional[float] = None,
    heatmap_start: Optional[datetime] = None,
) -> ProgressReport:
    """Combine the weekly summary and the trailing heatmap for a dashboard."""
    session_list = list(sessions)
    summary = summarize(session_list, week_start_at, now, target_hours=target_hours)
    mastery_start = heatmap_start if heatmap_start is not None else trailing_window_start(now)
    return ProgressReport(
        hours_this_week=summary.hours,
        target_hours=summary.target_hours,
        progress=summary.progress,
        mastery=heatmap(session_list, mastery_start, now),
        skipped=summary.skipped,
    )


__all__ = [
    "FULL_INTENSITY_HOURS",
    "HEATMAP_DAYS",
    "Heatmap",
    "ProgressReport",
    "ProgressSummary",
    "SessionInput",
    "build_progress_report",
    "heatmap",
    "summarize",
    "trailing_window_start",
    "week_start",
]
