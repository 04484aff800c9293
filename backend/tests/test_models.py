from __future__ import annotations

from datetime import datetime, timedelta

import pytest
from pydantic import ValidationError

from study_planner.models import SessionRecord, Task


@pytest.mark.parametrize("raw", [None, "abc", float("nan"), float("inf"), 0, -15])
def test_invalid_durations_fall_back_to_thirty_minutes(raw) -> None:
    task = Task.model_validate({"durationMinutes": raw})

    assert task.duration_minutes == 30


def test_wire_payload_is_parsed_with_defaults() -> None:
    task = Task.model_validate({"id": 42, "title": "Flashcards", "subject": None, "durationMinutes": 44.5})

    assert task.id == "42"
    assert task.subject == "General"
    assert task.duration_minutes == 45
    assert task.priority == 3
    assert task.status == "todo"
    assert task.duration == timedelta(minutes=45)


def test_priority_outside_range_is_rejected() -> None:
    with pytest.raises(ValidationError):
        Task(priority=6)
    with pytest.raises(ValidationError):
        Task(status="blocked")


def test_slot_end_must_follow_start() -> None:
    with pytest.raises(ValidationError):
        Task(scheduled_start=datetime(2024, 1, 8, 19), scheduled_end=datetime(2024, 1, 8, 18))
    with pytest.raises(ValidationError):
        Task(scheduled_end=datetime(2024, 1, 8, 18))


def test_task_serializes_with_wire_names() -> None:
    task = Task(id="t1", duration_minutes=25, scheduled_start=datetime(2024, 1, 8, 18), scheduled_end=datetime(2024, 1, 8, 18, 25))

    payload = task.model_dump(by_alias=True, mode="json")

    assert payload["durationMinutes"] == 25
    assert payload["scheduledStart"] == "2024-01-08T18:00:00"
    assert payload["scheduledEnd"] == "2024-01-08T18:25:00"


def test_session_record_elapsed_time_is_clamped() -> None:
    start = datetime(2024, 1, 8, 9)
    inverted = SessionRecord(started_at=start, stopped_at=start - timedelta(minutes=5))
    open_session = SessionRecord.model_validate({"startedAt": "2024-01-08T09:00:00", "taskId": 7})

    assert inverted.is_inverted
    assert inverted.elapsed_seconds(start) == 0.0
    assert open_session.task_id == "7"
    assert open_session.subject_label == "General"
    assert open_session.elapsed_seconds(start + timedelta(minutes=90)) == 5400.0
