from __future__ import annotations

from datetime import date, datetime

import pytest

from study_planner.models import Task
from study_planner.plan_builder import (
    StudyGoal,
    build_tasks_from_goals,
    move_task,
    next_task,
    set_task_status,
    tasks_for_day,
)


def test_goals_become_tasks_with_defaults() -> None:
    goals = [
        StudyGoal.model_validate({"title": "Linear algebra", "subject": "Math", "durationMinutes": 50, "priority": 4}),
        StudyGoal(),
        StudyGoal(title="Essay outline", duration_minutes=float("nan")),
    ]

    tasks = build_tasks_from_goals(goals, subjects=["English", "History"])

    assert [task.title for task in tasks] == ["Linear algebra", "Task 2", "Essay outline"]
    assert [task.subject for task in tasks] == ["Math", "English", "English"]
    assert [task.duration_minutes for task in tasks] == [50, 30, 30]
    assert [task.priority for task in tasks] == [4, 3, 3]
    assert all(task.status == "todo" and not task.is_scheduled for task in tasks)
    assert len({task.id for task in tasks}) == 3


def test_goals_without_subjects_fall_back_to_general() -> None:
    tasks = build_tasks_from_goals([StudyGoal(title="Review notes")])

    assert tasks[0].subject == "General"


def test_today_agenda_keeps_open_tasks_for_the_day_and_unscheduled_ones() -> None:
    tasks = [
        Task(id="today", scheduled_start=datetime(2024, 1, 8, 18), scheduled_end=datetime(2024, 1, 8, 19)),
        Task(id="tomorrow", scheduled_start=datetime(2024, 1, 9, 18), scheduled_end=datetime(2024, 1, 9, 19)),
        Task(id="loose"),
        Task(id="finished", status="done", scheduled_start=datetime(2024, 1, 8, 19), scheduled_end=datetime(2024, 1, 8, 20)),
        Task(id="finished-loose", status="done"),
    ]

    agenda = tasks_for_day(tasks, date(2024, 1, 8))

    assert [task.id for task in agenda] == ["today", "loose"]
    assert [task.id for task in tasks_for_day(tasks, "2024-01-09")] == ["tomorrow", "loose"]


def test_next_task_is_first_not_done() -> None:
    tasks = [Task(id="a", status="done"), Task(id="b", status="in-progress"), Task(id="c")]

    assert next_task(tasks).id == "b"
    assert next_task([Task(status="done")]) is None
    assert next_task([]) is None


def test_move_task_returns_new_list() -> None:
    tasks = [Task(id="a"), Task(id="b")]

    moved = move_task(tasks, "b", datetime(2024, 1, 8, 19), datetime(2024, 1, 8, 19, 30))

    assert moved[1].scheduled_start == datetime(2024, 1, 8, 19)
    assert moved[1].scheduled_end == datetime(2024, 1, 8, 19, 30)
    assert tasks[1].scheduled_start is None
    assert moved[0] is tasks[0]


def test_move_task_rejects_unknown_ids_and_bad_ranges() -> None:
    tasks = [Task(id="a")]

    with pytest.raises(KeyError):
        move_task(tasks, "missing", datetime(2024, 1, 8, 19), datetime(2024, 1, 8, 20))
    with pytest.raises(ValueError):
        move_task(tasks, "a", datetime(2024, 1, 8, 20), datetime(2024, 1, 8, 19))


def test_status_transitions_follow_focus_sessions() -> None:
    tasks = [Task(id="a"), Task(id="b")]

    started = set_task_status(tasks, "a", "in-progress")
    finished = set_task_status(started, "a", "done")

    assert [task.status for task in started] == ["in-progress", "todo"]
    assert [task.status for task in finished] == ["done", "todo"]
    assert tasks[0].status == "todo"


def test_zero_goal_priority_falls_back_to_default() -> None:
    goals = [StudyGoal.model_validate({"title": "Flashcards", "priority": 0}), StudyGoal(priority=None)]

    tasks = build_tasks_from_goals(goals)

    assert [task.priority for task in tasks] == [3, 3]
    with pytest.raises(ValueError):
        StudyGoal(priority=9)
