from __future__ import annotations

from fastapi.testclient import TestClient

from study_planner.main import app
from study_planner.telemetry import TelemetryEvent, clear_listeners, register_listener


def test_summary_endpoint_uses_requested_week_start() -> None:
    client = TestClient(app)
    sessions = [
        {"subject": "Math", "startedAt": "2024-01-07T09:00:00", "stoppedAt": "2024-01-07T10:00:00"},
        {"subject": "Math", "startedAt": "2024-01-08T09:00:00", "stoppedAt": "2024-01-08T11:00:00"},
        {"startedAt": "garbage"},
    ]

    monday = client.post(
        "/api/progress/summary",
        json={"sessions": sessions, "weekStart": "monday", "now": "2024-01-10T12:00:00"},
    )
    sunday = client.post(
        "/api/progress/summary",
        json={"sessions": sessions, "weekStart": "sunday", "now": "2024-01-10T12:00:00", "targetHours": 6},
    )

    assert monday.status_code == 200
    payload = monday.json()
    assert payload["hoursThisWeek"] == 2.0
    assert payload["targetHours"] == 8.0
    assert payload["progress"] == 0.25
    assert payload["mastery"] == {"Math": [0.0, 0.0, 0.0, 0.5, 1.0, 0.0, 0.0]}
    assert len(payload["skipped"]) == 1
    assert payload["skipped"][0]["index"] == 2

    assert sunday.json()["hoursThisWeek"] == 3.0
    assert sunday.json()["progress"] == 0.5


def test_summary_endpoint_requires_a_window() -> None:
    client = TestClient(app)

    response = client.post("/api/progress/summary", json={"sessions": [], "now": "2024-01-10T12:00:00"})

    assert response.status_code == 422


def test_summary_endpoint_accepts_explicit_window_and_emits_event() -> None:
    captured = []
    register_listener(captured.append)
    client = TestClient(app)
    try:
        response = client.post(
            "/api/progress/summary",
            json={
                "sessions": [{"startedAt": "2024-01-09T20:00:00", "stoppedAt": "2024-01-09T20:30:00"}],
                "windowStart": "2024-01-09T00:00:00",
                "now": "2024-01-10T12:00:00",
            },
        )
    finally:
        clear_listeners()

    assert response.status_code == 200
    assert response.json()["hoursThisWeek"] == 0.5
    summarized = [event for event in captured if isinstance(event, TelemetryEvent) and event.name == "progress_summarized"]
    assert summarized[0].payload["window_start"] == "2024-01-09T00:00:00"
    assert summarized[0].payload["subjects"] == ["General"]


def test_heatmap_endpoint_defaults_to_trailing_week() -> None:
    client = TestClient(app)

    response = client.post(
        "/api/progress/heatmap",
        json={
            "sessions": [{"subject": "Physics", "startedAt": "2024-01-14T08:00:00", "stoppedAt": "2024-01-14T09:00:00"}],
            "now": "2024-01-14T12:00:00",
        },
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["windowStart"] == "2024-01-08T00:00:00"
    assert payload["days"] == 7
    assert payload["mastery"] == {"Physics": [0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.5]}


def test_heatmap_endpoint_rejects_mixed_timezones() -> None:
    client = TestClient(app)

    response = client.post(
        "/api/progress/heatmap",
        json={"sessions": [], "windowStart": "2024-01-08T00:00:00Z", "now": "2024-01-14T12:00:00"},
    )

    assert response.status_code == 422


def test_summary_endpoint_skips_records_that_are_not_objects() -> None:
    client = TestClient(app)
    sessions = [
        {"subject": "Math", "startedAt": "2024-01-08T09:00:00", "stoppedAt": "2024-01-08T11:00:00"},
        None,
        42,
    ]

    response = client.post(
        "/api/progress/summary",
        json={"sessions": sessions, "weekStart": "monday", "now": "2024-01-10T12:00:00"},
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["hoursThisWeek"] == 2.0
    assert [issue["index"] for issue in payload["skipped"]] == [1, 2]
    assert all(issue["code"] == "malformed_timestamp" for issue in payload["skipped"])


def test_heatmap_endpoint_ignores_records_that_are_not_objects() -> None:
    client = TestClient(app)

    response = client.post(
        "/api/progress/heatmap",
        json={
            "sessions": [None, {"subject": "Physics", "startedAt": "2024-01-14T08:00:00", "stoppedAt": "2024-01-14T09:00:00"}],
            "now": "2024-01-14T12:00:00",
        },
    )

    assert response.status_code == 200
    assert response.json()["mastery"] == {"Physics": [0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.5]}
