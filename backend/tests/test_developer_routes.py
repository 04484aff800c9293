from __future__ import annotations

from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from study_planner.config import Settings, get_settings
from study_planner.main import app


@pytest.fixture
def client() -> Iterator[TestClient]:
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_settings_endpoint_is_hidden_by_default(client: TestClient) -> None:
    app.dependency_overrides[get_settings] = lambda: Settings(STUDY_PLANNER_DEBUG_ENDPOINTS=False)

    response = client.get("/api/developer/settings")

    assert response.status_code == 404


def test_settings_endpoint_reports_effective_configuration(client: TestClient) -> None:
    app.dependency_overrides[get_settings] = lambda: Settings(
        STUDY_PLANNER_DEBUG_ENDPOINTS=True,
        STUDY_PLANNER_BREAK_MINUTES=15,
    )

    response = client.get("/api/developer/settings")

    assert response.status_code == 200
    payload = response.json()
    assert payload["settings"]["STUDY_PLANNER_DEBUG_ENDPOINTS"] is True
    assert payload["settings"]["STUDY_PLANNER_BREAK_MINUTES"] == 15
    assert payload["settings"]["STUDY_PLANNER_WINDOW_START_HOUR"] == 18
    assert payload["now"]
