from datetime import datetime, timedelta, timezone
from typing import Any
from fastapi.testclient import TestClient


def create_task(
    client: TestClient,
    headers: dict[str, str],
    *,
    start_offset_hours: float,
    end_offset_hours: float,
    **overrides: Any,
) -> dict[str, Any]:
    """Create a task with times relative to the current time."""
    now = datetime.now(timezone.utc)
    payload: dict[str, Any] = {
        "title": "Integration task",
        "startTime": (now + timedelta(hours=start_offset_hours)).isoformat(),
        "endTime": (now + timedelta(hours=end_offset_hours)).isoformat(),
        "priority": 3,
        "status": "pending",
    }
    payload.update(overrides)

    response = client.post("/tasks", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()
