from typing import Any


def task_payload(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "title": "Write report",
        "startTime": "2024-01-01T09:00:00Z",
        "endTime": "2024-01-01T11:00:00Z",
        "priority": 2,
        "status": "pending",
    }
    payload.update(overrides)
    return payload
