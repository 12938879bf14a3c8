from datetime import datetime, timezone
import pytest
from pydantic import ValidationError

from src.tasks.schemas import (
    CreateTaskRequest,
    TaskStatus,
    UpdateTaskRequest,
)


def test_create_request_accepts_camel_case() -> None:
    request = CreateTaskRequest.model_validate(
        {
            "title": "  Write report  ",
            "startTime": "2024-01-01T09:00:00Z",
            "endTime": "2024-01-01T11:00:00Z",
            "priority": 3,
        }
    )

    assert request.title == "Write report"
    assert request.status == TaskStatus.PENDING
    assert request.start_time == datetime(2024, 1, 1, 9, tzinfo=timezone.utc)


def test_create_request_treats_naive_times_as_utc() -> None:
    request = CreateTaskRequest.model_validate(
        {
            "title": "Naive",
            "startTime": "2024-01-01T09:00:00",
            "endTime": "2024-01-01T09:00:00",
            "priority": 1,
        }
    )

    assert request.start_time.tzinfo == timezone.utc
    assert request.end_time == request.start_time


def test_create_request_ignores_owner() -> None:
    request = CreateTaskRequest.model_validate(
        {
            "title": "Mine",
            "startTime": "2024-01-01T09:00:00Z",
            "endTime": "2024-01-01T10:00:00Z",
            "priority": 1,
            "owner": "someone-else",
        }
    )

    assert "owner" not in request.model_dump()


@pytest.mark.parametrize(
    "overrides",
    [
        {"title": "   "},
        {"priority": 0},
        {"priority": 6},
        {"status": "done"},
        {"startTime": "not-a-date"},
        {"startTime": 1704099600},
        {"endTime": 1704103200.5},
        {"priority": True},
        {"priority": "2"},
        {"priority": 2.0},
        {"endTime": "2024-01-01T08:59:59Z"},
    ],
)
def test_create_request_rejects_invalid_fields(overrides: dict[str, object]) -> None:
    payload: dict[str, object] = {
        "title": "Task",
        "startTime": "2024-01-01T09:00:00Z",
        "endTime": "2024-01-01T10:00:00Z",
        "priority": 2,
        "status": "pending",
    }
    payload.update(overrides)

    with pytest.raises(ValidationError):
        CreateTaskRequest.model_validate(payload)


def test_update_request_tracks_only_provided_fields() -> None:
    request = UpdateTaskRequest.model_validate({"status": "finished"})

    assert request.model_dump(exclude_unset=True) == {"status": TaskStatus.FINISHED}


def test_update_request_rejects_explicit_null() -> None:
    with pytest.raises(ValidationError):
        UpdateTaskRequest.model_validate({"title": None})


def test_update_request_rejects_empty_title() -> None:
    with pytest.raises(ValidationError):
        UpdateTaskRequest.model_validate({"title": "  "})


@pytest.mark.parametrize(
    "payload", [{"priority": True}, {"startTime": 1704099600}, {"endTime": 0}]
)
def test_update_request_rejects_loose_types(payload: dict[str, object]) -> None:
    with pytest.raises(ValidationError):
        UpdateTaskRequest.model_validate(payload)
