from datetime import datetime, timezone
from unittest.mock import Mock
import pytest
from fastapi import HTTPException, status
from fastapi.testclient import TestClient
from pytest_mock import MockerFixture
from redis.exceptions import ConnectionError

from src.common.api_key import get_api_key
from src.common.exceptions import (
    ResourceNotFoundException,
    ResourceType,
)
from src.config import Settings, get_settings
from src.main import app
from src.tasks.service import TaskService
from src.tasks.dependencies import get_task_service
from src.users.dependencies import get_current_user
from src.users.schemas import User


@pytest.fixture
def mock_settings(mocker: MockerFixture) -> Mock:
    return mocker.Mock(spec=Settings)


def test_get_api_key_disabled(mock_settings: Mock) -> None:
    mock_settings.TASKS_API_KEY = None

    assert get_api_key(api_key=None, settings=mock_settings) is None


def test_get_api_key_valid(mock_settings: Mock) -> None:
    mock_settings.TASKS_API_KEY = "valid_api_key"

    assert get_api_key(api_key="valid_api_key", settings=mock_settings) is None


def test_get_api_key_invalid(mock_settings: Mock) -> None:
    mock_settings.TASKS_API_KEY = "valid_api_key"

    with pytest.raises(HTTPException) as exc_info:
        get_api_key(api_key="invalid_api_key", settings=mock_settings)

    assert exc_info.value.status_code == status.HTTP_401_UNAUTHORIZED


def test_get_api_key_missing(mock_settings: Mock) -> None:
    mock_settings.TASKS_API_KEY = "valid_api_key"

    with pytest.raises(HTTPException) as exc_info:
        get_api_key(api_key=None, settings=mock_settings)

    assert exc_info.value.status_code == status.HTTP_401_UNAUTHORIZED


def test_not_found_message_names_only_the_id() -> None:
    exc = ResourceNotFoundException(ResourceType.TASK, "task-1")

    assert str(exc) == "Task 'task-1' not found"


def test_settings_parse_comma_separated_origins() -> None:
    settings = Settings(CORS_ORIGINS="http://a.test, http://b.test", LOG_LEVEL="debug")

    assert settings.CORS_ORIGINS == ["http://a.test", "http://b.test"]
    assert settings.LOG_LEVEL == "DEBUG"


@pytest.fixture
def client_with_failing_store(mocker: MockerFixture):
    task_service = mocker.Mock(spec=TaskService)
    user = User(
        id="user-1",
        email="ada@example.com",
        password_hash="hash",
        created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )
    app.dependency_overrides[get_current_user] = lambda: user
    app.dependency_overrides[get_task_service] = lambda: task_service
    app.dependency_overrides[get_settings] = lambda: Settings(TASKS_API_KEY=None)
    yield TestClient(app, raise_server_exceptions=False), task_service
    app.dependency_overrides.clear()


def test_redis_outage_is_service_unavailable(client_with_failing_store) -> None:
    client, task_service = client_with_failing_store
    task_service.get_task_stats.side_effect = ConnectionError("connection refused")

    response = client.get("/tasks/stats")

    assert response.status_code == 503
    assert response.json() == {"detail": "Service unavailable"}


def test_unexpected_error_is_opaque(client_with_failing_store) -> None:
    client, task_service = client_with_failing_store
    task_service.get_task_stats.side_effect = RuntimeError("secret internals")

    response = client.get("/tasks/stats")

    assert response.status_code == 500
    assert response.json() == {"detail": "An unexpected error occurred"}
