from pathlib import Path
from typing import Callable, Generator
from unittest.mock import Mock
import pytest
from fastapi.testclient import TestClient
from pytest_mock import MockerFixture

from src.common.redis import RedisClient, get_redis_client
from src.config import Settings, get_settings
from src.main import app


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    return Settings(
        POSTGRES_URL=f"sqlite:///{tmp_path / 'api.db'}",
        TASK_STORE_BACKEND="postgres",
        USER_STORE_BACKEND="postgres",
        TASKS_API_KEY=None,
        OTEL_ENABLED=False,
        PASSWORD_HASH_ITERATIONS=1000,
    )


@pytest.fixture
def mock_redis_client(mocker: MockerFixture) -> Mock:
    """Redis mock backing session keys with a dict."""
    sessions: dict[str, str] = {}
    client = mocker.Mock(spec=RedisClient)
    client.set.side_effect = lambda key, value, ex=None: sessions.__setitem__(
        key, value
    )
    client.get.side_effect = lambda key: sessions.get(key)
    client.delete.side_effect = lambda key: sessions.pop(key, None)
    client.ping.return_value = True
    return client


@pytest.fixture
def test_client(
    test_settings: Settings, mock_redis_client: Mock
) -> Generator[TestClient, None, None]:
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_redis_client] = lambda: mock_redis_client
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def register(test_client: TestClient) -> Callable[[str], dict[str, str]]:
    def _register(email: str) -> dict[str, str]:
        response = test_client.post(
            "/users/register", json={"email": email, "password": "secret-password"}
        )
        assert response.status_code == 201
        return {"Authorization": f"Bearer {response.json()['token']}"}

    return _register


@pytest.fixture
def auth_headers(register: Callable[[str], dict[str, str]]) -> dict[str, str]:
    return register("ada@example.com")
