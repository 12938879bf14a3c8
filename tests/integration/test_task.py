from datetime import datetime
import pytest
from fastapi.testclient import TestClient
from tests.integration.utils import create_task


pytestmark = pytest.mark.integration


class TestTasks:
    def test_task_lifecycle(
        self, test_client: TestClient, auth_headers: dict[str, str]
    ) -> None:
        """Create, finish and delete a task against a real store."""
        task = create_task(
            test_client, auth_headers, start_offset_hours=-1, end_offset_hours=5
        )

        response = test_client.patch(
            f"/tasks/{task['id']}", json={"status": "finished"}, headers=auth_headers
        )
        assert response.status_code == 200
        assert response.json()["status"] == "finished"
        assert datetime.fromisoformat(
            response.json()["endTime"]
        ) < datetime.fromisoformat(task["endTime"])

        response = test_client.delete(f"/tasks/{task['id']}", headers=auth_headers)
        assert response.status_code == 200

        response = test_client.get(f"/tasks/{task['id']}", headers=auth_headers)
        assert response.status_code == 404

    def test_pagination(
        self, test_client: TestClient, auth_headers: dict[str, str]
    ) -> None:
        for _ in range(25):
            create_task(
                test_client, auth_headers, start_offset_hours=0, end_offset_hours=1
            )

        response = test_client.get("/tasks?page=3&limit=10", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["totalPages"] == 3
        assert len(response.json()["tasks"]) == 5

        response = test_client.get("/tasks?page=4&limit=10", headers=auth_headers)
        assert response.json()["tasks"] == []

    def test_stats(self, test_client: TestClient, auth_headers: dict[str, str]) -> None:
        create_task(
            test_client,
            auth_headers,
            start_offset_hours=-5,
            end_offset_hours=3,
            priority=2,
        )
        create_task(
            test_client,
            auth_headers,
            start_offset_hours=-30,
            end_offset_hours=-28,
            status="finished",
        )
        create_task(
            test_client,
            auth_headers,
            start_offset_hours=-30,
            end_offset_hours=-26,
            status="finished",
        )

        response = test_client.get("/tasks/stats", headers=auth_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["totalTasks"] == 3
        assert data["averageCompletionTime"] == pytest.approx(3)
        assert [group["_id"] for group in data["pendingTasksByPriority"]] == [2]
        assert data["pendingTasksByPriority"][0]["timeLapsed"] == pytest.approx(
            5, abs=0.01
        )
        assert data["pendingTasksByPriority"][0]["balanceTime"] == pytest.approx(
            3, abs=0.01
        )
