from abc import ABC, abstractmethod
from datetime import datetime

from src.tasks.schemas import (
    CreateTaskRequest,
    Task,
    TaskFilter,
    TaskInterval,
    TaskSortField,
    TaskStatus,
    TaskUpdate,
)


class TaskStore(ABC):
    """Persistence for tasks.

    Every operation is scoped by ``owner_id``. A task owned by someone else
    is reported exactly like a task that does not exist.
    """

    @abstractmethod
    def create_task(
        self,
        owner_id: str,
        id: str,
        task_input: CreateTaskRequest,
        timestamp: datetime,
    ) -> Task:
        pass

    @abstractmethod
    def get_task(self, owner_id: str, task_id: str) -> Task:
        pass

    @abstractmethod
    def update_task(
        self,
        owner_id: str,
        task_id: str,
        updates: TaskUpdate,
        timestamp: datetime,
    ) -> Task:
        pass

    @abstractmethod
    def delete_task(self, owner_id: str, task_id: str) -> None:
        pass

    @abstractmethod
    def list_tasks(
        self,
        owner_id: str,
        filters: TaskFilter,
        sort_by: TaskSortField | None,
        limit: int,
        offset: int,
    ) -> list[Task]:
        pass

    @abstractmethod
    def count_tasks(self, owner_id: str, filters: TaskFilter) -> int:
        pass

    @abstractmethod
    def list_intervals(self, owner_id: str, status: TaskStatus) -> list[TaskInterval]:
        pass
