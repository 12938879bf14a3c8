from datetime import datetime
from typing import TypedDict
from redis.client import Pipeline

from src.common.redis import RedisClient
from src.common.exceptions import ResourceNotFoundException, ResourceType
from src.tasks.schemas import (
    CreateTaskRequest,
    Task,
    TaskFilter,
    TaskInterval,
    TaskSortField,
    TaskStatus,
    TaskUpdate,
)
from src.tasks.store.base import TaskStore


class UpdateMapping(TypedDict, total=False):
    updated_at: str
    title: str
    start_time: str
    end_time: str
    priority: int
    status: str


class RedisTaskStore(TaskStore):
    """Tasks as hashes, with one sorted set per owner holding task ids.

    The sorted set is scored by creation time, which gives the natural
    (insertion) order for listings.
    """

    def __init__(self, *, redis_client: RedisClient, key_prefix: str):
        self.client = redis_client
        self.key_prefix = key_prefix

    def _get_task_key(self, owner_id: str, task_id: str) -> str:
        return f"{self.key_prefix}:task:{owner_id}:{task_id}"

    def _get_index_key(self, owner_id: str) -> str:
        return f"{self.key_prefix}:owner:{owner_id}"

    def _get_existing_task_key(self, owner_id: str, task_id: str) -> str:
        task_key = self._get_task_key(owner_id, task_id)

        if not self.client.exists(task_key):
            raise ResourceNotFoundException(ResourceType.TASK, task_id)

        return task_key

    @staticmethod
    def _is_task_hash(data: dict[str, str]) -> bool:
        # Partial hashes lack the fields only create_task writes
        return bool(data) and "id" in data and "owner" in data

    @staticmethod
    def _to_task(data: dict[str, str]) -> Task:
        return Task(
            id=data["id"],
            title=data["title"],
            start_time=datetime.fromisoformat(data["start_time"]),
            end_time=datetime.fromisoformat(data["end_time"]),
            priority=int(data["priority"]),
            status=TaskStatus(data["status"]),
            owner=data["owner"],
            created_at=datetime.fromisoformat(data["created_at"]),
            updated_at=datetime.fromisoformat(data["updated_at"]),
        )

    def _load_owner_tasks(self, owner_id: str) -> list[Task]:
        task_ids: list[str] = self.client.zrange(self._get_index_key(owner_id), 0, -1)
        if not task_ids:
            return []

        pipeline = self.client.pipeline(transaction=False)
        for task_id in task_ids:
            pipeline.hgetall(self._get_task_key(owner_id, task_id))
        results: list[dict[str, str]] = pipeline.execute()

        # An id can outlive its hash if a delete was interrupted halfway
        return [self._to_task(data) for data in results if self._is_task_hash(data)]

    def _filter_tasks(self, owner_id: str, filters: TaskFilter) -> list[Task]:
        return [task for task in self._load_owner_tasks(owner_id) if filters.matches(task)]

    def create_task(
        self,
        owner_id: str,
        id: str,
        task_input: CreateTaskRequest,
        timestamp: datetime,
    ) -> Task:
        task_key = self._get_task_key(owner_id, id)

        pipeline = self.client.pipeline()
        pipeline.hset(
            task_key,
            mapping={
                "id": id,
                "title": task_input.title,
                "start_time": task_input.start_time.isoformat(),
                "end_time": task_input.end_time.isoformat(),
                "priority": task_input.priority,
                "status": task_input.status.value,
                "owner": owner_id,
                "created_at": timestamp.isoformat(),
                "updated_at": timestamp.isoformat(),
            },
        )
        pipeline.zadd(self._get_index_key(owner_id), {id: timestamp.timestamp()})
        pipeline.execute()

        return self.get_task(owner_id, id)

    def get_task(self, owner_id: str, task_id: str) -> Task:
        data = self.client.hgetall(self._get_task_key(owner_id, task_id))

        if not self._is_task_hash(data):
            raise ResourceNotFoundException(ResourceType.TASK, task_id)

        return self._to_task(data)

    def update_task(
        self,
        owner_id: str,
        task_id: str,
        updates: TaskUpdate,
        timestamp: datetime,
    ) -> Task:
        task_key = self._get_task_key(owner_id, task_id)

        update_mapping: UpdateMapping = {"updated_at": timestamp.isoformat()}

        if updates.title is not None:
            update_mapping["title"] = updates.title

        if updates.start_time is not None:
            update_mapping["start_time"] = updates.start_time.isoformat()

        if updates.end_time is not None:
            update_mapping["end_time"] = updates.end_time.isoformat()

        if updates.priority is not None:
            update_mapping["priority"] = updates.priority

        if updates.status is not None:
            update_mapping["status"] = updates.status.value

        def write_updates(pipeline: Pipeline) -> None:
            # WATCH aborts the write if the hash is deleted before EXEC
            if not pipeline.exists(task_key):
                raise ResourceNotFoundException(ResourceType.TASK, task_id)

            pipeline.multi()
            pipeline.hset(task_key, mapping=update_mapping)  # type: ignore

        self.client.transaction(write_updates, task_key)

        return self.get_task(owner_id, task_id)

    def delete_task(self, owner_id: str, task_id: str) -> None:
        task_key = self._get_existing_task_key(owner_id, task_id)

        pipeline = self.client.pipeline()
        pipeline.delete(task_key)
        pipeline.zrem(self._get_index_key(owner_id), task_id)
        pipeline.execute()

    def list_tasks(
        self,
        owner_id: str,
        filters: TaskFilter,
        sort_by: TaskSortField | None,
        limit: int,
        offset: int,
    ) -> list[Task]:
        tasks = self._filter_tasks(owner_id, filters)

        # sorted() is stable, so ties keep insertion order
        if sort_by == TaskSortField.START_TIME:
            tasks = sorted(tasks, key=lambda task: task.start_time)
        elif sort_by == TaskSortField.END_TIME:
            tasks = sorted(tasks, key=lambda task: task.end_time)

        return tasks[offset : offset + limit]

    def count_tasks(self, owner_id: str, filters: TaskFilter) -> int:
        return len(self._filter_tasks(owner_id, filters))

    def list_intervals(self, owner_id: str, status: TaskStatus) -> list[TaskInterval]:
        return [
            TaskInterval(
                priority=task.priority,
                start_time=task.start_time,
                end_time=task.end_time,
            )
            for task in self._load_owner_tasks(owner_id)
            if task.status == status
        ]
