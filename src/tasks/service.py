import logging
import math
from uuid import uuid4

from src.common.current_datetime import get_current_datetime
from src.common.exceptions import InvalidTaskException
from src.tasks.schemas import (
    CreateTaskRequest,
    Task,
    TaskFilter,
    TaskPage,
    TaskSortField,
    TaskStats,
    TaskStatus,
    TaskUpdate,
    UpdateTaskRequest,
)
from src.tasks.stats import build_task_stats
from src.tasks.store.base import TaskStore

logger = logging.getLogger(__name__)


class TaskService:
    def __init__(self, task_store: TaskStore):
        self.task_store = task_store

    def create_task(self, owner_id: str, task_input: CreateTaskRequest) -> Task:
        task = self.task_store.create_task(
            owner_id=owner_id,
            id=str(uuid4()),
            task_input=task_input,
            timestamp=get_current_datetime(),
        )
        logger.info("Created task %s for user %s", task.id, owner_id)
        return task

    def get_task(self, owner_id: str, task_id: str) -> Task:
        return self.task_store.get_task(owner_id, task_id)

    def list_tasks(
        self,
        owner_id: str,
        filters: TaskFilter,
        sort_by: TaskSortField | None,
        page: int,
        limit: int,
    ) -> TaskPage:
        total = self.task_store.count_tasks(owner_id, filters)
        offset = (page - 1) * limit

        # Offsets at or past the total select nothing, so the store is skipped
        tasks = (
            self.task_store.list_tasks(
                owner_id,
                filters=filters,
                sort_by=sort_by,
                limit=limit,
                offset=offset,
            )
            if offset < total
            else []
        )

        return TaskPage(
            tasks=tasks,
            total_pages=math.ceil(total / limit),
            current_page=page,
        )

    def update_task(
        self, owner_id: str, task_id: str, task_input: UpdateTaskRequest
    ) -> Task:
        current = self.task_store.get_task(owner_id, task_id)
        timestamp = get_current_datetime()

        updates = TaskUpdate(**task_input.model_dump(exclude_unset=True))

        # Completion is accounted at the actual finish time, not the planned one
        if (
            updates.status == TaskStatus.FINISHED
            and current.status == TaskStatus.PENDING
        ):
            updates.end_time = timestamp

        start_time = updates.start_time or current.start_time
        end_time = updates.end_time or current.end_time
        if end_time < start_time:
            raise InvalidTaskException(
                "End time must be greater than or equal to start time"
            )

        task = self.task_store.update_task(
            owner_id, task_id, updates=updates, timestamp=timestamp
        )
        logger.info("Updated task %s for user %s", task_id, owner_id)
        return task

    def delete_task(self, owner_id: str, task_id: str) -> None:
        self.task_store.delete_task(owner_id, task_id)
        logger.info("Deleted task %s for user %s", task_id, owner_id)

    def get_task_stats(self, owner_id: str) -> TaskStats:
        now = get_current_datetime()

        total_tasks = self.task_store.count_tasks(owner_id, TaskFilter())
        completed_count = self.task_store.count_tasks(
            owner_id, TaskFilter(status=TaskStatus.FINISHED)
        )
        pending = self.task_store.list_intervals(owner_id, TaskStatus.PENDING)
        finished = self.task_store.list_intervals(owner_id, TaskStatus.FINISHED)

        return build_task_stats(
            total_tasks=total_tasks,
            completed_count=completed_count,
            pending=pending,
            finished=finished,
            now=now,
        )
