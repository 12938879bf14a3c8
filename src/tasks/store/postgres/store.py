from datetime import datetime
from sqlalchemy import Engine
from sqlalchemy.orm import Query, sessionmaker
from sqlalchemy.exc import IntegrityError

from src.common.current_datetime import ensure_utc
from src.common.exceptions import (
    InvalidTaskException,
    ResourceNotFoundException,
    ResourceType,
)
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
from src.tasks.store.postgres.model import Base, TaskModel

CONSTRAINT_VIOLATION_MESSAGE = "Task violates a time range or field constraint"


class PostgresTaskStore(TaskStore):
    def __init__(self, engine: Engine):
        self.engine = engine
        self.Session = sessionmaker(bind=self.engine)
        Base.metadata.create_all(self.engine)

    @staticmethod
    def _to_task(model: TaskModel) -> Task:
        return Task(
            id=model.id,
            title=model.title,
            start_time=ensure_utc(model.start_time),
            end_time=ensure_utc(model.end_time),
            priority=model.priority,
            status=TaskStatus(model.status),
            owner=model.owner_id,
            created_at=ensure_utc(model.created_at),
            updated_at=ensure_utc(model.updated_at),
        )

    @staticmethod
    def _apply_filters(query: Query, owner_id: str, filters: TaskFilter) -> Query:
        query = query.filter(TaskModel.owner_id == owner_id)
        if filters.priority is not None:
            query = query.filter(TaskModel.priority == filters.priority)
        if filters.status is not None:
            query = query.filter(TaskModel.status == filters.status.value)
        return query

    def create_task(
        self,
        owner_id: str,
        id: str,
        task_input: CreateTaskRequest,
        timestamp: datetime,
    ) -> Task:
        with self.Session() as session:
            model = TaskModel(
                id=id,
                owner_id=owner_id,
                title=task_input.title,
                start_time=task_input.start_time,
                end_time=task_input.end_time,
                priority=task_input.priority,
                status=task_input.status.value,
                created_at=timestamp,
                updated_at=timestamp,
            )
            try:
                session.add(model)
                session.commit()
            except IntegrityError as e:
                session.rollback()
                raise InvalidTaskException(CONSTRAINT_VIOLATION_MESSAGE) from e

            return self._to_task(model)

    def get_task(self, owner_id: str, task_id: str) -> Task:
        with self.Session() as session:
            model = (
                session.query(TaskModel)
                .filter_by(id=task_id, owner_id=owner_id)
                .first()
            )

            if not model:
                raise ResourceNotFoundException(ResourceType.TASK, task_id)

            return self._to_task(model)

    def update_task(
        self,
        owner_id: str,
        task_id: str,
        updates: TaskUpdate,
        timestamp: datetime,
    ) -> Task:
        with self.Session() as session:
            model = (
                session.query(TaskModel)
                .filter_by(id=task_id, owner_id=owner_id)
                .first()
            )

            if not model:
                raise ResourceNotFoundException(ResourceType.TASK, task_id)

            if updates.title is not None:
                model.title = updates.title
            if updates.start_time is not None:
                model.start_time = updates.start_time
            if updates.end_time is not None:
                model.end_time = updates.end_time
            if updates.priority is not None:
                model.priority = updates.priority
            if updates.status is not None:
                model.status = updates.status.value

            model.updated_at = timestamp

            # CHECK constraints apply to the merged row
            try:
                session.commit()
            except IntegrityError as e:
                session.rollback()
                raise InvalidTaskException(CONSTRAINT_VIOLATION_MESSAGE) from e

            return self._to_task(model)

    def delete_task(self, owner_id: str, task_id: str) -> None:
        with self.Session() as session:
            deleted = (
                session.query(TaskModel)
                .filter_by(id=task_id, owner_id=owner_id)
                .delete()
            )

            if not deleted:
                raise ResourceNotFoundException(ResourceType.TASK, task_id)

            session.commit()

    def list_tasks(
        self,
        owner_id: str,
        filters: TaskFilter,
        sort_by: TaskSortField | None,
        limit: int,
        offset: int,
    ) -> list[Task]:
        with self.Session() as session:
            query = self._apply_filters(session.query(TaskModel), owner_id, filters)

            if sort_by == TaskSortField.START_TIME:
                query = query.order_by(TaskModel.start_time)
            elif sort_by == TaskSortField.END_TIME:
                query = query.order_by(TaskModel.end_time)

            # Insertion order, also the tie-breaker for the sort keys above
            query = query.order_by(TaskModel.created_at, TaskModel.id)

            return [
                self._to_task(model) for model in query.offset(offset).limit(limit)
            ]

    def count_tasks(self, owner_id: str, filters: TaskFilter) -> int:
        with self.Session() as session:
            return self._apply_filters(
                session.query(TaskModel), owner_id, filters
            ).count()

    def list_intervals(self, owner_id: str, status: TaskStatus) -> list[TaskInterval]:
        with self.Session() as session:
            rows = (
                session.query(
                    TaskModel.priority, TaskModel.start_time, TaskModel.end_time
                )
                .filter_by(owner_id=owner_id, status=status.value)
                .all()
            )

            return [
                TaskInterval(
                    priority=priority,
                    start_time=ensure_utc(start_time),
                    end_time=ensure_utc(end_time),
                )
                for priority, start_time, end_time in rows
            ]
