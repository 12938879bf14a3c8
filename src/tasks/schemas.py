from datetime import datetime
from enum import Enum
from typing import Any
from pydantic import BaseModel, Field, field_validator, model_validator

from src.common.current_datetime import ensure_utc
from src.common.schemas import CamelModel


class TaskStatus(str, Enum):
    PENDING = "pending"
    FINISHED = "finished"


class TaskSortField(str, Enum):
    START_TIME = "startTime"
    END_TIME = "endTime"


MIN_PRIORITY = 1
MAX_PRIORITY = 5
MAX_PAGE_SIZE = 100


def reject_numeric_datetime(value: Any) -> Any:
    # Times are ISO-8601 strings on the wire, never epoch numbers
    if isinstance(value, (int, float)):
        raise ValueError("Datetime must be an ISO-8601 string")
    return value


class Task(CamelModel):
    id: str
    title: str
    start_time: datetime
    end_time: datetime
    priority: int
    status: TaskStatus
    owner: str
    created_at: datetime
    updated_at: datetime


class CreateTaskRequest(CamelModel):
    title: str = Field(..., min_length=1)
    start_time: datetime
    end_time: datetime
    priority: int = Field(..., ge=MIN_PRIORITY, le=MAX_PRIORITY, strict=True)
    status: TaskStatus = TaskStatus.PENDING

    @field_validator("title", mode="before")
    def strip_title(cls, value: Any):
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("start_time", "end_time", mode="before")
    def reject_unix_timestamps(cls, value: Any):
        return reject_numeric_datetime(value)

    @field_validator("start_time", "end_time")
    def normalize_timezone(cls, value: datetime):
        return ensure_utc(value)

    @model_validator(mode="after")
    def validate_time_range(self):
        if self.end_time < self.start_time:
            raise ValueError("End time must be greater than or equal to start time")
        return self


class UpdateTaskRequest(CamelModel):
    title: str | None = Field(None, min_length=1)
    start_time: datetime | None = None
    end_time: datetime | None = None
    priority: int | None = Field(None, ge=MIN_PRIORITY, le=MAX_PRIORITY, strict=True)
    status: TaskStatus | None = None

    @field_validator("title", mode="before")
    def strip_title(cls, value: Any):
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("start_time", "end_time", mode="before")
    def reject_unix_timestamps(cls, value: Any):
        return reject_numeric_datetime(value)

    @field_validator("start_time", "end_time")
    def normalize_timezone(cls, value: datetime | None):
        return ensure_utc(value) if value is not None else None

    @model_validator(mode="after")
    def reject_explicit_nulls(self):
        nulls = [
            name
            for name in self.model_fields_set
            if getattr(self, name) is None
        ]
        if nulls:
            raise ValueError(f"Fields cannot be null: {', '.join(sorted(nulls))}")
        return self


class TaskUpdate(BaseModel):
    """Fields to write onto a stored task, already merged and validated."""

    title: str | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    priority: int | None = None
    status: TaskStatus | None = None


class TaskFilter(BaseModel):
    priority: int | None = None
    status: TaskStatus | None = None

    def matches(self, task: Task) -> bool:
        if self.priority is not None and task.priority != self.priority:
            return False
        if self.status is not None and task.status != self.status:
            return False
        return True


class TaskPage(CamelModel):
    tasks: list[Task]
    total_pages: int
    current_page: int


class TaskInterval(BaseModel):
    priority: int
    start_time: datetime
    end_time: datetime


class StatusStats(BaseModel):
    count: int
    percentage: float


class TaskStatusStats(BaseModel):
    completed: StatusStats
    pending: StatusStats


class PriorityStats(CamelModel):
    priority: int = Field(..., alias="_id")
    time_lapsed: float
    balance_time: float


class TaskStats(CamelModel):
    total_tasks: int
    task_status: TaskStatusStats
    pending_tasks_by_priority: list[PriorityStats]
    average_completion_time: float
