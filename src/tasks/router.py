from fastapi import APIRouter, Depends, Query, status

from src.common.exceptions import (
    ResourceType,
    bad_request_response,
    resource_not_found_response,
    unauthorized_response,
)
from src.common.schemas import MessageResponse
from src.config import Settings, get_settings
from src.tasks.dependencies import get_task_service
from src.tasks.schemas import (
    MAX_PAGE_SIZE,
    MAX_PRIORITY,
    MIN_PRIORITY,
    CreateTaskRequest,
    Task,
    TaskFilter,
    TaskPage,
    TaskSortField,
    TaskStats,
    TaskStatus,
    UpdateTaskRequest,
)
from src.tasks.service import TaskService
from src.users.dependencies import get_current_user
from src.users.schemas import User


router = APIRouter(
    prefix="/tasks",
    tags=["Tasks"],
    responses={**unauthorized_response},
)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_task(
    task_input: CreateTaskRequest,
    user: User = Depends(get_current_user),
    task_service: TaskService = Depends(get_task_service),
) -> Task:
    return task_service.create_task(user.id, task_input)


@router.get("")
def list_tasks(
    priority: int | None = Query(None, ge=MIN_PRIORITY, le=MAX_PRIORITY),
    status: TaskStatus | None = None,
    sort_by: TaskSortField | None = Query(None, alias="sortBy"),
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1, le=MAX_PAGE_SIZE),
    user: User = Depends(get_current_user),
    settings: Settings = Depends(get_settings),
    task_service: TaskService = Depends(get_task_service),
) -> TaskPage:
    return task_service.list_tasks(
        user.id,
        filters=TaskFilter(priority=priority, status=status),
        sort_by=sort_by,
        page=page,
        limit=limit or settings.DEFAULT_PAGE_SIZE,
    )


@router.get("/stats")
def get_task_stats(
    user: User = Depends(get_current_user),
    task_service: TaskService = Depends(get_task_service),
) -> TaskStats:
    return task_service.get_task_stats(user.id)


@router.get("/{task_id}", responses={**resource_not_found_response(ResourceType.TASK)})
def get_task(
    task_id: str,
    user: User = Depends(get_current_user),
    task_service: TaskService = Depends(get_task_service),
) -> Task:
    return task_service.get_task(user.id, task_id)


@router.patch(
    "/{task_id}",
    responses={
        **resource_not_found_response(ResourceType.TASK),
        **bad_request_response("End time must be greater than or equal to start time"),
    },
)
def update_task(
    task_id: str,
    task_input: UpdateTaskRequest,
    user: User = Depends(get_current_user),
    task_service: TaskService = Depends(get_task_service),
) -> Task:
    return task_service.update_task(user.id, task_id, task_input)


@router.delete(
    "/{task_id}", responses={**resource_not_found_response(ResourceType.TASK)}
)
def delete_task(
    task_id: str,
    user: User = Depends(get_current_user),
    task_service: TaskService = Depends(get_task_service),
) -> MessageResponse:
    task_service.delete_task(user.id, task_id)
    return MessageResponse(message="Task deleted")
