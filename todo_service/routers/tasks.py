import logging
import uuid
from datetime import datetime
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Response, status

from ..core.auth import get_current_user, CurrentUser
from ..models.task import TaskStatus
from ..schemas.task import (
    TaskRequest, TaskResponse, TaskSearchCriteria, TaskStatusUpdateRequest
)
from ..services import get_task_service
from ..services.task_service import TaskService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(
    task_data: TaskRequest,
    current_user: CurrentUser = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    """Create a new task for the authenticated user"""
    task = service.create(
        current_user.user_id,
        title=task_data.title,
        status=task_data.status,
        description=task_data.description,
        due_date=task_data.due_date,
    )
    return TaskResponse.model_validate(task)


@router.get("", response_model=List[TaskResponse])
def get_tasks(
    search_term: Optional[str] = Query(None, description="Search in title and description"),
    status_filter: Optional[TaskStatus] = Query(None, alias="status", description="Filter by status"),
    from_date: Optional[datetime] = Query(None, description="Due date range start"),
    to_date: Optional[datetime] = Query(None, description="Due date range end"),
    page: int = Query(0, ge=0),
    size: int = Query(10, ge=1),
    current_user: CurrentUser = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    """Search tasks for the authenticated user"""
    logger.info(
        f"Fetching tasks with filters - searchTerm: {search_term}, status: {status_filter}, "
        f"dateRange: {from_date} to {to_date}"
    )
    criteria = TaskSearchCriteria(
        search_term=search_term,
        status=status_filter,
        from_date=from_date,
        to_date=to_date,
        page=page,
        size=size,
    )
    tasks = service.search(criteria, current_user.user_id)
    return [TaskResponse.model_validate(task) for task in tasks]


@router.get("/status/{task_status}", response_model=List[TaskResponse])
def get_tasks_by_status(
    task_status: TaskStatus,
    current_user: CurrentUser = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    """Get the authenticated user's tasks in one status"""
    tasks = service.get_by_status(task_status, current_user.user_id)
    return [TaskResponse.model_validate(task) for task in tasks]


@router.get("/due-date", response_model=List[TaskResponse])
def get_tasks_by_due_date_range(
    from_date: datetime = Query(..., description="Due date range start"),
    to_date: datetime = Query(..., description="Due date range end"),
    current_user: CurrentUser = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    """Get the authenticated user's tasks due within a date range"""
    tasks = service.get_by_due_date_range(from_date, to_date, current_user.user_id)
    return [TaskResponse.model_validate(task) for task in tasks]


@router.get("/{task_id}", response_model=TaskResponse)
def get_task(
    task_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    """Get a specific task by ID"""
    return TaskResponse.model_validate(service.get_by_id(task_id, current_user.user_id))


@router.put("/{task_id}", response_model=TaskResponse)
def update_task(
    task_id: uuid.UUID,
    task_data: TaskRequest,
    current_user: CurrentUser = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    """Replace a task's title, description, due date and status"""
    task = service.update(
        task_id,
        current_user.user_id,
        title=task_data.title,
        status=task_data.status,
        description=task_data.description,
        due_date=task_data.due_date,
    )
    return TaskResponse.model_validate(task)


@router.patch("/{task_id}/status", response_model=TaskResponse)
def update_task_status(
    task_id: uuid.UUID,
    status_update: TaskStatusUpdateRequest,
    current_user: CurrentUser = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    """Change only the status of a task"""
    task = service.update_status(task_id, current_user.user_id, status_update.status)
    return TaskResponse.model_validate(task)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(
    task_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    """Delete a task"""
    service.delete(task_id, current_user.user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
