"""
Task CRUD and search for a single caller.

Every operation takes the caller's user id explicitly. Lookups by id check
existence first and ownership second, so a caller probing an id that does
not exist always gets NotFoundError.
"""
import logging
import uuid
from datetime import datetime
from typing import List, Optional

from ..core.auth import verify_ownership
from ..core.exceptions import AccessDeniedError, NotFoundError, ValidationError
from ..models.task import Task, TaskStatus
from ..repositories.task_store import TaskStore
from ..schemas.task import TaskSearchCriteria
from ..utils.timeutils import to_utc_naive, utcnow

logger = logging.getLogger(__name__)

TITLE_MIN_LENGTH = 3
TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500


def validate_task_fields(title: Optional[str], description: Optional[str]) -> None:
    if title is None or not title.strip():
        raise ValidationError("title", "Title is required")
    if not TITLE_MIN_LENGTH <= len(title) <= TITLE_MAX_LENGTH:
        raise ValidationError(
            "title",
            f"Title must be between {TITLE_MIN_LENGTH} and {TITLE_MAX_LENGTH} characters",
        )
    if description is not None and len(description) > DESCRIPTION_MAX_LENGTH:
        raise ValidationError(
            "description",
            f"Description cannot exceed {DESCRIPTION_MAX_LENGTH} characters",
        )


def coerce_status(status) -> TaskStatus:
    if status is None:
        raise ValidationError("status", "Status is required")
    try:
        return TaskStatus(status)
    except ValueError:
        raise ValidationError("status", f"Unknown status: {status}")


class TaskService:
    def __init__(self, store: TaskStore):
        self.store = store

    def create(
        self,
        caller_id: uuid.UUID,
        title: str,
        status: TaskStatus,
        description: Optional[str] = None,
        due_date: Optional[datetime] = None,
    ) -> Task:
        logger.info(f"Creating new task for user: {caller_id}")
        validate_task_fields(title, description)
        status = coerce_status(status)

        now = utcnow()
        task = Task(
            id=uuid.uuid4(),
            title=title,
            description=description,
            due_date=to_utc_naive(due_date),
            status=status.value,
            owner_id=caller_id,
            created_at=now,
            updated_at=now,
        )
        task = self.store.save(task)
        logger.info(f"Task created with ID: {task.id}")
        return task

    def _get_owned(self, task_id: uuid.UUID, caller_id: uuid.UUID, for_update: bool = False) -> Task:
        task = self.store.find_by_id(task_id, for_update=for_update)
        if task is None:
            logger.warning(f"Task not found with ID: {task_id}")
            raise NotFoundError("Task", task_id)

        decision = verify_ownership(task.owner_id, caller_id)
        if not decision.allowed:
            logger.warning(f"User {caller_id} tried to access task {task_id} owned by {task.owner_id}")
            raise AccessDeniedError(decision.reason)
        return task

    def get_by_id(self, task_id: uuid.UUID, caller_id: uuid.UUID) -> Task:
        logger.info(f"Fetching task with ID: {task_id} for user: {caller_id}")
        return self._get_owned(task_id, caller_id)

    def update(
        self,
        task_id: uuid.UUID,
        caller_id: uuid.UUID,
        title: str,
        status: TaskStatus,
        description: Optional[str] = None,
        due_date: Optional[datetime] = None,
    ) -> Task:
        logger.info(f"Updating task with ID: {task_id} for user: {caller_id}")
        validate_task_fields(title, description)
        status = coerce_status(status)
        task = self._get_owned(task_id, caller_id, for_update=True)

        task.title = title
        task.description = description
        task.due_date = to_utc_naive(due_date)
        task.status = status.value
        task.updated_at = utcnow()

        task = self.store.save(task)
        logger.info(f"Task updated: {task.id}")
        return task

    def update_status(self, task_id: uuid.UUID, caller_id: uuid.UUID, status: TaskStatus) -> Task:
        logger.info(f"Updating status of task with ID: {task_id} to {status} for user: {caller_id}")
        status = coerce_status(status)
        task = self._get_owned(task_id, caller_id, for_update=True)
        task.status = status.value
        task.updated_at = utcnow()

        task = self.store.save(task)
        logger.info(f"Task status updated: {task.id}")
        return task

    def delete(self, task_id: uuid.UUID, caller_id: uuid.UUID) -> None:
        logger.info(f"Deleting task with ID: {task_id} for user: {caller_id}")
        task = self._get_owned(task_id, caller_id, for_update=True)
        self.store.delete(task)
        logger.info(f"Task deleted: {task_id}")

    def search(self, criteria: TaskSearchCriteria, caller_id: uuid.UUID) -> List[Task]:
        """
        Run exactly one filter, picked in this order:

        1. non-empty ``search_term``: substring match on title or description
        2. ``status``: exact status match
        3. ``from_date`` and ``to_date``: inclusive due-date range
        4. otherwise: every task the caller owns

        Filters below the chosen one are ignored.
        """
        logger.info(f"Searching tasks for user: {caller_id} with criteria: {criteria}")

        if criteria.search_term:
            tasks = self.store.find_by_owner_and_text_match(caller_id, criteria.search_term)
        elif criteria.status is not None:
            tasks = self.store.find_by_owner_and_status(caller_id, criteria.status)
        elif criteria.from_date is not None and criteria.to_date is not None:
            tasks = self.store.find_by_owner_and_due_range(
                caller_id, to_utc_naive(criteria.from_date), to_utc_naive(criteria.to_date)
            )
        else:
            tasks = self.store.find_by_owner(caller_id)

        logger.info(f"Found {len(tasks)} tasks matching criteria for user: {caller_id}")
        return tasks

    def get_all(self, caller_id: uuid.UUID) -> List[Task]:
        logger.info(f"Fetching all tasks for user: {caller_id}")
        return self.store.find_by_owner(caller_id)

    def get_by_status(self, status: TaskStatus, caller_id: uuid.UUID) -> List[Task]:
        logger.info(f"Fetching tasks with status: {status} for user: {caller_id}")
        tasks = self.store.find_by_owner_and_status(caller_id, coerce_status(status))
        logger.info(f"Found {len(tasks)} tasks with status {status} for user: {caller_id}")
        return tasks

    def get_by_due_date_range(
        self, from_date: datetime, to_date: datetime, caller_id: uuid.UUID
    ) -> List[Task]:
        logger.info(f"Fetching tasks with due date between: {from_date} and {to_date} for user: {caller_id}")
        tasks = self.store.find_by_owner_and_due_range(
            caller_id, to_utc_naive(from_date), to_utc_naive(to_date)
        )
        logger.info(f"Found {len(tasks)} tasks with due date in range for user: {caller_id}")
        return tasks
