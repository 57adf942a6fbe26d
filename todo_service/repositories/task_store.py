"""
Task persistence.

Every query except ``find_by_id`` is scoped to a single owner.
"""
import uuid
from datetime import datetime
from typing import List, Optional

from sqlalchemy import select, or_
from sqlalchemy.orm import Session

from ..models.task import Task, TaskStatus


def _like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class TaskStore:
    """SQLAlchemy-backed store for Task records."""

    def __init__(self, db: Session):
        self._db = db

    def save(self, task: Task) -> Task:
        self._db.add(task)
        self._db.commit()
        self._db.refresh(task)
        return task

    def find_by_id(self, task_id: uuid.UUID, for_update: bool = False) -> Optional[Task]:
        query = select(Task).where(Task.id == task_id)
        if for_update:
            # Row lock held until save()/delete() commits
            query = query.with_for_update()
        return self._db.execute(query).scalars().first()

    def find_by_owner(self, owner_id: uuid.UUID) -> List[Task]:
        query = (
            select(Task)
            .where(Task.owner_id == owner_id)
            .order_by(Task.created_at)
        )
        return list(self._db.execute(query).scalars())

    def find_by_owner_and_status(self, owner_id: uuid.UUID, status: TaskStatus) -> List[Task]:
        query = (
            select(Task)
            .where(Task.owner_id == owner_id, Task.status == TaskStatus(status).value)
            .order_by(Task.created_at)
        )
        return list(self._db.execute(query).scalars())

    def find_by_owner_and_text_match(self, owner_id: uuid.UUID, term: str) -> List[Task]:
        """Case-insensitive substring match on title or description."""
        pattern = _like_pattern(term)
        query = (
            select(Task)
            .where(
                Task.owner_id == owner_id,
                or_(
                    Task.title.ilike(pattern, escape="\\"),
                    Task.description.ilike(pattern, escape="\\"),
                ),
            )
            .order_by(Task.created_at)
        )
        return list(self._db.execute(query).scalars())

    def find_by_owner_and_due_range(
        self, owner_id: uuid.UUID, from_date: datetime, to_date: datetime
    ) -> List[Task]:
        """Tasks due within [from_date, to_date], both ends inclusive."""
        query = (
            select(Task)
            .where(
                Task.owner_id == owner_id,
                Task.due_date >= from_date,
                Task.due_date <= to_date,
            )
            .order_by(Task.due_date)
        )
        return list(self._db.execute(query).scalars())

    def delete(self, task: Task) -> None:
        self._db.delete(task)
        self._db.commit()
