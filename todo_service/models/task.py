import enum
import uuid
from sqlalchemy import Column, String, Text, DateTime, Uuid
from ..core.database import Base


class TaskStatus(str, enum.Enum):
    """Task status enumeration"""
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


class Task(Base):
    """Task model for database"""
    __tablename__ = "tasks"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    title = Column(String(100), nullable=False, index=True)
    description = Column(Text, nullable=True)

    status = Column(
        String(20),
        default=TaskStatus.PENDING.value,
        nullable=False,
        index=True
    )

    # Owning user
    owner_id = Column(Uuid, nullable=False, index=True)

    # Naive UTC timestamps, assigned by TaskService
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)
    due_date = Column(DateTime, nullable=True, index=True)

    def __repr__(self):
        return f"<Task(id={self.id}, title='{self.title}', status='{self.status}')>"
