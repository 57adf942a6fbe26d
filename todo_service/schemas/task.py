"""
Pydantic schemas for tasks.
"""
import uuid
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from ..models.task import TaskStatus


class TaskRequest(BaseModel):
    """Schema for creating or replacing a task"""
    title: str = Field(..., min_length=3, max_length=100, description="Task title")
    description: Optional[str] = Field(None, max_length=500, description="Task description")
    due_date: Optional[datetime] = Field(None, description="Task due date")
    status: TaskStatus = Field(..., description="Task status")


class TaskStatusUpdateRequest(BaseModel):
    """Schema for changing only the status of a task"""
    status: TaskStatus = Field(..., description="New task status")


class TaskResponse(BaseModel):
    """Schema for task response"""
    id: uuid.UUID = Field(..., description="Task ID")
    title: str = Field(..., description="Task title")
    description: Optional[str] = Field(None, description="Task description")
    due_date: Optional[datetime] = Field(None, description="Task due date")
    status: TaskStatus = Field(..., description="Task status")
    created_at: datetime = Field(..., description="Task creation timestamp")
    updated_at: datetime = Field(..., description="Task update timestamp")

    class Config:
        from_attributes = True


class TaskSearchCriteria(BaseModel):
    """Filters for a single search call. Only one filter branch applies."""
    search_term: Optional[str] = None
    status: Optional[TaskStatus] = None
    from_date: Optional[datetime] = None
    to_date: Optional[datetime] = None
    # Accepted from clients but not applied to queries
    page: int = 0
    size: int = 10
