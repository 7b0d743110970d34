"""
Task Model Module

This module defines the Task model. Every task belongs to one project, and task
access follows the ownership of that project.
"""
from datetime import date, datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import ConfigDict
from sqlmodel import SQLModel, Field

from pulse.models.project import Priority


class TaskStatus(str, Enum):
    """
    Known task statuses.

    Only COMPLETED carries meaning for analysis; other workflow states are
    accepted as free-form strings.
    """
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class TaskBase(SQLModel):
    """
    Base Task model containing common fields.
    """
    # Basic task information
    title: str = Field(nullable=False)
    description: Optional[str] = None

    # Priority and status
    priority: str = Field(default=Priority.MEDIUM.value)
    status: str = Field(default=TaskStatus.PENDING.value)

    due_date: Optional[date] = None

    # Effort tracking, used for estimation variance and budget checks
    estimated_hours: Optional[float] = Field(default=None, ge=0)
    actual_hours: Optional[float] = Field(default=None, ge=0)

    # Project association
    project_id: int = Field(foreign_key="projects.id", index=True)


class Task(TaskBase, table=True):
    """
    Task table model.
    """
    __tablename__ = "tasks"

    # Primary key
    id: Optional[int] = Field(default=None, primary_key=True)

    # Audit timestamps
    created_at: Optional[str] = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    updated_at: Optional[str] = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())


class TaskCreate(TaskBase):
    """Schema for creating a task."""
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    priority: Priority = Priority.MEDIUM


class TaskUpdate(SQLModel):
    """Schema for partial task updates. Moving a task to another project is not allowed."""
    model_config = ConfigDict(use_enum_values=True)

    title: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[Priority] = None
    status: Optional[str] = None
    due_date: Optional[date] = None
    estimated_hours: Optional[float] = Field(default=None, ge=0)
    actual_hours: Optional[float] = Field(default=None, ge=0)


class TaskRead(TaskBase):
    """Schema for reading basic task data."""
    id: int
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
