"""
Project Model Module

This module defines the Project model along with its status and priority
enumerations and the request/response schemas used by the project endpoints.
"""
from datetime import date, datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import ConfigDict
from sqlmodel import SQLModel, Field


class ProjectStatus(str, Enum):
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Priority(str, Enum):
    """Priority levels shared by projects and tasks."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class ProjectBase(SQLModel):
    """
    Base Project model containing the user-editable fields.

    Attributes:
        name: Project name/title (required)
        description: Detailed project description
        status: One of "active", "paused", "completed", "cancelled"
        priority: One of "low", "medium", "high", "urgent"
        start_date: Planned start date
        end_date: Planned end date; a project past this date is overdue
        budget: Total project budget as a money amount
        progress: Self-reported progress percentage (0-100)
    """
    name: str = Field(nullable=False)
    description: Optional[str] = None

    # Stored as plain strings; the Create/Update schemas restrict the values
    status: str = Field(default=ProjectStatus.ACTIVE.value)
    priority: str = Field(default=Priority.MEDIUM.value)

    start_date: Optional[date] = None
    end_date: Optional[date] = None

    budget: Optional[float] = None
    progress: int = Field(default=0, ge=0, le=100)


class Project(ProjectBase, table=True):
    """
    Project table model.

    Projects have ownership and permission controls:
    - Admins and super_admins can see and modify all projects
    - Regular users can only see and modify projects they own (owner_id matches their user ID)
    """
    __tablename__ = "projects"

    # Primary key
    id: Optional[int] = Field(default=None, primary_key=True)

    owner_id: Optional[str] = Field(default=None, foreign_key="users.id", index=True)

    # Audit timestamps
    created_at: Optional[str] = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    updated_at: Optional[str] = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())


class ProjectCreate(ProjectBase):
    """Schema for creating a project. Owner defaults to the caller."""
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    status: ProjectStatus = ProjectStatus.ACTIVE
    priority: Priority = Priority.MEDIUM
    owner_id: Optional[str] = None


class ProjectUpdate(SQLModel):
    """Schema for partial project updates; only fields sent are applied."""
    model_config = ConfigDict(use_enum_values=True)

    name: Optional[str] = None
    description: Optional[str] = None
    status: Optional[ProjectStatus] = None
    priority: Optional[Priority] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    budget: Optional[float] = None
    progress: Optional[int] = Field(default=None, ge=0, le=100)


class ProjectRead(ProjectBase):
    """Schema for reading project data."""
    id: int
    owner_id: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
