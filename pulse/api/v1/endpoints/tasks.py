"""
Task Endpoints Module

This module provides CRUD endpoints for managing tasks. Tasks inherit the
permissions of their project: project owners and admins may read and modify them.
"""
from datetime import datetime, timezone
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select
from pulse.db.session import get_db
from pulse.models.project import Project
from pulse.models.task import Task, TaskCreate, TaskRead, TaskUpdate
from pulse.models.user import User
from pulse.api import deps

router = APIRouter()


def _get_task_for_user(db: Session, task_id: int, current_user: User) -> Task:
    task = db.get(Task, task_id)
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")

    if not current_user.is_privileged:
        project = db.get(Project, task.project_id)
        if not project or project.owner_id != current_user.id:
            raise HTTPException(status_code=403, detail="Not authorized to access this task")
    return task


@router.get("", response_model=List[TaskRead])
def list_tasks(
    skip: int = 0,
    limit: int = 100,
    project_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    """
    Retrieve a paginated list of tasks.

    Admins see all tasks. Regular users see tasks in projects they own.
    """
    statement = select(Task)
    if not current_user.is_privileged:
        owned_project_ids_subquery = select(Project.id).where(Project.owner_id == current_user.id)
        statement = statement.where(Task.project_id.in_(owned_project_ids_subquery))

    # Filter by project if specified
    if project_id is not None:
        statement = statement.where(Task.project_id == project_id)

    statement = statement.order_by(Task.id).offset(skip).limit(limit)
    return db.exec(statement).all()


@router.get("/{task_id}", response_model=TaskRead)
def read_task(
    task_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    """Get a specific task by ID."""
    return _get_task_for_user(db, task_id, current_user)


@router.post("", response_model=TaskRead)
def create_task(
    task_in: TaskCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    """
    Create a new task in a project.

    Only the project owner or an admin can add tasks to a project.
    """
    deps.get_project_for_user(db, task_in.project_id, current_user)

    task = Task.model_validate(task_in)
    db.add(task)
    db.commit()
    db.refresh(task)
    return task


@router.patch("/{task_id}", response_model=TaskRead)
def update_task(
    task_id: int,
    task_update: TaskUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    """
    Update an existing task. Only the fields sent are changed.

    Only project owners or admins can update tasks.
    """
    task = _get_task_for_user(db, task_id, current_user)

    task.sqlmodel_update(task_update.model_dump(exclude_unset=True))
    task.updated_at = datetime.now(timezone.utc).isoformat()

    db.add(task)
    db.commit()
    db.refresh(task)
    return task


@router.delete("/{task_id}")
def delete_task(
    task_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    """
    Delete a task.

    Only project owners or admins can delete tasks.
    """
    task = _get_task_for_user(db, task_id, current_user)

    db.delete(task)
    db.commit()
    return {"status": "success", "detail": "Task deleted"}
