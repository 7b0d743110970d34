"""
Project Endpoints Module

This module provides CRUD endpoints for managing projects. Projects have ownership
controls - users can only see and modify their own projects unless they are administrators.
"""
from datetime import datetime, timezone
from typing import List
from fastapi import APIRouter, Depends
from sqlmodel import Session, select
from pulse.db.session import get_db
from pulse.models.project import Project, ProjectCreate, ProjectRead, ProjectUpdate
from pulse.models.task import Task
from pulse.models.analysis import ProjectAnalysis
from pulse.models.user import User
from pulse.schemas.analysis import StoredAnalysisRead
from pulse.services.analysis import get_stored_analysis
from pulse.api import deps

router = APIRouter()


@router.get("", response_model=List[ProjectRead])
def list_projects(
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    """
    Retrieve a paginated list of projects.

    Admins see all projects, regular users see only projects they own.
    """
    statement = select(Project)
    if not current_user.is_privileged:
        statement = statement.where(Project.owner_id == current_user.id)

    projects = db.exec(statement.order_by(Project.id).offset(skip).limit(limit)).all()
    return projects


@router.get("/{project_id}", response_model=ProjectRead)
def read_project(
    project_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    """
    Get a specific project by ID.

    Users can only view projects they own unless they are administrators.
    """
    return deps.get_project_for_user(db, project_id, current_user)


@router.get("/{project_id}/analysis", response_model=StoredAnalysisRead)
def read_project_analysis(
    project_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    """
    Get the caller's most recent stored analysis of a project.

    Run ``POST /analyze`` to compute a fresh one. Answers 404 with the
    ``{"success": false, "error": ...}`` body if the project is not the
    caller's or has never been analyzed.
    """
    return get_stored_analysis(db, project_id, current_user)


@router.post("", response_model=ProjectRead)
def create_project(
    project_in: ProjectCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    """
    Create a new project.

    Regular users always own the projects they create. Admins may set
    owner_id to create a project on someone else's behalf.
    """
    project = Project.model_validate(project_in)
    if not project.owner_id or not current_user.is_privileged:
        project.owner_id = current_user.id

    db.add(project)
    db.commit()
    db.refresh(project)
    return project


@router.patch("/{project_id}", response_model=ProjectRead)
def update_project(
    project_id: int,
    project_update: ProjectUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    """
    Update an existing project. Only the fields sent are changed.

    Users can only update projects they own unless they are administrators.
    """
    project = deps.get_project_for_user(db, project_id, current_user)

    project.sqlmodel_update(project_update.model_dump(exclude_unset=True))
    project.updated_at = datetime.now(timezone.utc).isoformat()

    db.add(project)
    db.commit()
    db.refresh(project)
    return project


@router.delete("/{project_id}")
def delete_project(
    project_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    """
    Delete a project together with its tasks and stored analyses.

    Users can only delete projects they own unless they are administrators.
    """
    project = deps.get_project_for_user(db, project_id, current_user)

    # Delete dependents first (foreign key constraints)
    for task in db.exec(select(Task).where(Task.project_id == project_id)).all():
        db.delete(task)
    for record in db.exec(select(ProjectAnalysis).where(ProjectAnalysis.project_id == project_id)).all():
        db.delete(record)

    db.delete(project)
    db.commit()
    return {"status": "success", "detail": "Project deleted"}
