"""
Dashboard Endpoints Module

Read-only aggregates for the dashboard widgets. Scope matches the project
list: admins see everything, regular users see their own projects.
"""
from typing import List
from fastapi import APIRouter, Depends
from sqlmodel import Session
from pulse.db.session import get_db
from pulse.models.user import User
from pulse.schemas.dashboard import DashboardStats, ProjectSummary
from pulse.services.stats import dashboard_stats, project_summaries
from pulse.api import deps

router = APIRouter()


@router.get("/stats", response_model=DashboardStats)
def read_dashboard_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    """Project and task counts, overdue tasks and average self-reported progress."""
    return dashboard_stats(db, current_user)


@router.get("/projects", response_model=List[ProjectSummary])
def read_project_summaries(
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    """Projects with their task and completed-task counts."""
    return project_summaries(db, current_user)
