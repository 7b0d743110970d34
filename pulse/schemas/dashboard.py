from typing import Dict, Optional
from pydantic import BaseModel


class DashboardStats(BaseModel):
    total_projects: int = 0
    active_projects: int = 0
    completed_projects: int = 0
    total_tasks: int = 0
    completed_tasks: int = 0
    pending_tasks: int = 0
    overdue_tasks: int = 0
    average_progress: float = 0.0
    projects_by_status: Dict[str, int] = {}
    projects_by_priority: Dict[str, int] = {}


class ProjectSummary(BaseModel):
    """A project row as shown on the dashboard project list."""
    id: int
    name: str
    description: Optional[str] = None
    status: str
    priority: str
    progress: int
    task_count: int = 0
    completed_tasks: int = 0
