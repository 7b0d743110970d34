"""Dashboard aggregates over the projects a user can see."""
from collections import Counter, defaultdict
from datetime import datetime
from typing import Dict, List, Optional

from sqlmodel import Session, select

from pulse.models.project import Project, ProjectStatus
from pulse.models.task import Task
from pulse.models.user import User
from pulse.schemas.dashboard import DashboardStats, ProjectSummary
from pulse.services.analyzer import compute_metrics


def visible_projects(db: Session, user: User) -> List[Project]:
    """Admins see all projects, regular users see only projects they own."""
    statement = select(Project)
    if not user.is_privileged:
        statement = statement.where(Project.owner_id == user.id)
    return list(db.exec(statement.order_by(Project.id)).all())


def _tasks_by_project(db: Session, project_ids: List[int]) -> Dict[int, List[Task]]:
    grouped = defaultdict(list)
    if project_ids:
        for task in db.exec(select(Task).where(Task.project_id.in_(project_ids))).all():
            grouped[task.project_id].append(task)
    return grouped


def dashboard_stats(db: Session, user: User, now: Optional[datetime] = None) -> DashboardStats:
    projects = visible_projects(db, user)
    tasks = _tasks_by_project(db, [p.id for p in projects])

    stats = DashboardStats(
        total_projects=len(projects),
        projects_by_status=dict(Counter(p.status for p in projects)),
        projects_by_priority=dict(Counter(p.priority for p in projects)),
    )
    stats.active_projects = stats.projects_by_status.get(ProjectStatus.ACTIVE.value, 0)
    stats.completed_projects = stats.projects_by_status.get(ProjectStatus.COMPLETED.value, 0)

    for project in projects:
        metrics = compute_metrics(project, tasks.get(project.id, []), now)
        stats.total_tasks += metrics.total_tasks
        stats.completed_tasks += metrics.completed_tasks
        stats.overdue_tasks += metrics.overdue_tasks

    stats.pending_tasks = stats.total_tasks - stats.completed_tasks
    if projects:
        stats.average_progress = round(sum(p.progress or 0 for p in projects) / len(projects), 1)
    return stats


def project_summaries(db: Session, user: User) -> List[ProjectSummary]:
    projects = visible_projects(db, user)
    tasks = _tasks_by_project(db, [p.id for p in projects])

    summaries = []
    for project in projects:
        metrics = compute_metrics(project, tasks.get(project.id, []))
        summaries.append(ProjectSummary(
            id=project.id,
            name=project.name,
            description=project.description,
            status=project.status,
            priority=project.priority,
            progress=project.progress,
            task_count=metrics.total_tasks,
            completed_tasks=metrics.completed_tasks,
        ))
    return summaries
