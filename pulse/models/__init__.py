from .user import User, UserRole
from .project import Project, ProjectStatus, Priority
from .task import Task, TaskStatus
from .analysis import ProjectAnalysis

__all__ = [
    "User", "UserRole",
    "Project", "ProjectStatus", "Priority",
    "Task", "TaskStatus",
    "ProjectAnalysis",
]
