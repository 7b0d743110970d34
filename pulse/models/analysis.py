"""
Project Analysis Model Module

Stored copy of the latest health analysis per (project, user). The row is a
cache of a derived view: it is fully rewritten each time the project is
analyzed and never read back by the analyzer itself.
"""
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field, JSON, Column


class ProjectAnalysis(SQLModel, table=True):
    """
    Latest analysis of a project, one row per requesting user.

    Attributes:
        project_id: Analyzed project
        user_id: User who requested the analysis
        performance_score: Health score 0-100
        efficiency_rating: "poor", "average", "good" or "excellent"
        metrics: Derived metrics (camelCase keys, as returned by the API)
        insights: {"local": [...], "external": <provider payload or null>}
        recommendations: {"local": [...], "external": <provider payload or null>}
        analysis_date: ISO timestamp of the computation
    """
    __tablename__ = "project_analytics"
    __table_args__ = (UniqueConstraint("project_id", "user_id", name="uq_project_analytics_project_user"),)

    id: Optional[int] = Field(default=None, primary_key=True)

    project_id: int = Field(foreign_key="projects.id", index=True)
    user_id: str = Field(foreign_key="users.id")

    performance_score: int
    efficiency_rating: str

    # JSON columns - SQLite and MySQL both handle these natively
    metrics: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))
    insights: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))
    recommendations: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))

    analysis_date: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
