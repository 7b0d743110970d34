"""
Project Analysis Service

Runs one analysis request end to end:

1. validate the project id and load the caller's project and its tasks
2. score the project locally (``pulse.services.analyzer``)
3. optionally attach AI provider content (``pulse.services.ai_provider``)
4. upsert the result into ``project_analytics``

Steps 3 and 4 are best effort. Their failures are logged and the locally
computed result is still returned.
"""
import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from pulse.core.config import settings
from pulse.core.errors import DataStoreError, NotFoundError, ValidationError
from pulse.models.analysis import ProjectAnalysis
from pulse.models.project import Project
from pulse.models.task import Task
from pulse.models.user import User
from pulse.schemas.analysis import AnalysisResult
from pulse.services import analyzer
from pulse.services.ai_provider import AIProviderClient, build_analysis_context

logger = logging.getLogger(__name__)

ACCESS_DENIED = "Project not found or access denied"


def parse_project_id(value) -> int:
    """
    Validate a project id received from a request body.

    Accepts positive integers and their string form.

    Raises:
        ValidationError: If the id is missing or not a positive integer
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError("Project ID is required")
    if isinstance(value, bool):
        raise ValidationError("Project ID must be a positive integer")
    if isinstance(value, str):
        value = value.strip()
        if not value.isdigit():
            raise ValidationError("Project ID must be a positive integer")
        value = int(value)
    if not isinstance(value, int) or value <= 0:
        raise ValidationError("Project ID must be a positive integer")
    return value


def load_owned_project(db: Session, project_id: int, user: User) -> Project:
    """
    Fetch a project owned by the user.

    A missing project and a project owned by someone else raise the same
    error, so callers cannot probe for ids they do not own.
    """
    statement = select(Project).where(Project.id == project_id, Project.owner_id == user.id)
    try:
        project = db.exec(statement).first()
    except SQLAlchemyError as e:
        logger.exception("Failed to fetch project %s", project_id)
        raise DataStoreError("Failed to fetch project") from e

    if project is None:
        raise NotFoundError(ACCESS_DENIED)
    return project


def load_tasks(db: Session, project_id: int) -> List[Task]:
    try:
        return list(db.exec(select(Task).where(Task.project_id == project_id).order_by(Task.id)).all())
    except SQLAlchemyError as e:
        logger.exception("Failed to fetch tasks for project %s", project_id)
        raise DataStoreError("Failed to fetch tasks") from e


def save_analysis(db: Session, result: AnalysisResult, user_id: str) -> Optional[ProjectAnalysis]:
    """
    Upsert the analysis for (project, user). Last write wins.

    Returns:
        ProjectAnalysis: The stored row, or None if the write failed (the
        failure is logged and rolled back, never raised)
    """
    values = {
        "performance_score": result.performance_score,
        "efficiency_rating": result.efficiency_rating.value,
        "metrics": result.metrics.model_dump(by_alias=True),
        "insights": result.insight_set().model_dump(),
        "recommendations": result.recommendation_set().model_dump(),
        "analysis_date": result.analysis_date.isoformat(),
    }
    try:
        record = db.exec(
            select(ProjectAnalysis).where(
                ProjectAnalysis.project_id == result.project_id,
                ProjectAnalysis.user_id == user_id,
            )
        ).first()
        if record is None:
            record = ProjectAnalysis(project_id=result.project_id, user_id=user_id, **values)
        else:
            for key, value in values.items():
                setattr(record, key, value)

        db.add(record)
        db.commit()
        db.refresh(record)
        return record
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to store analysis for project %s", result.project_id)
        return None


def run_project_analysis(
    db: Session,
    user: User,
    project_id,
    provider: Optional[AIProviderClient] = None,
    hourly_rate: Optional[float] = None,
) -> AnalysisResult:
    """
    Analyze one of the user's projects and store the result.

    Args:
        db: Database session
        user: Authenticated caller; must own the project
        project_id: Raw project id from the request
        provider: AI provider client (defaults to one built from settings)
        hourly_rate: Cost per tracked hour (defaults to ANALYSIS_HOURLY_RATE)

    Returns:
        AnalysisResult: Local results, plus ``external`` when the provider answered

    Raises:
        ValidationError: Missing or malformed project id
        NotFoundError: Project missing or not owned by the user
        DataStoreError: Project or tasks could not be read
    """
    project_id = parse_project_id(project_id)
    project = load_owned_project(db, project_id, user)
    tasks = load_tasks(db, project_id)

    if hourly_rate is None:
        hourly_rate = settings.ANALYSIS_HOURLY_RATE
    result = analyzer.analyze(project, tasks, hourly_rate=hourly_rate)

    if provider is None:
        provider = AIProviderClient.from_settings()
    if provider.enabled:
        context = build_analysis_context(project, tasks, result.metrics)
        external = provider.try_analyze(context)
        if external is not None:
            result = result.model_copy(update={"external": external})

    save_analysis(db, result, user.id)

    logger.info(
        "Analyzed project %s for user %s: score=%s rating=%s external=%s",
        project_id, user.id, result.performance_score, result.efficiency_rating.value,
        result.has_external,
    )
    return result


def get_stored_analysis(db: Session, project_id: int, user: User) -> ProjectAnalysis:
    """
    Return the user's last stored analysis of a project.

    Raises:
        NotFoundError: If the project is not the user's or was never analyzed
    """
    load_owned_project(db, project_id, user)
    record = db.exec(
        select(ProjectAnalysis).where(
            ProjectAnalysis.project_id == project_id,
            ProjectAnalysis.user_id == user.id,
        )
    ).first()
    if record is None:
        raise NotFoundError("Project has not been analyzed yet")
    return record
