"""
Analysis Endpoints Module

On-demand project health analysis. Failures are answered with
``{"success": false, "error": ...}`` instead of FastAPI's ``detail`` body.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlmodel import Session

from pulse.api import deps
from pulse.api.errors import ErrorBodyRoute, error_body
from pulse.core.errors import PulseError
from pulse.db.session import get_db
from pulse.models.user import User
from pulse.schemas.analysis import AnalysisResponse, AnalyzeRequest, ErrorResponse
from pulse.services.ai_provider import AIProviderClient
from pulse.services.analysis import run_project_analysis

logger = logging.getLogger(__name__)

router = APIRouter(route_class=ErrorBodyRoute)


def get_ai_provider() -> AIProviderClient:
    """Provider client dependency; tests override it to inject fakes."""
    return AIProviderClient.from_settings()


@router.post(
    "",
    response_model=AnalysisResponse,
    responses={code: {"model": ErrorResponse} for code in (400, 401, 404, 500)},
)
def analyze_project(
    analyze_in: Optional[AnalyzeRequest] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
    provider: AIProviderClient = Depends(get_ai_provider),
):
    """
    Analyze one of the caller's projects.

    Computes metrics, a performance score and an efficiency rating, local
    insights and recommendations, and (when an AI provider key is configured)
    provider content under the ``external`` keys. The result is also stored
    as the caller's latest analysis of the project.

    Args:
        analyze_in: Body of the form ``{"projectId": <id>}``
        db: Database session
        current_user: Currently authenticated user (must own the project)

    Returns:
        AnalysisResponse: Score, rating, metrics, insights and recommendations

    Errors (``{"success": false, "error": ...}``):
        400: Missing body, non-object body, or missing or invalid project id
        401: Not authenticated
        404: Project not found or not owned by the caller
        500: Project data could not be read
    """
    project_id = analyze_in.project_id if analyze_in is not None else None
    try:
        result = run_project_analysis(db, current_user, project_id, provider=provider)
    except PulseError:
        raise
    except Exception:
        logger.exception("Unexpected error analyzing project %r", project_id)
        return JSONResponse(status_code=500, content=error_body("Analysis failed"))

    return AnalysisResponse.from_result(result)
