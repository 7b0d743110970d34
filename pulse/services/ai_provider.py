"""
AI Analysis Provider Client

Optional enrichment for project analyses. When an API key is configured the
analysis context is posted to the provider's ``/v1/analyze`` endpoint; its
``insights`` and ``recommendations`` are handed back as an ``ExternalAnalysis``.
The provider is best effort: every failure is logged and reported as "no
external content", never raised to the caller.
"""
import logging
from typing import Any, Dict, Optional, Sequence

import requests

from pulse.core.config import settings
from pulse.core.errors import ProviderError
from pulse.schemas.analysis import AnalysisMetrics, ExternalAnalysis

logger = logging.getLogger(__name__)


def _iso(value) -> Optional[str]:
    return value.isoformat() if hasattr(value, "isoformat") else value


def build_analysis_context(project, tasks: Sequence, metrics: AnalysisMetrics) -> Dict[str, Any]:
    """
    Build the JSON-ready payload describing a project for the provider.

    Args:
        project: The analyzed project
        tasks: The project's tasks
        metrics: Metrics already computed by the analyzer

    Returns:
        dict: ``{"project": {...}, "metrics": {...}, "tasks": [...]}`` with camelCase keys
    """
    return {
        "project": {
            "name": project.name,
            "description": project.description,
            "status": project.status,
            "priority": project.priority,
            "startDate": _iso(project.start_date),
            "endDate": _iso(project.end_date),
            "progress": project.progress,
            "budget": project.budget,
        },
        "metrics": metrics.model_dump(by_alias=True),
        "tasks": [
            {
                "title": task.title,
                "status": task.status,
                "priority": task.priority,
                "dueDate": _iso(task.due_date),
                "estimatedHours": task.estimated_hours,
                "actualHours": task.actual_hours,
            }
            for task in tasks
        ],
    }


class AIProviderClient:
    """
    Thin HTTP client for the external analysis provider.

    Usage:
        client = AIProviderClient.from_settings()
        external = client.try_analyze(context)  # None on any failure
    """

    def __init__(self, api_key: Optional[str], base_url: str, timeout: float = 10.0,
                 session: Optional[requests.Session] = None):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session

    @classmethod
    def from_settings(cls) -> "AIProviderClient":
        return cls(
            api_key=settings.AI_PROVIDER_API_KEY,
            base_url=settings.AI_PROVIDER_URL,
            timeout=settings.AI_PROVIDER_TIMEOUT,
        )

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    @property
    def analyze_url(self) -> str:
        return f"{self.base_url}/v1/analyze"

    def analyze(self, context: Dict[str, Any]) -> ExternalAnalysis:
        """
        Request a comprehensive analysis of the given context.

        Raises:
            ProviderError: If the provider is not configured, unreachable, times out,
                answers with a non-2xx status, or returns something other than a JSON object
        """
        if not self.enabled:
            raise ProviderError("AI provider API key is not configured")

        body = {
            "type": "project_analysis",
            "data": context,
            "analysis_type": "comprehensive",
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        post = self.session.post if self.session is not None else requests.post

        try:
            response = post(self.analyze_url, json=body, headers=headers, timeout=self.timeout)
        except requests.Timeout as e:
            raise ProviderError(f"AI provider timed out after {self.timeout}s") from e
        except requests.RequestException as e:
            raise ProviderError(f"AI provider request failed: {e}") from e

        if not 200 <= response.status_code < 300:
            raise ProviderError(f"AI provider returned HTTP {response.status_code}")

        try:
            payload = response.json()
        except ValueError as e:
            raise ProviderError("AI provider returned a non-JSON body") from e

        if not isinstance(payload, dict):
            raise ProviderError("AI provider returned an unexpected payload")

        return ExternalAnalysis(
            insights=payload.get("insights") or None,
            recommendations=payload.get("recommendations") or None,
        )

    def try_analyze(self, context: Dict[str, Any]) -> Optional[ExternalAnalysis]:
        """Like ``analyze`` but returns None instead of raising."""
        if not self.enabled:
            return None

        logger.info("Requesting external analysis from %s", self.analyze_url)
        try:
            external = self.analyze(context)
        except ProviderError as e:
            logger.warning("External analysis unavailable: %s", e.message)
            return None

        logger.info("External analysis received")
        return external
