"""
Analysis Schemas Module

Value types produced by the project health analyzer and the API shapes built
from them. API-facing models serialize with camelCase keys (``progressRate``,
``performanceScore``...) and accept either spelling on input.
"""
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class EfficiencyRating(str, Enum):
    POOR = "poor"
    AVERAGE = "average"
    GOOD = "good"
    EXCELLENT = "excellent"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AnalysisMetrics(CamelModel):
    """Metrics derived from a project and its tasks."""
    total_tasks: int = 0
    completed_tasks: int = 0
    overdue_tasks: int = 0
    progress_rate: int = 0
    is_overdue: bool = False
    hours_variance: int = 0
    total_estimated: float = 0
    total_actual: float = 0


class ExternalAnalysis(BaseModel):
    """
    Opaque content returned by the AI analysis provider.

    Kept beside the local results, never merged into them, so callers can tell
    which text came from which source.
    """
    insights: Optional[Any] = None
    recommendations: Optional[Any] = None


class AnalysisResult(BaseModel):
    """Complete outcome of analyzing one project."""
    project_id: int
    performance_score: int = Field(ge=0, le=100)
    efficiency_rating: EfficiencyRating
    metrics: AnalysisMetrics
    insights: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    external: Optional[ExternalAnalysis] = None
    analysis_date: datetime

    @property
    def has_external(self) -> bool:
        return self.external is not None

    def insight_set(self) -> "InsightSet":
        return InsightSet(
            local=list(self.insights),
            external=self.external.insights if self.external else None,
        )

    def recommendation_set(self) -> "InsightSet":
        return InsightSet(
            local=list(self.recommendations),
            external=self.external.recommendations if self.external else None,
        )


class InsightSet(BaseModel):
    local: List[str] = Field(default_factory=list)
    external: Optional[Any] = None


class AnalyzeRequest(CamelModel):
    # Left untyped so a bad id yields the analysis error body, not a 422
    project_id: Optional[Any] = None


class AnalysisResponse(CamelModel):
    """Body returned by ``POST /analyze``."""
    success: bool = True
    project_id: int
    performance_score: int
    efficiency_rating: EfficiencyRating
    insights: InsightSet
    recommendations: InsightSet
    metrics: AnalysisMetrics

    @classmethod
    def from_result(cls, result: AnalysisResult) -> "AnalysisResponse":
        return cls(
            project_id=result.project_id,
            performance_score=result.performance_score,
            efficiency_rating=result.efficiency_rating,
            insights=result.insight_set(),
            recommendations=result.recommendation_set(),
            metrics=result.metrics,
        )


class ErrorResponse(BaseModel):
    success: bool = False
    error: str


class StoredAnalysisRead(CamelModel):
    """The last persisted analysis of a project."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    project_id: int
    performance_score: int
    efficiency_rating: EfficiencyRating
    metrics: Dict[str, Any] = Field(default_factory=dict)
    insights: Dict[str, Any] = Field(default_factory=dict)
    recommendations: Dict[str, Any] = Field(default_factory=dict)
    analysis_date: str
