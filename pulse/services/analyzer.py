"""
Project Health Analyzer

Turns a project and its tasks into a performance score, an efficiency rating,
and ordered lists of insights and recommendations. Everything here is a pure
function of its inputs (plus the clock, which callers may pin with ``now``);
loading records, calling the AI provider and persisting results happen in
``pulse.services.analysis``.

Scoring works in two passes:

1. ``SCORE_BRACKETS`` is an ordered list matched against the progress rate.
   The first matching bracket sets the score and rating and may contribute
   one insight/recommendation pair. No match keeps ``DEFAULT_BRACKET``.
2. Every check in ``GUARD_CHECKS`` runs independently and may append one more
   pair. Guards never touch the score or rating.
"""
import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from typing import Callable, Iterable, Optional, Sequence, Tuple

from pulse.core.errors import ValidationError
from pulse.models.task import TaskStatus
from pulse.schemas.analysis import AnalysisMetrics, AnalysisResult, EfficiencyRating

logger = logging.getLogger(__name__)

# Flat hourly cost used to turn tracked hours into spend. Placeholder business
# rule; override per call or with the ANALYSIS_HOURLY_RATE setting.
DEFAULT_HOURLY_RATE = 50
BUDGET_WARNING_RATIO = 0.8
HOURS_VARIANCE_THRESHOLD = 20

# (insight, recommendation)
Finding = Tuple[str, str]


@dataclass(frozen=True)
class ScoreBracket:
    """One row of the scoring table, selected by progress rate."""
    matches: Callable[[int], bool]
    score: int
    rating: EfficiencyRating
    insight: Optional[str] = None
    recommendation: Optional[str] = None

    @property
    def finding(self) -> Optional[Finding]:
        if self.insight is None:
            return None
        return self.insight, self.recommendation


DEFAULT_BRACKET = ScoreBracket(lambda rate: True, 75, EfficiencyRating.GOOD)

SCORE_BRACKETS: Sequence[ScoreBracket] = (
    ScoreBracket(
        lambda rate: rate < 30, 40, EfficiencyRating.POOR,
        "Project is significantly behind schedule",
        "Consider reassigning resources or extending timeline",
    ),
    ScoreBracket(
        lambda rate: rate < 60, 60, EfficiencyRating.AVERAGE,
        "Project progress is below expectations",
        "Review task priorities and resource allocation",
    ),
    ScoreBracket(
        lambda rate: rate >= 90, 95, EfficiencyRating.EXCELLENT,
        "Project is performing exceptionally well",
        "Consider documenting best practices for future projects",
    ),
)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 going toward positive infinity."""
    return int(math.floor(value + 0.5))


def _as_utc(value) -> Optional[datetime]:
    """
    Normalize a stored date to an aware UTC datetime.

    Plain dates (and date-only ISO strings) mean midnight UTC of that day,
    naive datetimes are taken as UTC.
    """
    if value is None or value == "":
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    raise TypeError(f"Unsupported date value: {value!r}")


def _is_past(value, now: datetime) -> bool:
    moment = _as_utc(value)
    return moment is not None and moment < now


def compute_metrics(project, tasks: Sequence, now: Optional[datetime] = None) -> AnalysisMetrics:
    """
    Derive the analysis metrics for a project.

    Args:
        project: Object with an ``end_date`` attribute
        tasks: Objects with ``status``, ``due_date``, ``estimated_hours`` and ``actual_hours``
        now: Reference time for overdue checks (defaults to the current UTC time)

    Returns:
        AnalysisMetrics: Counts, rates and hour totals
    """
    now = _as_utc(now) if now is not None else datetime.now(timezone.utc)

    total_tasks = len(tasks)
    completed_tasks = sum(1 for task in tasks if task.status == TaskStatus.COMPLETED)
    overdue_tasks = sum(
        1 for task in tasks
        if task.status != TaskStatus.COMPLETED and _is_past(task.due_date, now)
    )

    # Brackets and the variance guard compare these rounded values, so 89.5% rates excellent
    # and a 20.4% overrun stays under the threshold
    progress_rate = round_half_up(completed_tasks / total_tasks * 100) if total_tasks > 0 else 0

    total_estimated = sum(task.estimated_hours or 0 for task in tasks)
    total_actual = sum(task.actual_hours or 0 for task in tasks)
    if total_estimated > 0:
        hours_variance = round_half_up((total_actual - total_estimated) / total_estimated * 100)
    else:
        hours_variance = 0

    return AnalysisMetrics(
        total_tasks=total_tasks,
        completed_tasks=completed_tasks,
        overdue_tasks=overdue_tasks,
        progress_rate=progress_rate,
        is_overdue=_is_past(project.end_date, now),
        hours_variance=hours_variance,
        total_estimated=total_estimated,
        total_actual=total_actual,
    )


def select_bracket(progress_rate: int) -> ScoreBracket:
    """Return the first bracket matching the progress rate, or the default."""
    for bracket in SCORE_BRACKETS:
        if bracket.matches(progress_rate):
            return bracket
    return DEFAULT_BRACKET


def check_overdue_tasks(project, metrics: AnalysisMetrics, hourly_rate: float) -> Optional[Finding]:
    if metrics.overdue_tasks > 0:
        return (
            f"{metrics.overdue_tasks} tasks are overdue",
            "Prioritize overdue tasks and review their blockers",
        )
    return None


def check_hours_variance(project, metrics: AnalysisMetrics, hourly_rate: float) -> Optional[Finding]:
    if metrics.hours_variance > HOURS_VARIANCE_THRESHOLD:
        return (
            "Significant time estimation variance detected",
            "Improve task estimation accuracy for future projects",
        )
    return None


def check_budget(project, metrics: AnalysisMetrics, hourly_rate: float) -> Optional[Finding]:
    # A zero budget counts as "no budget set"
    if not project.budget or metrics.total_actual <= 0:
        return None
    estimated_cost = metrics.total_actual * hourly_rate
    if estimated_cost > project.budget * BUDGET_WARNING_RATIO:
        return (
            "Project is approaching budget limits",
            "Review resource allocation and consider budget adjustments",
        )
    return None


GUARD_CHECKS = (check_overdue_tasks, check_hours_variance, check_budget)


def collect_findings(project, metrics: AnalysisMetrics, hourly_rate: float,
                     bracket: ScoreBracket) -> Iterable[Finding]:
    if bracket.finding is not None:
        yield bracket.finding
    for check in GUARD_CHECKS:
        finding = check(project, metrics, hourly_rate)
        if finding is not None:
            yield finding


def analyze(project, tasks: Sequence, *, now: Optional[datetime] = None,
            hourly_rate: float = DEFAULT_HOURLY_RATE) -> AnalysisResult:
    """
    Score a project from its current tasks.

    Args:
        project: The project record (must not be None)
        tasks: All tasks belonging to the project
        now: Reference time for overdue checks and the analysis timestamp
        hourly_rate: Cost per tracked hour for the budget check

    Returns:
        AnalysisResult: Score, rating, metrics and local findings. ``external``
        is always None here; provider content is attached by the caller.

    Raises:
        ValidationError: If no project is given
    """
    if project is None:
        raise ValidationError("Project is required")

    now = _as_utc(now) if now is not None else datetime.now(timezone.utc)
    tasks = list(tasks or [])

    metrics = compute_metrics(project, tasks, now)
    bracket = select_bracket(metrics.progress_rate)
    findings = list(collect_findings(project, metrics, hourly_rate, bracket))

    logger.debug(
        "Project %s scored %s (%s) at %s%% progress with %d findings",
        project.id, bracket.score, bracket.rating.value, metrics.progress_rate, len(findings),
    )

    return AnalysisResult(
        project_id=project.id,
        performance_score=bracket.score,
        efficiency_rating=bracket.rating,
        metrics=metrics,
        insights=[insight for insight, _ in findings],
        recommendations=[recommendation for _, recommendation in findings],
        analysis_date=now,
    )
