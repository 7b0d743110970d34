"""Tests for the analysis orchestration: loading, ownership, enrichment and upsert."""

from __future__ import annotations

from datetime import date, timedelta

import pytest
from sqlalchemy.exc import OperationalError
from sqlmodel import select

from pulse.core.errors import DataStoreError, NotFoundError, ValidationError
from pulse.models import ProjectAnalysis
from pulse.schemas.analysis import EfficiencyRating, ExternalAnalysis
from pulse.services import analysis
from pulse.services.analysis import (
    get_stored_analysis,
    parse_project_id,
    run_project_analysis,
    save_analysis,
)


class StubProvider:
    """Stands in for AIProviderClient."""

    def __init__(self, external=None, enabled=True):
        self.external = external
        self.enabled = enabled
        self.contexts = []

    def try_analyze(self, context):
        self.contexts.append(context)
        return self.external


class TestParseProjectId:

    @pytest.mark.parametrize("value, expected", [(7, 7), ("7", 7), (" 12 ", 12)])
    def test_valid(self, value, expected) -> None:
        assert parse_project_id(value) == expected

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_missing(self, value) -> None:
        with pytest.raises(ValidationError, match="required"):
            parse_project_id(value)

    @pytest.mark.parametrize("value", ["abc", "-3", 0, -1, 1.5, True, [1], {"id": 1}])
    def test_invalid(self, value) -> None:
        with pytest.raises(ValidationError):
            parse_project_id(value)


class TestRunProjectAnalysis:

    def test_local_only(self, db, owner, make_project, make_tasks) -> None:
        project = make_project(owner)
        make_tasks(project, 2, status="completed")
        make_tasks(project, 8)

        provider = StubProvider(enabled=False)
        result = run_project_analysis(db, owner, project.id, provider=provider)

        assert result.performance_score == 40
        assert result.efficiency_rating == EfficiencyRating.POOR
        assert result.external is None
        assert provider.contexts == []

    def test_missing_project(self, db, owner) -> None:
        with pytest.raises(NotFoundError, match="not found or access denied"):
            run_project_analysis(db, owner, 999, provider=StubProvider(enabled=False))

    def test_foreign_project_looks_missing(self, db, owner, other_user, make_project) -> None:
        project = make_project(other_user)
        with pytest.raises(NotFoundError) as exc:
            run_project_analysis(db, owner, project.id, provider=StubProvider(enabled=False))
        assert exc.value.message == "Project not found or access denied"

    def test_admin_cannot_analyze_foreign_project(self, db, admin, owner, make_project) -> None:
        project = make_project(owner)
        with pytest.raises(NotFoundError):
            run_project_analysis(db, admin, project.id, provider=StubProvider(enabled=False))

    def test_invalid_id(self, db, owner) -> None:
        with pytest.raises(ValidationError):
            run_project_analysis(db, owner, None, provider=StubProvider(enabled=False))

    def test_external_content_is_kept_separate(self, db, owner, make_project, make_tasks) -> None:
        project = make_project(owner)
        make_tasks(project, 9, status="completed")
        make_tasks(project, 1)

        external = ExternalAnalysis(insights=["Provider insight"], recommendations=None)
        provider = StubProvider(external=external)
        result = run_project_analysis(db, owner, project.id, provider=provider)

        assert result.external == external
        assert result.insights == ["Project is performing exceptionally well"]
        assert "Provider insight" not in result.insights
        assert result.insight_set().external == ["Provider insight"]
        assert result.recommendation_set().external is None

        context = provider.contexts[0]
        assert context["project"]["name"] == project.name
        assert context["metrics"]["progressRate"] == 90
        assert len(context["tasks"]) == 10

    def test_provider_failure_keeps_local_result(self, db, owner, make_project, make_tasks) -> None:
        project = make_project(owner)
        make_tasks(project, 5, status="completed")

        result = run_project_analysis(db, owner, project.id, provider=StubProvider(external=None))

        assert result.external is None
        assert result.efficiency_rating == EfficiencyRating.EXCELLENT

    def test_hourly_rate_from_settings(self, db, owner, make_project, make_tasks, monkeypatch) -> None:
        project = make_project(owner, budget=1000)
        make_tasks(project, 5, status="completed", actual_hours=2)

        monkeypatch.setattr(analysis.settings, "ANALYSIS_HOURLY_RATE", 100.0)
        result = run_project_analysis(db, owner, project.id, provider=StubProvider(enabled=False))

        assert "Project is approaching budget limits" in result.insights

    def test_task_read_failure_is_datastore_error(self, db, owner, make_project, monkeypatch) -> None:
        project = make_project(owner)

        def broken(db, project_id):
            raise DataStoreError("Failed to fetch tasks")

        monkeypatch.setattr(analysis, "load_tasks", broken)
        with pytest.raises(DataStoreError):
            run_project_analysis(db, owner, project.id, provider=StubProvider(enabled=False))

    def test_project_read_failure_is_wrapped(self, db, owner, monkeypatch) -> None:
        def broken_exec(*args, **kwargs):
            raise OperationalError("SELECT", {}, Exception("database is locked"))

        monkeypatch.setattr(db, "exec", broken_exec)
        with pytest.raises(DataStoreError, match="Failed to fetch project"):
            run_project_analysis(db, owner, 1, provider=StubProvider(enabled=False))


class TestPersistence:

    def _stored(self, db, project_id):
        return db.exec(select(ProjectAnalysis).where(ProjectAnalysis.project_id == project_id)).all()

    def test_stores_result(self, db, owner, make_project, make_tasks) -> None:
        project = make_project(owner)
        make_tasks(project, 1, status="completed")
        make_tasks(project, 1, due_date=date.today() - timedelta(days=3))

        run_project_analysis(
            db, owner, project.id,
            provider=StubProvider(external=ExternalAnalysis(insights={"summary": "x"})),
        )

        rows = self._stored(db, project.id)
        assert len(rows) == 1
        row = rows[0]
        assert row.user_id == owner.id
        assert row.performance_score == 60
        assert row.efficiency_rating == "average"
        assert row.metrics["overdueTasks"] == 1
        assert row.insights == {
            "local": ["Project progress is below expectations", "1 tasks are overdue"],
            "external": {"summary": "x"},
        }
        assert row.recommendations["external"] is None

    def test_reanalysis_overwrites(self, db, owner, make_project, make_tasks) -> None:
        project = make_project(owner)
        make_tasks(project, 1)
        provider = StubProvider(enabled=False)

        run_project_analysis(db, owner, project.id, provider=provider)
        make_tasks(project, 9, status="completed")
        run_project_analysis(db, owner, project.id, provider=provider)

        rows = self._stored(db, project.id)
        assert len(rows) == 1
        assert rows[0].efficiency_rating == "excellent"
        assert rows[0].performance_score == 95

    def test_write_failure_is_swallowed(self, db, owner, make_project, make_tasks, monkeypatch) -> None:
        project = make_project(owner)
        make_tasks(project, 2, status="completed")

        def broken_commit():
            raise OperationalError("INSERT", {}, Exception("disk full"))

        monkeypatch.setattr(db, "commit", broken_commit)
        result = run_project_analysis(db, owner, project.id, provider=StubProvider(enabled=False))

        assert result.performance_score == 95
        monkeypatch.undo()
        assert self._stored(db, project.id) == []

    def test_save_analysis_returns_none_on_failure(self, db, owner, make_project, monkeypatch) -> None:
        project = make_project(owner)
        result = run_project_analysis(db, owner, project.id, provider=StubProvider(enabled=False))

        def broken_commit():
            raise OperationalError("UPDATE", {}, Exception("database is locked"))

        monkeypatch.setattr(db, "commit", broken_commit)
        assert save_analysis(db, result, owner.id) is None

    def test_get_stored_analysis(self, db, owner, other_user, make_project) -> None:
        project = make_project(owner)
        with pytest.raises(NotFoundError, match="not been analyzed"):
            get_stored_analysis(db, project.id, owner)

        run_project_analysis(db, owner, project.id, provider=StubProvider(enabled=False))
        assert get_stored_analysis(db, project.id, owner).performance_score == 40

        with pytest.raises(NotFoundError, match="access denied"):
            get_stored_analysis(db, project.id, other_user)
