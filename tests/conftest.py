"""Shared test fixtures for Project Pulse."""

from __future__ import annotations

from typing import Callable

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

import pulse.models  # noqa: F401  registers tables
from pulse.api.v1.endpoints.analysis import get_ai_provider
from pulse.core.security import get_password_hash
from pulse.db.session import get_db
from pulse.main import app
from pulse.models import Project, Task, User, UserRole
from pulse.services.ai_provider import AIProviderClient

PASSWORD = "correct-horse-battery"


@pytest.fixture
def engine():
    # One shared in-memory connection so every session sees the same data
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine) -> Session:
    with Session(engine) as session:
        yield session


@pytest.fixture
def provider() -> AIProviderClient:
    """Provider without an API key: analyses stay local."""
    return AIProviderClient(api_key=None, base_url="https://provider.test")


@pytest.fixture
def client(engine, provider) -> TestClient:
    def override_get_db():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_ai_provider] = lambda: provider
    # Not used as a context manager: the lifespan would create tables in the real database
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db) -> Callable[..., User]:
    def _make(email: str = "owner@example.com", roles=None) -> User:
        user = User(
            email=email,
            password=get_password_hash(PASSWORD),
            full_name=email.split("@")[0],
            roles=roles or [UserRole.USER],
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make


@pytest.fixture
def owner(make_user) -> User:
    return make_user("owner@example.com")


@pytest.fixture
def other_user(make_user) -> User:
    return make_user("other@example.com")


@pytest.fixture
def admin(make_user) -> User:
    return make_user("admin@example.com", roles=[UserRole.ADMIN])


@pytest.fixture
def make_project(db) -> Callable[..., Project]:
    def _make(owner: User, **fields) -> Project:
        fields.setdefault("name", "Website relaunch")
        project = Project(owner_id=owner.id, **fields)
        db.add(project)
        db.commit()
        db.refresh(project)
        return project
    return _make


@pytest.fixture
def make_tasks(db) -> Callable[..., list]:
    def _make(project: Project, count: int, **fields) -> list:
        tasks = []
        for i in range(count):
            task = Task(project_id=project.id, title=f"Task {i + 1}", **fields)
            db.add(task)
            tasks.append(task)
        db.commit()
        for task in tasks:
            db.refresh(task)
        return tasks
    return _make
