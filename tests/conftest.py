"""Common test fixtures for the application."""

import os

os.environ.setdefault("ENV", "testing")

from collections.abc import AsyncGenerator, Callable, Generator
from pathlib import Path
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import NullPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from dlama.app import app
from dlama.config import settings
from dlama.config.db import get_session
from dlama.ingestion import ensure_project_directory
from dlama.project.data_type import ProjectDataType
from dlama.project.models import Project
from tests.utils import ProjectFactory


@pytest.fixture(autouse=True)
def storage_dirs(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point project storage and staging at a per-test temporary directory."""
    monkeypatch.setattr(settings, "project_storage_dir", tmp_path / "projects")
    monkeypatch.setattr(settings, "staging_dir", tmp_path / "staging")
    return tmp_path


@pytest.fixture
async def test_engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine]:
    """Create a file-backed SQLite engine with all tables.

    ``NullPool`` keeps connections from leaking between the test loop and the
    loop ``TestClient`` runs the application on.
    """
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        poolclass=NullPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine
    await engine.dispose()


@pytest.fixture
async def session(test_engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Yield a session on the test database.

    Returns:
        AsyncSession: SQLModel async session for database operations.
    """
    async with AsyncSession(test_engine, expire_on_commit=False) as session:
        yield session


@pytest.fixture
def session_factory(
    test_engine: AsyncEngine,
) -> Callable[[], AsyncSession]:
    """Return a factory for independent sessions on the test database."""

    def _factory() -> AsyncSession:
        return AsyncSession(test_engine, expire_on_commit=False)

    return _factory


@pytest.fixture
def make_project(session: AsyncSession) -> ProjectFactory:
    """Return a factory that persists a text or image project."""

    async def _make(
        data_type: ProjectDataType = ProjectDataType.TEXT, name: str = "project"
    ) -> Project:
        project = Project(id=uuid4(), name=name, data_type=data_type)
        if data_type == ProjectDataType.IMAGE:
            project.storage_path = str(
                settings.project_storage_dir / f"project_{project.id}"
            )
            ensure_project_directory(project)

        session.add(project)
        await session.commit()
        await session.refresh(project)
        return project

    return _make


@pytest.fixture(name="client")
def client_fixture(test_engine: AsyncEngine) -> Generator[TestClient]:
    """Create a test client for the FastAPI app.

    Every request gets its own session on the test database.

    Args:
        test_engine: Engine of the test database.

    Returns:
        TestClient: Configured FastAPI test client.
    """

    async def get_session_override() -> AsyncGenerator[AsyncSession]:
        async with AsyncSession(test_engine, expire_on_commit=False) as session:
            yield session

    app.dependency_overrides[get_session] = get_session_override
    client = TestClient(app, base_url="http://testserver")  # NOSONAR
    yield client

    app.dependency_overrides.clear()
