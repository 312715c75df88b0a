"""Pytest fixtures for integration tests.

Provides async database fixtures for exercising the stores and services
against a SQLite database. Production runs on PostgreSQL; these tests use a
file-backed SQLite database (via aiosqlite) so that concurrent sessions see
each other's committed writes, as they would against a real server.
"""

from __future__ import annotations

import random
from pathlib import Path
from typing import AsyncGenerator
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from fulcrum.applications import ApplicationService
from fulcrum.config import DatabaseConfig, EmailConfig
from fulcrum.database import (
    ApplicationStore,
    Base,
    ProgressStore,
    ReviewerDirectory,
    ReviewStore,
    get_engine,
    get_session_factory,
)
from fulcrum.orchestrator import ProgressStateMachine
from fulcrum.review import ReviewAssignmentEngine, ReviewService


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    """Use asyncio as the async backend for pytest-asyncio.

    Returns:
        The name of the async backend to use.
    """
    return "asyncio"


@pytest_asyncio.fixture
async def engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    """Create a SQLite async engine with all tables.

    Yields:
        Configured AsyncEngine instance backed by a temporary file.
    """
    test_engine = get_engine(DatabaseConfig(url=f"sqlite+aiosqlite:///{tmp_path / 'fulcrum.db'}"))

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield test_engine

    await test_engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create an async session factory bound to the test engine."""
    return get_session_factory(engine)


@pytest.fixture
def review_store(session_factory) -> ReviewStore:
    return ReviewStore(session_factory)


@pytest.fixture
def application_store(session_factory) -> ApplicationStore:
    return ApplicationStore(session_factory)


@pytest.fixture
def progress_store(session_factory) -> ProgressStore:
    return ProgressStore(session_factory)


@pytest.fixture
def reviewer_directory(session_factory) -> ReviewerDirectory:
    return ReviewerDirectory(session_factory)


@pytest.fixture
def notifier() -> AsyncMock:
    """Email transport double that accepts every message."""
    sender = AsyncMock()
    sender.send.return_value = True
    return sender


@pytest.fixture
def email_config() -> EmailConfig:
    return EmailConfig(deployment_url="https://apply.example.org", organization_name="TSE")


@pytest.fixture
def assignment_engine(
    catalog, review_store, application_store, reviewer_directory, notifier, email_config,
    fixed_clock,
) -> ReviewAssignmentEngine:
    return ReviewAssignmentEngine(
        catalog,
        review_store,
        application_store,
        reviewer_directory,
        notifier,
        email_config=email_config,
        rng=random.Random(1234),
        clock=fixed_clock,
    )


@pytest.fixture
def state_machine(
    catalog, progress_store, review_store, application_store, assignment_engine, notifier,
    email_config,
) -> ProgressStateMachine:
    return ProgressStateMachine(
        catalog,
        progress_store,
        review_store,
        application_store,
        assignment_engine,
        notifier,
        email_config=email_config,
    )


@pytest.fixture
def review_service(catalog, review_store, application_store, assignment_engine) -> ReviewService:
    return ReviewService(catalog, review_store, application_store, assignment_engine)


@pytest.fixture
def application_service(
    catalog, application_store, state_machine, notifier, email_config
) -> ApplicationService:
    return ApplicationService(
        catalog, application_store, state_machine, notifier, email_config=email_config
    )


@pytest.fixture
def make_application(application_store, second_year_quarters):
    """Factory inserting an application; keyword arguments override columns."""
    counter = iter(range(1_000_000))

    async def _make(**overrides):
        n = next(counter)
        values = {
            "name": f"Applicant {n}",
            "email": f"applicant{n}@example.com",
            "year_applied": 2024,
            "role_prompts": {"engineering": "Because"},
            **second_year_quarters,
        }
        values.update(overrides)
        return await application_store.create(**values)

    return _make


@pytest.fixture
def make_reviewer(reviewer_directory):
    """Factory inserting an active reviewer for the given stages."""

    async def _make(email: str, stage_ids=(1, 2, 3), **overrides):
        values = {
            "email": email,
            "name": email.split("@")[0],
            "assigned_stage_ids": list(stage_ids),
        }
        values.update(overrides)
        return await reviewer_directory.create(**values)

    return _make
