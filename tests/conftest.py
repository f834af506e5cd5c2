"""Shared fixtures and utilities for tests."""

import os

# Settings are read on import, so the environment must be ready first
os.environ.setdefault("SECRET_KEY", "test-secret-key-min-32-chars-long-for-jwt")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ["OPENAI_API_KEY"] = ""
os.environ["SENDGRID_API_KEY"] = ""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool

import quizlink.models  # noqa: F401
from quizlink.core.security import create_access_token
from quizlink.db.base import Base
from quizlink.db.database import get_db
from quizlink.models.user import UserRole
from quizlink.repositories.assessment_repo import AssessmentRepository
from quizlink.repositories.link_repo import LinkRepository
from quizlink.repositories.user_repo import create_user
from quizlink.schemas.assessment_schema import AssessmentCreate, AssessmentDefinition, Question


def make_questions(count: int = 3):
    """Questions q1..qN whose correct answers are 0, 1, 2, 0, ..."""
    return [
        Question(
            id=f"q{i + 1}",
            text=f"Question {i + 1}?",
            options=["A", "B", "C", "D"],
            correct_answer=i % 4,
            category="python",
            difficulty="easy",
        )
        for i in range(count)
    ]


def make_definition(total_time: int = 10, time_per_question: int = 1, count: int = 3) -> AssessmentDefinition:
    return AssessmentDefinition(
        assessment_id=1,
        title="Python Basics",
        description="Core language questions",
        total_time=total_time,
        time_per_question=time_per_question,
        questions=make_questions(count),
    )


class FakeClock:
    """Manually advanced UTC clock for CandidateSession"""

    def __init__(self, start: datetime = None):
        self.now = start or datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float):
        self.now += timedelta(seconds=seconds)


def make_engine(url: str):
    return create_async_engine(url, poolclass=NullPool)


def make_session_factory(engine):
    return sessionmaker(
        bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )


@pytest.fixture
def db_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'quizlink_test.db'}"


@pytest_asyncio.fixture
async def engine(db_url):
    engine = make_engine(db_url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine, monkeypatch):
    factory = make_session_factory(engine)
    monkeypatch.setattr("quizlink.services.logging.AsyncSessionLocal", factory)
    return factory


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture(autouse=True)
def notifier(monkeypatch):
    """E-mail never leaves the test process"""
    service = MagicMock()
    service.send_assessment_invitation.return_value = 202
    service.send_completion_confirmation.return_value = 202
    monkeypatch.setattr(
        "quizlink.services.submission_service.get_notification_service", lambda: service)
    monkeypatch.setattr(
        "quizlink.services.assessment_service.get_notification_service", lambda: service)
    return service


@pytest_asyncio.fixture
async def admin(db):
    return await create_user(db, "Ada Admin", "admin@example.com", role=UserRole.admin)


@pytest.fixture
def admin_headers(admin):
    token = create_access_token({"sub": admin.email, "user_id": admin.user_id})
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def assessment(db, admin):
    data = AssessmentCreate(
        title="Python Basics",
        description="Core language questions",
        total_time=10,
        time_per_question=2,
        questions=make_questions(),
    )
    return await AssessmentRepository(db).create_assessment(admin.user_id, data)


async def create_link(db, assessment, token: str = "token-abc", expires_in: timedelta = timedelta(hours=48), is_used: bool = False):
    link = await LinkRepository(db).create_link(
        assessment_id=assessment.assessment_id,
        candidate_email="cand@example.com",
        candidate_name="Carla Candidate",
        link_token=token,
        expires_at=datetime.now(timezone.utc) + expires_in,
    )
    if is_used:
        await LinkRepository(db).mark_link_used(link.link_id)
        await db.refresh(link)
    return link


@pytest_asyncio.fixture
async def link(db, assessment):
    return await create_link(db, assessment)


@pytest_asyncio.fixture
async def client(session_factory):
    from main import app

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
