"""Tests for the fresh-install seed data."""

import pytest

from quizlink.models.user import UserRole
from quizlink.repositories.question_bank_repo import QuestionBankRepository
from quizlink.repositories.user_repo import get_user_by_email
from quizlink.setup_database import DEMO_ADMIN_EMAIL, seed


@pytest.mark.asyncio
async def test_seed_is_idempotent(db):
    first = await seed(db)
    second = await seed(db)

    assert first == {"admin_created": True, "questions_added": 2}
    assert second == {"admin_created": False, "questions_added": 0}

    admin = await get_user_by_email(db, DEMO_ADMIN_EMAIL)
    assert admin.role == UserRole.admin
    assert len(await QuestionBankRepository(db).get_questions(category="technical")) == 2


@pytest.mark.asyncio
async def test_demo_admin_can_log_in(client, db):
    await seed(db)

    response = await client.post("/api/auth/login", json={"email": DEMO_ADMIN_EMAIL})

    assert response.status_code == 200
