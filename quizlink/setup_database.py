"""
Database setup for a fresh QuizLink install

Creates the tables, a demo admin account and a few question bank entries.
Safe to run more than once.

    python -m quizlink.setup_database
"""

import asyncio
import logging
from typing import Dict, Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

import quizlink.models  # noqa: F401
from quizlink.db.base import Base
from quizlink.db.database import engine, AsyncSessionLocal
from quizlink.models.question_bank import QuestionBankItem
from quizlink.models.user import UserRole
from quizlink.repositories.question_bank_repo import QuestionBankRepository
from quizlink.repositories.user_repo import create_user, get_user_by_email
from quizlink.schemas.question_bank_schema import QuestionBankCreate

logger = logging.getLogger(__name__)

DEMO_ADMIN_EMAIL = "admin@demo.com"

SAMPLE_QUESTIONS = [
    QuestionBankCreate(
        question_text="What is the time complexity of binary search?",
        options=["O(n)", "O(log n)", "O(n²)", "O(1)"],
        correct_answer=1,
        category="technical",
        difficulty="medium",
        tags=["algorithms", "data-structures"],
    ),
    QuestionBankCreate(
        question_text="Which of the following is NOT a programming paradigm?",
        options=["Object-oriented", "Functional", "Procedural", "Relational"],
        correct_answer=3,
        category="technical",
        difficulty="easy",
        tags=["programming", "concepts"],
    ),
]


async def seed(db: AsyncSession) -> Dict[str, Any]:
    """Insert the demo admin and sample questions unless they already exist"""
    admin_created = False
    if not await get_user_by_email(db, DEMO_ADMIN_EMAIL):
        await create_user(db, "Demo Admin", DEMO_ADMIN_EMAIL, role=UserRole.admin)
        admin_created = True

    existing = set((await db.execute(select(QuestionBankItem.question_text))).scalars().all())
    repo = QuestionBankRepository(db)
    added = 0
    for question in SAMPLE_QUESTIONS:
        if question.question_text not in existing:
            await repo.create_question(question)
            added += 1

    return {"admin_created": admin_created, "questions_added": added}


async def setup_database():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Tables created")

    async with AsyncSessionLocal() as db:
        summary = await seed(db)

    if summary["admin_created"]:
        logger.info(f"Demo admin created: {DEMO_ADMIN_EMAIL}")
    else:
        logger.info("Demo admin already exists")
    logger.info(f"Added {summary['questions_added']} sample questions to the question bank")
    await engine.dispose()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(setup_database())
