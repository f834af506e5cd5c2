from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete
from sqlalchemy.exc import SQLAlchemyError
from quizlink.models.question_bank import QuestionBankItem
from quizlink.schemas.question_bank_schema import QuestionBankCreate, QuestionBankUpdate
from typing import Optional, List
import logging

logger = logging.getLogger(__name__)


class QuestionBankRepository:
    """Repository for the reusable question bank"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_questions(self, category: Optional[str] = None, difficulty: Optional[str] = None) -> List[QuestionBankItem]:
        query = select(QuestionBankItem)
        if category:
            query = query.where(QuestionBankItem.category == category)
        if difficulty:
            query = query.where(QuestionBankItem.difficulty == difficulty)
        result = await self.db.execute(
            query.order_by(QuestionBankItem.created_at.desc(), QuestionBankItem.question_id.desc())
        )
        return list(result.scalars().all())

    async def get_question_by_id(self, question_id: int) -> Optional[QuestionBankItem]:
        result = await self.db.execute(
            select(QuestionBankItem).where(QuestionBankItem.question_id == question_id)
        )
        return result.scalar_one_or_none()

    async def create_question(self, data: QuestionBankCreate) -> QuestionBankItem:
        try:
            item = QuestionBankItem(**data.model_dump())
            self.db.add(item)
            await self.db.commit()
            await self.db.refresh(item)
            return item
        except SQLAlchemyError as e:
            logger.error(f"Database error creating question: {str(e)}")
            await self.db.rollback()
            raise

    async def update_question(self, item: QuestionBankItem, data: QuestionBankUpdate) -> QuestionBankItem:
        values = data.model_dump(exclude_unset=True)
        options = values.get("options", item.options)
        correct = values.get("correct_answer", item.correct_answer)
        if correct >= len(options):
            raise ValueError("correct_answer must index one of the options")
        try:
            for key, value in values.items():
                setattr(item, key, value)
            await self.db.commit()
            await self.db.refresh(item)
            return item
        except SQLAlchemyError as e:
            logger.error(f"Error updating question {item.question_id}: {str(e)}")
            await self.db.rollback()
            raise

    async def delete_question(self, question_id: int) -> bool:
        result = await self.db.execute(
            delete(QuestionBankItem).where(QuestionBankItem.question_id == question_id)
        )
        await self.db.commit()
        return result.rowcount > 0
