from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from quizlink.core.exceptions import AlreadyCompletedError
from quizlink.models.assessment_link import AssessmentLink
from quizlink.models.assessment_result import AssessmentResult
from quizlink.repositories.link_repo import LinkRepository
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any, Tuple
import logging

logger = logging.getLogger(__name__)


class ResultRepository:
    """Repository for AssessmentResult entity operations"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_result_by_link_id(self, link_id: int) -> Optional[AssessmentResult]:
        result = await self.db.execute(
            select(AssessmentResult).where(
                AssessmentResult.assessment_link_id == link_id)
        )
        return result.scalar_one_or_none()

    async def create_result(
        self,
        link_id: int,
        answers: List[Dict[str, Any]],
        score: int,
        total_questions: int,
        time_taken: int,
        completed_at: Optional[datetime] = None
    ) -> AssessmentResult:
        """
        Persist a result and mark its link used in one transaction

        The unique constraint on assessment_link_id decides races: the losing
        writer gets an IntegrityError, which is surfaced as
        AlreadyCompletedError after rollback.

        Raises:
            AlreadyCompletedError: a result already exists for the link
            SQLAlchemyError: any other failure; nothing is written
        """
        result = AssessmentResult(
            assessment_link_id=link_id,
            answers=answers,
            score=score,
            total_questions=total_questions,
            time_taken=time_taken,
            completed_at=completed_at or datetime.now(timezone.utc),
        )
        try:
            self.db.add(result)
            await self.db.flush()
            await LinkRepository(self.db).mark_link_used(link_id, commit=False)
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.info(
                f"Duplicate result rejected for link {link_id}: {str(e.orig)}")
            raise AlreadyCompletedError()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(
                f"Database error persisting result for link {link_id}: {str(e)}")
            raise

        await self.db.refresh(result)
        return result

    async def get_results_by_assessment(self, assessment_id: int) -> List[Tuple[AssessmentResult, AssessmentLink]]:
        """Results of one assessment with their links, most recent first"""
        rows = await self.db.execute(
            select(AssessmentResult, AssessmentLink)
            .join(AssessmentLink, AssessmentResult.assessment_link_id == AssessmentLink.link_id)
            .where(AssessmentLink.assessment_id == assessment_id)
            .order_by(AssessmentResult.completed_at.desc())
        )
        return [(r, l) for r, l in rows.all()]
