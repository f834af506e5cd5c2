from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, delete
from sqlalchemy.exc import SQLAlchemyError
from quizlink.core.exceptions import AssessmentLockedError
from quizlink.models.assessment import Assessment
from quizlink.models.assessment_link import AssessmentLink
from quizlink.schemas.assessment_schema import AssessmentCreate, AssessmentUpdate
from datetime import datetime, timezone
from typing import Optional, List
import logging

logger = logging.getLogger(__name__)


class AssessmentRepository:
    """Repository for Assessment entity operations"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_assessment(self, admin_id: int, data: AssessmentCreate) -> Assessment:
        """
        Create a new assessment owned by an admin

        Args:
            admin_id: Owner of the assessment
            data: Validated assessment payload

        Returns:
            The persisted Assessment
        """
        try:
            assessment = Assessment(
                title=data.title,
                description=data.description,
                admin_id=admin_id,
                total_time=data.total_time,
                time_per_question=data.time_per_question,
                questions=[q.model_dump() for q in data.questions],
            )
            self.db.add(assessment)
            await self.db.commit()
            await self.db.refresh(assessment)
            logger.info(
                f"Created assessment {assessment.assessment_id} for admin {admin_id}")
            return assessment

        except SQLAlchemyError as e:
            logger.error(f"Database error creating assessment: {str(e)}")
            await self.db.rollback()
            raise

    async def get_assessment_by_id(self, assessment_id: int) -> Optional[Assessment]:
        """Get assessment by ID"""
        result = await self.db.execute(
            select(Assessment).where(Assessment.assessment_id == assessment_id)
        )
        return result.scalar_one_or_none()

    async def get_assessments_by_admin(self, admin_id: int) -> List[Assessment]:
        """All assessments of an admin, newest first"""
        result = await self.db.execute(
            select(Assessment)
            .where(Assessment.admin_id == admin_id)
            .order_by(Assessment.created_at.desc(), Assessment.assessment_id.desc())
        )
        return list(result.scalars().all())

    async def count_links(self, assessment_id: int) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(AssessmentLink).where(
                AssessmentLink.assessment_id == assessment_id)
        )
        return result.scalar() or 0

    async def update_assessment(self, assessment: Assessment, data: AssessmentUpdate) -> Assessment:
        """
        Apply a partial update.

        Raises:
            AssessmentLockedError: once any candidate link exists the
                definition is frozen
        """
        if await self.count_links(assessment.assessment_id):
            raise AssessmentLockedError()

        values = data.model_dump(exclude_unset=True)
        if "questions" in values and data.questions is not None:
            values["questions"] = [q.model_dump() for q in data.questions]
        try:
            for key, value in values.items():
                setattr(assessment, key, value)
            assessment.updated_at = datetime.now(timezone.utc)
            await self.db.commit()
            await self.db.refresh(assessment)
            return assessment
        except SQLAlchemyError as e:
            logger.error(
                f"Error updating assessment {assessment.assessment_id}: {str(e)}")
            await self.db.rollback()
            raise

    async def delete_assessment(self, assessment: Assessment) -> None:
        if await self.count_links(assessment.assessment_id):
            raise AssessmentLockedError()
        try:
            await self.db.execute(
                delete(Assessment).where(
                    Assessment.assessment_id == assessment.assessment_id)
            )
            await self.db.commit()
        except SQLAlchemyError as e:
            logger.error(
                f"Error deleting assessment {assessment.assessment_id}: {str(e)}")
            await self.db.rollback()
            raise
