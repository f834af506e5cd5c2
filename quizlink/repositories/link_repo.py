from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from quizlink.models.assessment_link import AssessmentLink
from datetime import datetime
from typing import Optional, List
import logging

logger = logging.getLogger(__name__)


class LinkRepository:
    """Repository for candidate assessment links"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_link(
        self,
        assessment_id: int,
        candidate_email: str,
        candidate_name: str,
        link_token: str,
        expires_at: datetime
    ) -> AssessmentLink:
        try:
            link = AssessmentLink(
                assessment_id=assessment_id,
                candidate_email=candidate_email,
                candidate_name=candidate_name,
                link_token=link_token,
                expires_at=expires_at,
                is_used=False,
            )
            self.db.add(link)
            await self.db.commit()
            await self.db.refresh(link)
            logger.info(
                f"Created link {link.link_id} for assessment {assessment_id}")
            return link
        except SQLAlchemyError as e:
            logger.error(f"Database error creating link: {str(e)}")
            await self.db.rollback()
            raise

    async def get_link_by_token(self, link_token: str) -> Optional[AssessmentLink]:
        """Lookup by token only; expiry and usage are judged by the caller"""
        result = await self.db.execute(
            select(AssessmentLink).where(AssessmentLink.link_token == link_token)
        )
        return result.scalar_one_or_none()

    async def get_links_by_assessment(self, assessment_id: int) -> List[AssessmentLink]:
        result = await self.db.execute(
            select(AssessmentLink)
            .where(AssessmentLink.assessment_id == assessment_id)
            .order_by(AssessmentLink.created_at.desc(), AssessmentLink.link_id.desc())
        )
        return list(result.scalars().all())

    async def mark_link_used(self, link_id: int, commit: bool = True) -> bool:
        stmt = update(AssessmentLink).where(
            AssessmentLink.link_id == link_id
        ).values(is_used=True)
        result = await self.db.execute(stmt)
        if commit:
            await self.db.commit()
        return result.rowcount > 0
