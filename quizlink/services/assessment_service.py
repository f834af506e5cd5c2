"""
Assessment Service - admin-side business logic: assessments, links and results
"""

import uuid
import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, Any, List

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from quizlink.core.config import settings
from quizlink.core.exceptions import TransportFailureError
from quizlink.core.validators import InputValidator
from quizlink.models.assessment import Assessment
from quizlink.repositories.assessment_repo import AssessmentRepository
from quizlink.repositories.link_repo import LinkRepository
from quizlink.repositories.result_repo import ResultRepository
from quizlink.schemas.assessment_schema import AssessmentCreate, AssessmentUpdate
from quizlink.schemas.link_schema import LinkCreate, LinkResponse
from quizlink.schemas.result_schema import ResultWithCandidate
from quizlink.services.logging import log_major_event
from quizlink.services.notification_service import get_notification_service

logger = logging.getLogger(__name__)


class AssessmentService:
    """Service class for assessment business logic"""

    async def create_assessment(self, admin_id: int, data: AssessmentCreate, db: AsyncSession) -> Assessment:
        assessment = await AssessmentRepository(db).create_assessment(admin_id, data)
        await log_major_event(
            action="assessment_created",
            status="success",
            actor=str(admin_id),
            details=f"Assessment '{assessment.title}' created with {len(data.questions)} questions.",
            entity=str(assessment.assessment_id)
        )
        return assessment

    async def get_owned_assessment(self, assessment_id: int, admin_id: int, db: AsyncSession) -> Assessment:
        """Fetch an assessment and check that admin_id owns it"""
        assessment = await AssessmentRepository(db).get_assessment_by_id(assessment_id)
        if not assessment:
            raise HTTPException(status_code=404, detail="Assessment not found")
        if assessment.admin_id != admin_id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You can only access your own assessments"
            )
        return assessment

    async def update_assessment(self, assessment_id: int, admin_id: int, data: AssessmentUpdate, db: AsyncSession) -> Assessment:
        assessment = await self.get_owned_assessment(assessment_id, admin_id, db)
        return await AssessmentRepository(db).update_assessment(assessment, data)

    async def delete_assessment(self, assessment_id: int, admin_id: int, db: AsyncSession) -> None:
        assessment = await self.get_owned_assessment(assessment_id, admin_id, db)
        await AssessmentRepository(db).delete_assessment(assessment)
        await log_major_event(
            action="assessment_deleted",
            status="success",
            actor=str(admin_id),
            entity=str(assessment_id)
        )

    async def generate_link(self, assessment_id: int, admin_id: int, data: LinkCreate, db: AsyncSession) -> Dict[str, Any]:
        """
        Create a single-use candidate link and e-mail the invitation

        The invitation is best-effort: a delivery failure is reported in the
        response but the link stays valid.
        """
        assessment = await self.get_owned_assessment(assessment_id, admin_id, db)
        candidate_name = InputValidator.validate_name(data.candidate_name)

        expires_at = datetime.now(timezone.utc) + timedelta(hours=settings.LINK_EXPIRY_HOURS)
        link = await LinkRepository(db).create_link(
            assessment_id=assessment.assessment_id,
            candidate_email=data.candidate_email,
            candidate_name=candidate_name,
            link_token=uuid.uuid4().hex,
            expires_at=expires_at,
        )
        assessment_url = f"{settings.APP_BASE_URL.rstrip('/')}/take/{link.link_token}"

        invitation_sent = True
        try:
            get_notification_service().send_assessment_invitation(
                candidate_email=link.candidate_email,
                candidate_name=link.candidate_name,
                assessment_title=assessment.title,
                assessment_url=assessment_url,
                expiry_hours=settings.LINK_EXPIRY_HOURS,
            )
        except TransportFailureError as e:
            invitation_sent = False
            logger.warning(f"Invitation for link {link.link_id} not delivered: {e.message}")

        await log_major_event(
            action="link_generated",
            status="success",
            actor=str(admin_id),
            details=f"Link for {link.candidate_email} on assessment {assessment_id}.",
            entity=str(link.link_id)
        )
        return {
            "link": LinkResponse.model_validate(link),
            "assessment_url": assessment_url,
            "invitation_sent": invitation_sent,
            "message": "Assessment link generated and invitation email sent"
            if invitation_sent else "Assessment link generated; invitation email could not be sent",
        }

    async def get_links(self, assessment_id: int, admin_id: int, db: AsyncSession):
        await self.get_owned_assessment(assessment_id, admin_id, db)
        return await LinkRepository(db).get_links_by_assessment(assessment_id)

    async def get_results(self, assessment_id: int, admin_id: int, db: AsyncSession) -> List[ResultWithCandidate]:
        await self.get_owned_assessment(assessment_id, admin_id, db)
        rows = await ResultRepository(db).get_results_by_assessment(assessment_id)
        results = []
        for result, link in rows:
            percentage = (result.score / result.total_questions * 100) if result.total_questions else 0.0
            results.append(ResultWithCandidate(
                result_id=result.result_id,
                assessment_link_id=result.assessment_link_id,
                answers=result.answers,
                score=result.score,
                total_questions=result.total_questions,
                time_taken=result.time_taken,
                completed_at=result.completed_at,
                feedback=result.feedback,
                candidate_name=link.candidate_name,
                candidate_email=link.candidate_email,
                percentage_score=round(percentage, 1),
            ))
        return results


# Global service instance
assessment_service = AssessmentService()
