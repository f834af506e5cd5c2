from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from quizlink.core.exceptions import (
    AlreadyCompletedError, AssessmentError, ExpiredError, NotFoundError, UNAVAILABLE_ERRORS
)
from quizlink.db.database import get_db
from quizlink.schemas.candidate_schema import CandidateAccessResponse, CandidateAssessmentView
from quizlink.schemas.result_schema import AssessmentResultResponse, SubmissionRequest
from quizlink.services.link_resolver import resolve_link
from quizlink.services.submission_service import submission_service
import logging

logger = logging.getLogger(__name__)

router = APIRouter()

UNAVAILABLE_STATUS = {
    NotFoundError: 404,
    ExpiredError: 410,
    AlreadyCompletedError: 409,
}


def unavailable(e: AssessmentError) -> HTTPException:
    """Every resolution failure looks the same to the candidate apart from its reason"""
    return HTTPException(
        status_code=UNAVAILABLE_STATUS.get(type(e), 400),
        detail={"error": "Assessment unavailable", "reason": e.reason}
    )


@router.get("/{token}", response_model=CandidateAccessResponse)
async def get_assessment_by_token(token: str, db: AsyncSession = Depends(get_db)):
    """Resolve a candidate link. Questions are returned without their answers"""
    try:
        resolved = await resolve_link(db, token)
    except UNAVAILABLE_ERRORS as e:
        raise unavailable(e)

    definition = resolved.assessment
    return CandidateAccessResponse(
        assessment=CandidateAssessmentView(
            id=definition.assessment_id,
            title=definition.title,
            description=definition.description,
            total_time=definition.total_time,
            time_per_question=definition.time_per_question,
            questions=definition.candidate_questions(),
        ),
        candidate=resolved.candidate,
    )


@router.post("/{token}/submit", response_model=AssessmentResultResponse)
async def submit_assessment(token: str, data: SubmissionRequest, db: AsyncSession = Depends(get_db)):
    try:
        return await submission_service.submit_answers(db, token, data.answers, data.time_taken)
    except UNAVAILABLE_ERRORS as e:
        raise unavailable(e)
    except Exception as e:
        logger.error(f"Error submitting assessment: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to submit assessment")
