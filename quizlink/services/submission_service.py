"""
Submission Service - the guard that turns a finished attempt into exactly one result

Order of operations for every submission:
    1. resolve the link (unknown token / far past expiry are rejected)
    2. check that no result exists yet for the link
    3. rescore on the server from the submitted answers
    4. write the result and flag the link used in one transaction; the unique
       constraint on results.assessment_link_id settles concurrent writers
    5. notify the candidate, best-effort
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from quizlink.core.exceptions import (
    AlreadyCompletedError, ExpiredError, NotFoundError, TransportFailureError
)
from quizlink.models.assessment_link import AssessmentLink
from quizlink.models.assessment_result import AssessmentResult
from quizlink.repositories.assessment_repo import AssessmentRepository
from quizlink.repositories.link_repo import LinkRepository
from quizlink.repositories.result_repo import ResultRepository
from quizlink.schemas.assessment_schema import AssessmentDefinition
from quizlink.schemas.result_schema import CandidateAnswer
from quizlink.services.candidate_session import SessionSubmission
from quizlink.services.link_resolver import as_utc
from quizlink.services.logging import log_major_event
from quizlink.services.notification_service import get_notification_service
from quizlink.services.scoring import (
    build_answers, even_time_split, score_answers, selections_from_answers
)

logger = logging.getLogger(__name__)


class SubmissionService:
    """Service class for candidate submissions"""

    async def submit_answers(
        self,
        db: AsyncSession,
        token: str,
        answers: List[CandidateAnswer],
        time_taken: int,
        now: Optional[datetime] = None
    ) -> AssessmentResult:
        """
        Score and persist a submission for the link behind token

        Args:
            db: Database session
            token: Candidate link token
            answers: Answers as submitted; the score is always recomputed
            time_taken: Elapsed minutes, clamped to the assessment budget
            now: Submission time (defaults to the current UTC time)

        Returns:
            The stored AssessmentResult

        Raises:
            NotFoundError: unknown token or missing assessment
            ExpiredError: submitted after expiry plus the total time budget
            AlreadyCompletedError: a result already exists for this link
        """
        now = now or datetime.now(timezone.utc)

        link = await LinkRepository(db).get_link_by_token(token)
        if not link:
            raise NotFoundError()

        assessment = await AssessmentRepository(db).get_assessment_by_id(link.assessment_id)
        if not assessment:
            raise NotFoundError("Assessment not found")
        definition = AssessmentDefinition.from_model(assessment)

        # A session opened just before expiry may still run its full budget
        deadline = as_utc(link.expires_at) + timedelta(minutes=definition.total_time)
        if now > deadline:
            raise ExpiredError()

        result_repo = ResultRepository(db)
        if link.is_used or await result_repo.get_result_by_link_id(link.link_id):
            logger.info(f"Submission rejected for link {link.link_id}: already completed")
            raise AlreadyCompletedError()

        questions = definition.questions
        time_taken = min(max(0, int(time_taken)), definition.total_time)
        selections = selections_from_answers(questions, answers)
        reported_time = {a.question_id: a.time_spent for a in answers if a.time_spent}
        default_time = 0 if reported_time else even_time_split(time_taken * 60, len(questions))

        result = await result_repo.create_result(
            link_id=link.link_id,
            answers=[a.model_dump() for a in build_answers(
                questions, selections, reported_time, default_time)],
            score=score_answers(questions, selections),
            total_questions=len(questions),
            time_taken=time_taken,
            completed_at=now,
        )
        logger.info(
            f"Stored result {result.result_id} for link {link.link_id}: "
            f"{result.score}/{result.total_questions} in {result.time_taken} min")

        self._notify_completion(link, definition, result)
        await log_major_event(
            action="assessment_submitted",
            status="success",
            actor=link.candidate_email,
            details=f"Scored {result.score}/{result.total_questions} on assessment {definition.assessment_id}.",
            entity=str(result.result_id),
            source="submission_service"
        )
        return result

    async def submit_session(self, db: AsyncSession, token: str, submission: SessionSubmission) -> AssessmentResult:
        """Persist a submission produced by a server-side CandidateSession"""
        return await self.submit_answers(
            db, token, submission.answers, submission.time_taken, now=submission.finished_at)

    def _notify_completion(self, link: AssessmentLink, definition: AssessmentDefinition, result: AssessmentResult):
        try:
            get_notification_service().send_completion_confirmation(
                candidate_email=link.candidate_email,
                candidate_name=link.candidate_name,
                assessment_title=definition.title,
                score=result.score,
                total_questions=result.total_questions,
            )
        except TransportFailureError as e:
            logger.warning(
                f"Completion email for link {link.link_id} not delivered: {e.message}")


# Global service instance
submission_service = SubmissionService()
