"""
Link Resolver - decides whether a token may open a candidate session

Resolution is read-only: the link is only marked used by the submission
guard once a result has been written.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from quizlink.core.exceptions import AlreadyCompletedError, ExpiredError, NotFoundError
from quizlink.models.assessment_link import AssessmentLink
from quizlink.repositories.assessment_repo import AssessmentRepository
from quizlink.repositories.link_repo import LinkRepository
from quizlink.repositories.result_repo import ResultRepository
from quizlink.schemas.assessment_schema import AssessmentDefinition
from quizlink.schemas.candidate_schema import CandidateIdentity

logger = logging.getLogger(__name__)


@dataclass
class ResolvedLink:
    link: AssessmentLink
    assessment: AssessmentDefinition
    candidate: CandidateIdentity


def as_utc(value: datetime) -> datetime:
    """Treat naive timestamps from the database as UTC"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def is_expired(link: AssessmentLink, now: Optional[datetime] = None) -> bool:
    now = now or datetime.now(timezone.utc)
    return now >= as_utc(link.expires_at)


async def resolve_link(db: AsyncSession, token: str, now: Optional[datetime] = None) -> ResolvedLink:
    """
    Resolve a candidate token to its assessment and candidate identity

    Raises:
        NotFoundError: unknown token, or the assessment no longer exists
        ExpiredError: now is at or past the link expiry, whatever its usage
        AlreadyCompletedError: a result exists or the link is marked used
    """
    link = await LinkRepository(db).get_link_by_token(token)
    if not link:
        raise NotFoundError()

    if is_expired(link, now):
        logger.info(f"Link {link.link_id} rejected: expired")
        raise ExpiredError()

    existing = await ResultRepository(db).get_result_by_link_id(link.link_id)
    if existing or link.is_used:
        logger.info(f"Link {link.link_id} rejected: already completed")
        raise AlreadyCompletedError()

    assessment = await AssessmentRepository(db).get_assessment_by_id(link.assessment_id)
    if not assessment:
        raise NotFoundError("Assessment not found")

    return ResolvedLink(
        link=link,
        assessment=AssessmentDefinition.from_model(assessment),
        candidate=CandidateIdentity(
            name=link.candidate_name, email=link.candidate_email),
    )
