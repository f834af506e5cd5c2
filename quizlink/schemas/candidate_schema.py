from pydantic import BaseModel, Field
from typing import Optional, List
from quizlink.schemas.assessment_schema import CandidateQuestion


class CandidateIdentity(BaseModel):
    name: str
    email: str


class CandidateAssessmentView(BaseModel):
    """What a candidate receives after a link resolves"""
    id: int
    title: str
    description: Optional[str]
    total_time: int
    time_per_question: int
    questions: List[CandidateQuestion]


class CandidateAccessResponse(BaseModel):
    assessment: CandidateAssessmentView
    candidate: CandidateIdentity


class UnavailableResponse(BaseModel):
    error: str = Field("Assessment unavailable")
    reason: str
