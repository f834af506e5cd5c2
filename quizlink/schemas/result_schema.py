from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from datetime import datetime

# Stored for questions the candidate never answered; never a valid option index
UNANSWERED = -1


class CandidateAnswer(BaseModel):
    question_id: str
    selected_answer: int = Field(UNANSWERED, ge=UNANSWERED)
    time_spent: int = Field(0, ge=0, description="Seconds spent on the question")


class SubmissionRequest(BaseModel):
    """Candidate submission over HTTP.

    Only the answers and the elapsed time are accepted; the score is always
    recomputed on the server.
    """
    answers: List[CandidateAnswer] = Field(default_factory=list)
    time_taken: int = Field(0, ge=0, description="Elapsed minutes reported by the client")


class AssessmentResultResponse(BaseModel):
    result_id: int
    assessment_link_id: int
    answers: List[CandidateAnswer]
    score: int
    total_questions: int
    time_taken: int
    completed_at: datetime
    feedback: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ResultWithCandidate(AssessmentResultResponse):
    candidate_name: str
    candidate_email: str
    percentage_score: float


class DashboardStats(BaseModel):
    total_assessments: int
    active_links: int
    completed: int
    avg_score: str
