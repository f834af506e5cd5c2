# quizlink/schemas/assessment_schema.py
import uuid
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Optional, List
from datetime import datetime

OPTIONS_PER_QUESTION = 4


class Question(BaseModel):
    """One multiple-choice question as stored inside an assessment"""
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    text: str = Field(..., min_length=1, max_length=2000)
    options: List[str] = Field(..., min_length=OPTIONS_PER_QUESTION, max_length=OPTIONS_PER_QUESTION)
    correct_answer: int = Field(..., ge=0, description="Index of the correct option")
    category: str = Field(..., min_length=1, max_length=50)
    difficulty: str = Field(..., min_length=1, max_length=20)
    explanation: Optional[str] = None

    @model_validator(mode="after")
    def check_correct_answer(self):
        if self.correct_answer >= len(self.options):
            raise ValueError("correct_answer must index one of the options")
        return self


class CandidateQuestion(BaseModel):
    """Question as shown to a candidate - never carries the correct answer"""
    id: str
    text: str
    options: List[str]
    category: str
    difficulty: str


class AssessmentBase(BaseModel):
    title: str = Field(..., min_length=3, max_length=200)
    description: Optional[str] = Field(None, max_length=5000)
    total_time: int = Field(..., ge=1, le=480, description="Total time budget in minutes")
    time_per_question: int = Field(..., ge=1, le=60, description="Per-question time budget in minutes")

    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        if not v.strip():
            raise ValueError('Title cannot be empty')
        return v.strip()


class AssessmentCreate(AssessmentBase):
    questions: List[Question] = Field(..., min_length=1)


class AssessmentUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=3, max_length=200)
    description: Optional[str] = Field(None, max_length=5000)
    total_time: Optional[int] = Field(None, ge=1, le=480)
    time_per_question: Optional[int] = Field(None, ge=1, le=60)
    questions: Optional[List[Question]] = Field(None, min_length=1)


class AssessmentResponse(AssessmentBase):
    assessment_id: int
    admin_id: int
    questions: List[Question]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class AssessmentDefinition(BaseModel):
    """Immutable snapshot of an assessment used while a candidate session runs"""
    assessment_id: int
    title: str
    description: Optional[str] = None
    total_time: int
    time_per_question: int
    questions: List[Question]

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_model(cls, assessment) -> "AssessmentDefinition":
        return cls(
            assessment_id=assessment.assessment_id,
            title=assessment.title,
            description=assessment.description,
            total_time=assessment.total_time,
            time_per_question=assessment.time_per_question,
            questions=[Question.model_validate(q) for q in assessment.questions or []],
        )

    @property
    def total_seconds(self) -> int:
        return int(self.total_time * 60)

    @property
    def question_seconds(self) -> int:
        return int(self.time_per_question * 60)

    def candidate_questions(self) -> List[CandidateQuestion]:
        return [
            CandidateQuestion(
                id=q.id, text=q.text, options=q.options,
                category=q.category, difficulty=q.difficulty)
            for q in self.questions
        ]
