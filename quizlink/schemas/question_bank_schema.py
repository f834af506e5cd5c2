from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Optional, List
from datetime import datetime
from quizlink.schemas.assessment_schema import OPTIONS_PER_QUESTION


class QuestionBankCreate(BaseModel):
    question_text: str = Field(..., min_length=1, max_length=2000)
    options: List[str] = Field(..., min_length=OPTIONS_PER_QUESTION, max_length=OPTIONS_PER_QUESTION)
    correct_answer: int = Field(..., ge=0)
    category: str = Field(..., min_length=1, max_length=50)
    difficulty: str = Field(..., min_length=1, max_length=20)
    tags: Optional[List[str]] = None

    @model_validator(mode="after")
    def check_correct_answer(self):
        if self.correct_answer >= len(self.options):
            raise ValueError("correct_answer must index one of the options")
        return self


class QuestionBankUpdate(BaseModel):
    question_text: Optional[str] = Field(None, min_length=1, max_length=2000)
    options: Optional[List[str]] = Field(None, min_length=OPTIONS_PER_QUESTION, max_length=OPTIONS_PER_QUESTION)
    correct_answer: Optional[int] = Field(None, ge=0)
    category: Optional[str] = Field(None, min_length=1, max_length=50)
    difficulty: Optional[str] = Field(None, min_length=1, max_length=20)
    tags: Optional[List[str]] = None


class QuestionBankResponse(QuestionBankCreate):
    question_id: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class QuestionGenerationRequest(BaseModel):
    job_role: str = Field(..., min_length=2, max_length=100)
    category: str = Field(..., min_length=1, max_length=50)
    difficulty: str = Field(..., min_length=1, max_length=20)
    count: int = Field(..., ge=1, le=20)
