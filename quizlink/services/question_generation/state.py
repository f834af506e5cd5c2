from dataclasses import dataclass, field
from typing import List, Optional
from pydantic import BaseModel, Field
from quizlink.schemas.assessment_schema import Question


class GeneratedQuestion(BaseModel):
    question: str = Field(
        ...,
        description="The question text, ending with a question mark where natural."
    )
    options: List[str] = Field(
        ...,
        description="Exactly four answer options, plain text, no letter prefixes."
    )
    correct_answer: int = Field(
        ...,
        description="Zero-based index into options of the single correct option."
    )
    explanation: str = Field(
        default="",
        description="One or two sentences explaining why the correct option is right."
    )


class GeneratedQuestionSet(BaseModel):
    questions: List[GeneratedQuestion] = Field(
        default_factory=list,
        description="The generated multiple choice questions."
    )


@dataclass
class State:
    """State for the question generation graph."""
    job_role: str = ""
    category: str = ""
    difficulty: str = ""
    count: int = 5
    raw_questions: List[GeneratedQuestion] = field(default_factory=list)
    questions: List[Question] = field(default_factory=list)
    error: Optional[str] = None
