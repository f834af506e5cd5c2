"""
AI Service for OpenAI integration
Generates multiple choice questions through the question_generation graph
"""
import logging
from typing import List
from quizlink.core.config import settings
from quizlink.schemas.assessment_schema import Question
from quizlink.schemas.question_bank_schema import QuestionGenerationRequest
from quizlink.services.question_generation import graph as question_generation_graph
from quizlink.services.question_generation.state import State


logger = logging.getLogger(__name__)


class AIConfigurationError(Exception):
    pass


class QuestionGenerationError(Exception):
    pass


class AIService:
    """AI Service for OpenAI integration following Single Responsibility Principle"""

    def __init__(self):
        if not settings.OPENAI_API_KEY:
            logger.warning("OPENAI_API_KEY is missing! AI question generation will not work.")

    async def generate_questions(self, request: QuestionGenerationRequest) -> List[Question]:
        """
        Generate questions for a job role

        Raises:
            AIConfigurationError: no API key configured
            QuestionGenerationError: the model failed or produced nothing usable
        """
        if not settings.OPENAI_API_KEY:
            raise AIConfigurationError("AI API key not configured")

        state = State(
            job_role=request.job_role,
            category=request.category,
            difficulty=request.difficulty,
            count=request.count,
        )
        result_state = await question_generation_graph.ainvoke(state)
        if result_state.get("error"):
            logger.error(f"Question generation error: {result_state['error']}")
            raise QuestionGenerationError(result_state["error"])

        questions = result_state.get("questions") or []
        logger.info(
            f"Generated {len(questions)} questions for {request.job_role} ({request.category}, {request.difficulty})")
        return questions


ai_service = AIService()
