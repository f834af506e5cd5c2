from fastapi import APIRouter, Depends, HTTPException
from typing import List
from quizlink.schemas.assessment_schema import Question
from quizlink.schemas.question_bank_schema import QuestionGenerationRequest
from quizlink.services.ai_service import ai_service, AIConfigurationError, QuestionGenerationError
from quizlink.services.auth.auth_service import admin_required
import logging

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/generate-questions", response_model=List[Question])
async def generate_questions(
    data: QuestionGenerationRequest,
    current_user=Depends(admin_required)
):
    """Draft questions with the LLM; nothing is stored until the admin saves an assessment"""
    try:
        return await ai_service.generate_questions(data)
    except AIConfigurationError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except QuestionGenerationError as e:
        raise HTTPException(status_code=502, detail=f"Question generation failed: {str(e)}")
