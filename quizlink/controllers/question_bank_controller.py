from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
from quizlink.db.database import get_db
from quizlink.repositories.question_bank_repo import QuestionBankRepository
from quizlink.schemas.question_bank_schema import (
    QuestionBankCreate, QuestionBankUpdate, QuestionBankResponse
)
from quizlink.services.auth.auth_service import admin_required

router = APIRouter()


@router.get("/", response_model=List[QuestionBankResponse])
async def list_questions(
    category: Optional[str] = Query(None, description="Filter by category"),
    difficulty: Optional[str] = Query(None, description="Filter by difficulty"),
    db: AsyncSession = Depends(get_db),
    current_user=Depends(admin_required)
):
    return await QuestionBankRepository(db).get_questions(category, difficulty)


@router.post("/", response_model=QuestionBankResponse, status_code=201)
async def create_question(
    data: QuestionBankCreate,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(admin_required)
):
    return await QuestionBankRepository(db).create_question(data)


@router.put("/{question_id}", response_model=QuestionBankResponse)
async def update_question(
    question_id: int,
    data: QuestionBankUpdate,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(admin_required)
):
    repo = QuestionBankRepository(db)
    item = await repo.get_question_by_id(question_id)
    if not item:
        raise HTTPException(status_code=404, detail="Question not found")
    try:
        return await repo.update_question(item, data)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/{question_id}")
async def delete_question(
    question_id: int,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(admin_required)
):
    deleted = await QuestionBankRepository(db).delete_question(question_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Question not found")
    return {"message": "Question deleted successfully"}
