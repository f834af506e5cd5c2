from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
from quizlink.core.exceptions import AssessmentLockedError
from quizlink.db.database import get_db
from quizlink.repositories.assessment_repo import AssessmentRepository
from quizlink.schemas.assessment_schema import AssessmentCreate, AssessmentUpdate, AssessmentResponse
from quizlink.schemas.link_schema import LinkCreate, LinkResponse, GeneratedLinkResponse
from quizlink.schemas.result_schema import ResultWithCandidate
from quizlink.services.assessment_service import assessment_service
from quizlink.services.auth.auth_service import admin_required
import logging

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/", response_model=AssessmentResponse, status_code=201)
async def create_assessment(
    data: AssessmentCreate,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(admin_required)
):
    return await assessment_service.create_assessment(current_user.user_id, data, db)


@router.get("/", response_model=List[AssessmentResponse])
async def list_assessments(
    db: AsyncSession = Depends(get_db),
    current_user=Depends(admin_required)
):
    """All assessments of the current admin, newest first"""
    return await AssessmentRepository(db).get_assessments_by_admin(current_user.user_id)


@router.get("/{assessment_id}", response_model=AssessmentResponse)
async def get_assessment(
    assessment_id: int,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(admin_required)
):
    return await assessment_service.get_owned_assessment(assessment_id, current_user.user_id, db)


@router.put("/{assessment_id}", response_model=AssessmentResponse)
async def update_assessment(
    assessment_id: int,
    data: AssessmentUpdate,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(admin_required)
):
    try:
        return await assessment_service.update_assessment(assessment_id, current_user.user_id, data, db)
    except AssessmentLockedError as e:
        raise HTTPException(status_code=409, detail=e.message)


@router.delete("/{assessment_id}")
async def delete_assessment(
    assessment_id: int,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(admin_required)
):
    try:
        await assessment_service.delete_assessment(assessment_id, current_user.user_id, db)
    except AssessmentLockedError as e:
        raise HTTPException(status_code=409, detail=e.message)
    return {"message": "Assessment deleted successfully"}


@router.post("/{assessment_id}/generate-link", response_model=GeneratedLinkResponse, status_code=201)
async def generate_link(
    assessment_id: int,
    data: LinkCreate,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(admin_required)
):
    """Create a single-use link for one candidate and send the invitation"""
    return await assessment_service.generate_link(assessment_id, current_user.user_id, data, db)


@router.get("/{assessment_id}/links", response_model=List[LinkResponse])
async def get_links(
    assessment_id: int,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(admin_required)
):
    return await assessment_service.get_links(assessment_id, current_user.user_id, db)


@router.get("/{assessment_id}/results", response_model=List[ResultWithCandidate])
async def get_results(
    assessment_id: int,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(admin_required)
):
    return await assessment_service.get_results(assessment_id, current_user.user_id, db)
