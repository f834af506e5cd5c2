from fastapi import APIRouter, Depends, HTTPException
from quizlink.services.auth.AuthInterface import IAuthService
from quizlink.services.auth.auth_service import AuthService, get_current_user
import quizlink.schemas.user_schema as user_schema
from quizlink.db.database import get_db
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter()
auth_service: IAuthService = AuthService()


@router.post("/login", response_model=user_schema.LoginResponse)
async def login(data: user_schema.UserLogin, db: AsyncSession = Depends(get_db)):
    try:
        return await auth_service.login(data.email, db)
    except HTTPException as e:
        raise e


@router.get("/me", response_model=user_schema.UserPublic)
async def read_current_user(current_user=Depends(get_current_user)):
    """Get current user information"""
    return current_user
