from quizlink.models.user import UserRole
from quizlink.core.security import create_access_token, decode_token
from quizlink.core.validators import InputValidator
from quizlink.repositories.user_repo import get_user_by_email
from quizlink.schemas.user_schema import UserPublic
from fastapi import HTTPException, status, Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession
from quizlink.db.database import get_db
from quizlink.services.auth.AuthInterface import IAuthService
import logging

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/auth/login")


class AuthService(IAuthService):
    async def login(self, email: str, db):
        """Admin login by e-mail lookup; there is no password check"""
        email = InputValidator.validate_email(email)

        user = await get_user_by_email(db, email)
        if not user or user.role != UserRole.admin:
            logger.info(f"Login failed for {email}")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

        token = create_access_token({"sub": user.email, "user_id": user.user_id})
        return {
            "token": token,
            "user": UserPublic.model_validate(user)
        }


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db)
):
    payload = decode_token(token)
    if not payload or "sub" not in payload:
        raise HTTPException(
            status_code=401, detail="Invalid authentication credentials")
    user = await get_user_by_email(db, payload["sub"])
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


def admin_required(current_user=Depends(get_current_user)):
    """Dependency to ensure only admins can access certain endpoints"""
    if current_user.role != UserRole.admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required"
        )
    return current_user
