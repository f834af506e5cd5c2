from typing import Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from quizlink.models.user import User, UserRole


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    """E-mails are stored lower case, so the lookup is case-insensitive"""
    result = await db.execute(select(User).where(User.email == email.strip().lower()))
    return result.scalar_one_or_none()


async def create_user(db: AsyncSession, full_name: str, email: str, role: UserRole = UserRole.admin) -> User:
    user = User(full_name=full_name, email=email.strip().lower(), role=role)
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user
