from sqlalchemy import Column, Integer, String, Enum as SqlEnum, DateTime, func
from quizlink.db.base import Base
import enum

class UserRole(enum.Enum):
    admin = "admin"
    candidate = "candidate"

class User(Base):
    __tablename__ = "users"
    user_id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    full_name = Column(String(100), nullable=False)
    role = Column(SqlEnum(UserRole), nullable=False, default=UserRole.admin)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
