from datetime import datetime
from pydantic import BaseModel, ConfigDict, EmailStr, field_validator
from typing import Optional
from quizlink.models.user import UserRole

class UserPublic(BaseModel):
    user_id: int
    full_name: str
    email: str
    role: UserRole
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class UserLogin(BaseModel):
    email: EmailStr

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        return v.lower().strip()

class LoginResponse(BaseModel):
    token: str
    user: UserPublic
