from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from datetime import datetime


class LinkCreate(BaseModel):
    candidate_email: EmailStr
    candidate_name: str = Field(..., min_length=2, max_length=100)

    @field_validator('candidate_email')
    @classmethod
    def normalize_email(cls, v):
        return v.lower().strip()


class LinkResponse(BaseModel):
    link_id: int
    assessment_id: int
    candidate_email: str
    candidate_name: str
    link_token: str
    expires_at: datetime
    is_used: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class GeneratedLinkResponse(BaseModel):
    link: LinkResponse
    assessment_url: str
    invitation_sent: bool
    message: str
