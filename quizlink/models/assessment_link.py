from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from quizlink.db.base import Base
from datetime import datetime, timezone


class AssessmentLink(Base):
    __tablename__ = "assessment_links"

    link_id = Column(Integer, primary_key=True, index=True)
    assessment_id = Column(Integer, ForeignKey(
        "assessments.assessment_id"), nullable=False)
    candidate_email = Column(String(255), nullable=False)
    candidate_name = Column(String(100), nullable=False)
    link_token = Column(String(64), unique=True, nullable=False, index=True)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    is_used = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True),
                        default=lambda: datetime.now(timezone.utc))

    assessment = relationship("Assessment", back_populates="links")
    result = relationship("AssessmentResult", back_populates="link", uselist=False)
