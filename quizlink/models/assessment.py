from sqlalchemy import Column, Integer, DateTime, String, Text, ForeignKey, JSON
from sqlalchemy.orm import relationship
from quizlink.db.base import Base
from datetime import datetime, timezone


class Assessment(Base):
    __tablename__ = "assessments"

    assessment_id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    admin_id = Column(Integer, ForeignKey("users.user_id"), nullable=False)

    # Budgets, in minutes
    total_time = Column(Integer, nullable=False)
    time_per_question = Column(Integer, nullable=False)

    # Ordered list of question dicts, see schemas.assessment_schema.Question
    questions = Column(JSON, nullable=False, default=list)

    # Audit fields
    created_at = Column(DateTime(timezone=True),
                        default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime(timezone=True),
                        default=lambda: datetime.now(timezone.utc),
                        onupdate=lambda: datetime.now(timezone.utc))

    admin = relationship("User")
    links = relationship("AssessmentLink", back_populates="assessment")
