from sqlalchemy import Column, Integer, DateTime, Text, ForeignKey, JSON
from sqlalchemy.orm import relationship
from quizlink.db.base import Base
from datetime import datetime, timezone


class AssessmentResult(Base):
    __tablename__ = "assessment_results"

    result_id = Column(Integer, primary_key=True, index=True)
    # UNIQUE: at most one result per link, also under concurrent submissions
    assessment_link_id = Column(Integer, ForeignKey(
        "assessment_links.link_id"), nullable=False, unique=True)

    # List of {question_id, selected_answer, time_spent}
    answers = Column(JSON, nullable=False, default=list)
    score = Column(Integer, nullable=False)
    total_questions = Column(Integer, nullable=False)
    time_taken = Column(Integer, nullable=False)  # minutes
    completed_at = Column(DateTime(timezone=True),
                          default=lambda: datetime.now(timezone.utc), nullable=False)
    feedback = Column(Text, nullable=True)

    link = relationship("AssessmentLink", back_populates="result")
