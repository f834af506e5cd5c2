from sqlalchemy import Column, Integer, String, Text, DateTime, JSON
from quizlink.db.base import Base
from datetime import datetime, timezone


class QuestionBankItem(Base):
    __tablename__ = "question_bank"

    question_id = Column(Integer, primary_key=True, index=True)
    question_text = Column(Text, nullable=False)
    options = Column(JSON, nullable=False)
    correct_answer = Column(Integer, nullable=False)  # index into options
    category = Column(String(50), nullable=False, index=True)
    difficulty = Column(String(20), nullable=False, index=True)
    tags = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True),
                        default=lambda: datetime.now(timezone.utc))
