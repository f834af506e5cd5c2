from sqlalchemy import Column, Integer, String, DateTime, Text
from datetime import datetime, timezone
from quizlink.db.base import Base


class AuditEvent(Base):
    """Major admin and candidate actions: assessments, links, submissions"""
    __tablename__ = 'audit_events'

    event_id = Column(Integer, primary_key=True, autoincrement=True)
    occurred_at = Column(DateTime(timezone=True), nullable=False,
                         default=lambda: datetime.now(timezone.utc))
    action = Column(String(100), nullable=False, index=True)
    status = Column(String(20), nullable=False)
    # Admin id or candidate e-mail
    actor = Column(String(255), nullable=True)
    entity = Column(String(100), nullable=True)
    source = Column(String(100), nullable=True)
    details = Column(Text, nullable=True)
