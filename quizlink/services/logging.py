from sqlalchemy import insert
from datetime import datetime, timezone
from quizlink.models import AuditEvent
from quizlink.db.database import AsyncSessionLocal
from typing import Optional
import logging

logger = logging.getLogger(__name__)


async def log_major_event(action: str, status: str, actor: Optional[str] = None, details: Optional[str] = None, entity: Optional[str] = None, source: Optional[str] = None):
    """
    Record an audit event in its own session.

    Best-effort: a failed write is logged and never reaches the caller,
    whose own transaction is already committed.
    """
    logger.debug(
        f"Audit event: action={action}, status={status}, actor={actor}, entity={entity}, source={source}")

    try:
        async with AsyncSessionLocal() as session:
            result = await session.execute(insert(AuditEvent), [{
                'occurred_at': datetime.now(timezone.utc),
                'action': action,
                'status': status,
                'actor': actor,
                'entity': entity,
                'source': source,
                'details': details,
            }])
            await session.commit()
            return result
    except Exception as e:
        logger.error(f"Audit logging error for {action}: {e}", exc_info=True)
        return None
