from fastapi import APIRouter, WebSocket, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from quizlink.db.database import get_db
from quizlink.websocket.handler import websocket_handler

router = APIRouter()


@router.websocket("/ws/take/{token}")
async def websocket_take_endpoint(
    websocket: WebSocket,
    token: str,
    db: AsyncSession = Depends(get_db)
):
    """
    WebSocket endpoint running a timed candidate session on the server

    Message Types (client -> server):
    - start_assessment: Start both countdowns
    - select_answer: {question_id, option_index}
    - next_question / previous_question: Navigate, clamped at both ends
    - submit_assessment: Submit now
    - heartbeat: Keep connection alive

    The server pushes question, time_remaining, system_message,
    assessment_completed and error messages. Unavailable links are closed
    with 4004 (not found), 4010 (expired) or 4009 (already completed or
    already open elsewhere).

    Example connection:
    ws://localhost:8000/ws/take/LINK_TOKEN
    """
    await websocket_handler.handle_connection(websocket, token, db)
