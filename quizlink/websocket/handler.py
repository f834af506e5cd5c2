import json
import logging
import asyncio
from datetime import datetime, timezone
from functools import partial
from typing import Dict, Optional
from fastapi import WebSocket, WebSocketDisconnect
from sqlalchemy.ext.asyncio import AsyncSession
from quizlink.core.config import settings
from quizlink.core.exceptions import AssessmentError, UNAVAILABLE_ERRORS
from quizlink.services.candidate_session import (
    CandidateSession, SessionEvent, SessionRunner, SessionSubmission
)
from quizlink.services.link_resolver import resolve_link
from quizlink.services.submission_service import submission_service
from quizlink.websocket.connection_manager import connection_manager

logger = logging.getLogger(__name__)

CLOSE_CODES = {
    "not_found": 4004,
    "expired": 4010,
    "already_completed": 4009,
    "session_active": 4009,
}


class WebSocketMessageType:

    # Client -> server
    START_ASSESSMENT = "start_assessment"
    SELECT_ANSWER = "select_answer"
    NEXT_QUESTION = "next_question"
    PREVIOUS_QUESTION = "previous_question"
    SUBMIT_ASSESSMENT = "submit_assessment"
    HEARTBEAT = "heartbeat"

    # Server -> client
    ASSESSMENT_INFO = "assessment_info"
    ASSESSMENT_STARTED = "assessment_started"
    QUESTION = "question"
    ANSWER_RECORDED = "answer_recorded"
    TIME_REMAINING = "time_remaining"
    SYSTEM_MESSAGE = "system_message"
    ASSESSMENT_COMPLETED = "assessment_completed"
    ERROR = "error"
    PONG = "pong"


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


class CandidateWebSocketHandler:
    """
    Runs one candidate session per websocket

    The countdowns, navigation and scoring all happen here on the server;
    the client only renders what it is sent and forwards candidate actions.
    """

    def __init__(self, tick_seconds: Optional[float] = None):
        self.tick_seconds = tick_seconds

    async def handle_connection(self, websocket: WebSocket, token: str, db: AsyncSession):
        await websocket.accept()

        try:
            resolved = await resolve_link(db, token)
        except UNAVAILABLE_ERRORS as e:
            await self._reject(websocket, e.reason, e.message)
            return

        connection = await connection_manager.connect(websocket, token, resolved.link.link_id)
        if not connection:
            await self._reject(websocket, "session_active",
                               "This assessment is already open in another window")
            return

        session = CandidateSession(resolved.assessment)
        runner = SessionRunner(
            session,
            on_submit=partial(self._on_submit, token, db),
            on_event=partial(self._on_event, token),
            on_tick=partial(self._on_tick, token),
            tick_seconds=self.tick_seconds or settings.SESSION_TICK_SECONDS,
        )
        connection.runner = runner

        try:
            definition = resolved.assessment
            await self._send_message(token, {
                "type": WebSocketMessageType.ASSESSMENT_INFO,
                "data": {
                    "assessment_id": definition.assessment_id,
                    "title": definition.title,
                    "description": definition.description,
                    "total_time": definition.total_time,
                    "time_per_question": definition.time_per_question,
                    "total_questions": len(definition.questions),
                    "candidate": resolved.candidate.model_dump(),
                }
            })
            await self._handle_messages(token, websocket, runner)
            await websocket.close(code=1000)

        except WebSocketDisconnect:
            logger.info(f"WebSocket disconnected for link {resolved.link.link_id}")
        except Exception as e:
            logger.error(f"Error in WebSocket handler: {str(e)}", exc_info=True)
            await self._send_error(token, "internal_error", f"Internal server error: {str(e)}")
        finally:
            await connection_manager.disconnect(token)

    async def _handle_messages(self, token: str, websocket: WebSocket, runner: SessionRunner):
        """Read candidate messages until the session is finished or the socket drops"""
        finished = asyncio.create_task(runner.wait())
        try:
            while not runner.finished:
                receive = asyncio.create_task(websocket.receive_text())
                done, _ = await asyncio.wait(
                    {receive, finished}, return_when=asyncio.FIRST_COMPLETED)
                if receive not in done:
                    receive.cancel()
                    break

                try:
                    message = json.loads(receive.result())
                except json.JSONDecodeError:
                    await self._send_error(token, "invalid_message", "Invalid JSON format")
                    continue

                message_type = message.get("type") if isinstance(message, dict) else None
                if not isinstance(message_type, str) or not message_type:
                    await self._send_error(token, "invalid_message", "Message type is required")
                    continue

                logger.info(f"Received message: {message_type} for link token {token[:8]}")
                await self._route_message(token, runner, message_type, message.get("data") or {})
        finally:
            finished.cancel()

    async def _route_message(self, token: str, runner: SessionRunner, message_type: str, data: Dict):
        handlers = {
            WebSocketMessageType.START_ASSESSMENT: self._handle_start,
            WebSocketMessageType.SELECT_ANSWER: self._handle_select_answer,
            WebSocketMessageType.NEXT_QUESTION: self._handle_next,
            WebSocketMessageType.PREVIOUS_QUESTION: self._handle_previous,
            WebSocketMessageType.SUBMIT_ASSESSMENT: self._handle_submit,
            WebSocketMessageType.HEARTBEAT: self._handle_heartbeat,
        }

        handler = handlers.get(message_type)
        if not handler:
            await self._send_error(token, "invalid_message", f"Unknown message type: {message_type}")
            return
        if not isinstance(data, dict):
            await self._send_error(token, "invalid_message", "Message data must be an object")
            return
        try:
            await handler(token, runner, data)
        except AssessmentError as e:
            await self._send_error(token, e.reason, e.message)

    async def _handle_start(self, token: str, runner: SessionRunner, data: Dict):
        runner.start()
        session = runner.session
        await self._send_message(token, {
            "type": WebSocketMessageType.ASSESSMENT_STARTED,
            "data": {
                "started_at": session.started_at.isoformat(),
                "total_remaining": session.total_remaining,
                "question_remaining": session.question_remaining,
            }
        })
        await self._send_question(token, runner.session, "start")

    async def _handle_select_answer(self, token: str, runner: SessionRunner, data: Dict):
        question_id = data.get("question_id")
        option_index = data.get("option_index")
        if not isinstance(question_id, str):
            await self._send_error(token, "invalid_message", "question_id must be a string")
            return
        runner.session.record_answer(question_id, option_index)
        await self._send_message(token, {
            "type": WebSocketMessageType.ANSWER_RECORDED,
            "data": {"question_id": question_id, "option_index": option_index}
        })

    async def _handle_next(self, token: str, runner: SessionRunner, data: Dict):
        moved = runner.session.next_question()
        await self._send_question(token, runner.session, "next" if moved else "clamped")

    async def _handle_previous(self, token: str, runner: SessionRunner, data: Dict):
        moved = runner.session.previous_question()
        await self._send_question(token, runner.session, "previous" if moved else "clamped")

    async def _handle_submit(self, token: str, runner: SessionRunner, data: Dict):
        await runner.submit()

    async def _handle_heartbeat(self, token: str, runner: SessionRunner, data: Dict):
        await self._send_message(token, {
            "type": WebSocketMessageType.PONG,
            "data": {"timestamp": _timestamp()}
        })

    async def _on_tick(self, token: str, session: CandidateSession):
        await self._send_message(token, {
            "type": WebSocketMessageType.TIME_REMAINING,
            "data": {
                "question_index": session.current_index,
                "total_remaining": session.total_remaining,
                "question_remaining": session.question_remaining,
            }
        })

    async def _on_event(self, token: str, event: SessionEvent, session: CandidateSession):
        if event == SessionEvent.AUTO_ADVANCED:
            await self._send_question(token, session, "auto_advance")
        elif event == SessionEvent.TIME_EXPIRED:
            await self._send_message(token, {
                "type": WebSocketMessageType.SYSTEM_MESSAGE,
                "data": {
                    "message": "Time's up! Your assessment is being automatically submitted.",
                    "is_time_up": True,
                    "timestamp": _timestamp()
                }
            })

    async def _on_submit(self, token: str, db: AsyncSession, submission: SessionSubmission):
        """Persist the finished session and tell the candidate how it went

        Failures are reported to the candidate here; the runner then
        terminates the session either way.
        """
        try:
            result = await submission_service.submit_session(db, token, submission)
        except UNAVAILABLE_ERRORS as e:
            await self._send_error(token, e.reason, "Assessment unavailable")
            return None
        except Exception as e:
            logger.error(f"Error submitting session: {str(e)}", exc_info=True)
            await self._send_error(token, "submission_failed", "Failed to submit assessment")
            return None

        await self._send_message(token, {
            "type": WebSocketMessageType.ASSESSMENT_COMPLETED,
            "data": {
                "result_id": result.result_id,
                "score": result.score,
                "total_questions": result.total_questions,
                "time_taken": result.time_taken,
                "reason": submission.reason.value,
                "message": "Assessment completed! Thank you for participating.",
            }
        })
        return result

    async def _send_question(self, token: str, session: CandidateSession, reason: str):
        await self._send_message(token, {
            "type": WebSocketMessageType.QUESTION,
            "data": {**session.snapshot(), "reason": reason}
        })

    async def _send_message(self, token: str, message: Dict):
        """Send a message to a specific connection"""
        success = await connection_manager.send_personal_message(token, message)
        if not success:
            logger.warning("Failed to deliver websocket message")

    async def _send_error(self, token: str, reason: str, error_message: str):
        await self._send_message(token, {
            "type": WebSocketMessageType.ERROR,
            "data": {
                "reason": reason,
                "error": error_message,
                "timestamp": _timestamp()
            }
        })

    async def _reject(self, websocket: WebSocket, reason: str, error_message: str):
        await websocket.send_json({
            "type": WebSocketMessageType.ERROR,
            "data": {
                "reason": reason,
                "error": "Assessment unavailable",
                "detail": error_message,
                "timestamp": _timestamp()
            }
        })
        await websocket.close(code=CLOSE_CODES.get(reason, 4000))


websocket_handler = CandidateWebSocketHandler()
