import logging
from typing import Dict, Optional
from fastapi import WebSocket
from quizlink.services.candidate_session import SessionRunner

logger = logging.getLogger(__name__)


class ConnectionState:

    def __init__(self, websocket: WebSocket, token: str, link_id: int):
        self.websocket = websocket
        self.token = token
        self.link_id = link_id
        self.runner: Optional[SessionRunner] = None


class CandidateConnectionManager:
    """
    Tracks live candidate sessions, one websocket per link token

    A second connection for a token that already has a live session is
    refused; sessions are never shared between devices.

    Data Structures:
    - active_connections: Maps link token -> ConnectionState
    """

    def __init__(self):
        self.active_connections: Dict[str, ConnectionState] = {}

    async def connect(self, websocket: WebSocket, token: str, link_id: int) -> Optional[ConnectionState]:
        """Register an accepted websocket. Returns None if the token is busy"""
        if token in self.active_connections:
            logger.info(f"Refusing second connection for link {link_id}")
            return None

        connection_state = ConnectionState(websocket, token, link_id)
        self.active_connections[token] = connection_state
        logger.info(f"Candidate connected for link {link_id}")
        return connection_state

    async def disconnect(self, token: str):
        """Forget the connection and stop its session runner"""
        connection_state = self.active_connections.pop(token, None)
        if not connection_state:
            return
        runner = connection_state.runner
        if runner and not runner.finished:
            logger.info(
                f"Candidate left link {connection_state.link_id} before the session finished")
            await runner.abandon()

    async def send_personal_message(self, token: str, message: Dict) -> bool:
        connection_state = self.active_connections.get(token)
        if not connection_state:
            return False
        try:
            await connection_state.websocket.send_json(message)
            return True
        except Exception as e:
            logger.warning(f"Failed to send message for link {connection_state.link_id}: {str(e)}")
            return False


connection_manager = CandidateConnectionManager()
