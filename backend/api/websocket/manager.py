import logging
from typing import Dict, Set
from fastapi import WebSocket

logger = logging.getLogger(__name__)

STAFF_CHANNEL = "staff"


def table_channel(table_id: int) -> str:
    return f"table:{table_id}"


class ConnectionManager:
    """Manages WebSocket connections grouped by feed channel."""

    def __init__(self):
        # channel -> Set[WebSocket]
        self.active_connections: Dict[str, Set[WebSocket]] = {}
        # WebSocket -> channel
        self.websocket_to_channel: Dict[WebSocket, str] = {}

    async def connect(self, websocket: WebSocket, channel: str):
        """Connect a WebSocket to a channel."""
        await websocket.accept()

        if channel not in self.active_connections:
            self.active_connections[channel] = set()

        self.active_connections[channel].add(websocket)
        self.websocket_to_channel[websocket] = channel

    def disconnect(self, websocket: WebSocket):
        """Disconnect a WebSocket from its channel."""
        if websocket in self.websocket_to_channel:
            channel = self.websocket_to_channel[websocket]
            if channel in self.active_connections:
                self.active_connections[channel].discard(websocket)
                if not self.active_connections[channel]:
                    del self.active_connections[channel]
            del self.websocket_to_channel[websocket]

    def connection_count(self, channel: str) -> int:
        return len(self.active_connections.get(channel, ()))

    async def send_personal_message(self, message: dict, websocket: WebSocket):
        """Send a message to a specific WebSocket."""
        await websocket.send_json(message)

    async def broadcast(self, message: dict, channel: str):
        """Broadcast a message to all connections on a channel."""
        connections = list(self.active_connections.get(channel, ()))
        if not connections:
            logger.debug(f"[ConnectionManager] No active connections on {channel}")
            return

        disconnected = set()
        sent_count = 0
        for connection in connections:
            try:
                await connection.send_json(message)
                sent_count += 1
            except Exception as e:
                logger.warning(f"[ConnectionManager] Error sending message on {channel}: {e}")
                disconnected.add(connection)

        logger.info(
            f"[ConnectionManager] Broadcast '{message.get('type', 'unknown')}' on {channel}: "
            f"{sent_count} sent, {len(disconnected)} failed"
        )

        # Clean up disconnected connections
        for conn in disconnected:
            self.disconnect(conn)


manager = ConnectionManager()
