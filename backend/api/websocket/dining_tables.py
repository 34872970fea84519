import logging
from fastapi import WebSocket, WebSocketDisconnect
from sqlmodel import Session

from api.websocket.manager import manager, table_channel, STAFF_CHANNEL
from core.security import get_staff_name_from_token
from crud.dining_tables import get_table_by_id
from models.dining_tables import DiningTable
from schemas.dining_tables import DiningTableResponse
from schemas.websocket import (
    PongMessage,
    TableStateMessage,
    TableUpdatedMessage,
    ErrorMessage,
)

logger = logging.getLogger(__name__)


async def publish_table_update(table: DiningTable):
    """Push the current row to the table's own feed and to the staff feed."""
    message = TableUpdatedMessage(
        table=DiningTableResponse.model_validate(table)
    ).model_dump(mode='json')
    await manager.broadcast(message, table_channel(table.id))
    await manager.broadcast(message, STAFF_CHANNEL)


async def _receive_loop(websocket: WebSocket):
    """Answer pings until the client goes away. Feeds are server-to-client only."""
    while True:
        data = await websocket.receive_json()
        message_type = data.get("type") if isinstance(data, dict) else None

        if message_type == "ping":
            await manager.send_personal_message(PongMessage().model_dump(), websocket)
        else:
            logger.warning(f"[TableFeed] Unknown message type: {message_type}")
            await manager.send_personal_message(
                ErrorMessage(message=f"Unknown message type: {message_type}").model_dump(),
                websocket,
            )


async def websocket_table_endpoint(websocket: WebSocket, table_id: int, db: Session):
    """WebSocket feed of updates for a single dining table."""
    table = get_table_by_id(db, table_id)
    if not table:
        await websocket.close(code=1008, reason="Table not found")
        return

    channel = table_channel(table_id)
    await manager.connect(websocket, channel)
    logger.info(f"[TableFeed] Subscriber joined {channel} ({manager.connection_count(channel)} open)")

    try:
        # Send initial table state
        snapshot = TableStateMessage(table=DiningTableResponse.model_validate(table))
        await manager.send_personal_message(snapshot.model_dump(mode='json'), websocket)
        await _receive_loop(websocket)
    except WebSocketDisconnect:
        logger.info(f"[TableFeed] Subscriber left {channel}")
    except Exception as e:
        logger.error(f"[TableFeed] Closing {channel} after error: {e}")
        await websocket.close(code=1011, reason="Could not process message")
    finally:
        manager.disconnect(websocket)


async def websocket_staff_endpoint(websocket: WebSocket, token: str | None):
    """WebSocket feed of every table update, for floor staff screens."""
    staff_name = get_staff_name_from_token(token) if token else None
    if staff_name is None:
        await websocket.close(code=1008, reason="Invalid staff credentials")
        return

    await manager.connect(websocket, STAFF_CHANNEL)
    logger.info(f"[StaffFeed] {staff_name} connected")

    try:
        await _receive_loop(websocket)
    except WebSocketDisconnect:
        logger.info(f"[StaffFeed] {staff_name} disconnected")
    except Exception as e:
        logger.error(f"[StaffFeed] Closing feed of {staff_name} after error: {e}")
        await websocket.close(code=1011, reason="Could not process message")
    finally:
        manager.disconnect(websocket)
