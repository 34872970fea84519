from fastapi import APIRouter, Depends, WebSocket
from sqlmodel import Session

from api.deps import get_db
from api.websocket.dining_tables import websocket_table_endpoint, websocket_staff_endpoint

router = APIRouter(tags=["websocket"])


@router.websocket("/ws/dining_tables/{table_id}")
async def table_feed(websocket: WebSocket, table_id: int, db: Session = Depends(get_db)):
    """WebSocket feed of updates for one dining table."""
    await websocket_table_endpoint(websocket, table_id, db)


@router.websocket("/ws/staff/dining_tables")
async def staff_feed(websocket: WebSocket, token: str | None = None):
    """WebSocket feed of every table update. The staff token travels as a query param."""
    await websocket_staff_endpoint(websocket, token)
