import logging
from typing import Optional
from fastapi import APIRouter, HTTPException, Query

from api.deps import SessionDep, CurrentStaff
from api.websocket.dining_tables import publish_table_update
from crud import dining_tables as crud_tables
from schemas.dining_tables import DiningTableCreate, DiningTableResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/staff/dining_tables", tags=["staff"])


@router.get("", response_model=list[DiningTableResponse])
def list_tables(
    current_staff: CurrentStaff,
    db: SessionDep,
    needs_attention: Optional[bool] = Query(None, description="Filter by pending waiter call"),
):
    """List dining tables for the staff floor view."""
    return crud_tables.list_tables(db, needs_attention=needs_attention)


@router.post("", response_model=DiningTableResponse, status_code=201)
def create_table(table_data: DiningTableCreate, current_staff: CurrentStaff, db: SessionDep):
    """Create a dining table."""
    if crud_tables.get_table_by_code(db, table_data.code):
        raise HTTPException(status_code=409, detail="Table code already exists")

    table = crud_tables.create_table(db, table_data)
    logger.info(f"[Staff] {current_staff} created table {table.code} (ID: {table.id})")
    return table


@router.put("/{table_id}/resolve", response_model=DiningTableResponse)
async def resolve_table(table_id: int, current_staff: CurrentStaff, db: SessionDep):
    """Mark the waiter call of a table as attended."""
    table = crud_tables.get_table_by_id(db, table_id)
    if not table:
        raise HTTPException(status_code=404, detail="Table not found")

    table = crud_tables.set_needs_attention(db, table, False)
    logger.info(f"[Staff] {current_staff} attended table {table.code}")

    await publish_table_update(table)
    return table
