import logging
from fastapi import APIRouter, HTTPException

from api.deps import SessionDep, OptionalStaff
from api.websocket.dining_tables import publish_table_update
from crud import dining_tables as crud_tables
from schemas.dining_tables import DiningTableResponse, AttentionUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/dining_tables", tags=["dining_tables"])


@router.get("/by_code/{code}", response_model=DiningTableResponse)
def get_table_by_code(code: str, db: SessionDep):
    """Get a dining table by the short code printed on its QR card."""
    table = crud_tables.get_table_by_code(db, code)
    if not table:
        raise HTTPException(status_code=404, detail="Table not found")
    return table


@router.get("/{table_id}", response_model=DiningTableResponse)
def get_table(table_id: int, db: SessionDep):
    """Get a dining table by ID."""
    table = crud_tables.get_table_by_id(db, table_id)
    if not table:
        raise HTTPException(status_code=404, detail="Table not found")
    return table


@router.patch("/{table_id}", response_model=DiningTableResponse)
async def update_attention(
    table_id: int,
    update: AttentionUpdate,
    db: SessionDep,
    staff: OptionalStaff
):
    """Set the attention flag of a table.

    Guests may only raise the flag (call a waiter). Clearing it is a staff
    action, either here with a staff token or through the staff resolve route.
    """
    table = crud_tables.get_table_by_id(db, table_id)
    if not table:
        raise HTTPException(status_code=404, detail="Table not found")

    if not update.needs_attention and staff is None:
        raise HTTPException(
            status_code=403,
            detail="Only staff can clear a waiter call"
        )

    table = crud_tables.set_needs_attention(db, table, update.needs_attention)
    logger.info(
        f"[DiningTables] Table {table.code} needs_attention={table.needs_attention}"
        f" (by {staff or 'guest'})"
    )

    await publish_table_update(table)
    return table
