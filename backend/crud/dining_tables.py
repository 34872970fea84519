from typing import Optional
from sqlmodel import select, Session
from models.dining_tables import DiningTable
from schemas.dining_tables import DiningTableCreate


def get_table_by_id(
    db: Session,
    table_id: int
) -> DiningTable | None:
    """Get a dining table by its ID."""
    return db.get(DiningTable, table_id)


def get_table_by_code(
    db: Session,
    code: str
) -> DiningTable | None:
    """Get a dining table by its short code."""
    return db.exec(
        select(DiningTable).where(DiningTable.code == code)
    ).first()


def list_tables(
    db: Session,
    needs_attention: Optional[bool] = None
) -> list[DiningTable]:
    """List dining tables, optionally only those with a pending waiter call."""
    query = select(DiningTable).order_by(DiningTable.code)

    if needs_attention is not None:
        query = query.where(DiningTable.needs_attention == needs_attention)

    return db.exec(query).all()


def create_table(
    db: Session,
    table_data: DiningTableCreate
) -> DiningTable:
    """Create a dining table."""
    table = DiningTable(
        code=table_data.code,
        name=table_data.name,
        description=table_data.description,
    )
    db.add(table)
    db.commit()
    db.refresh(table)
    return table


def set_needs_attention(
    db: Session,
    table: DiningTable,
    needs_attention: bool
) -> DiningTable:
    """Set the attention flag of a table and persist it."""
    table.needs_attention = needs_attention
    db.add(table)
    db.commit()
    db.refresh(table)
    return table
