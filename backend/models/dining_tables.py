from datetime import datetime
from sqlalchemy import Column, DateTime, func
from sqlmodel import SQLModel, Field, Index

from core.config import settings


class DiningTable(SQLModel, table=True):
    __tablename__ = "dining_tables"

    id: int | None = Field(default=None, primary_key=True)
    code: str = Field(max_length=20, unique=True, nullable=False)
    name: str | None = Field(default=None, max_length=100, nullable=True)
    description: str | None = Field(default=None, nullable=True)
    needs_attention: bool = Field(default=False, nullable=False)
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(settings.APP_TIMEZONE),
        sa_column=Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
    )

    # Staff screens poll for tables that need a waiter
    __table_args__ = (
        Index("idx_dining_tables_needs_attention", "needs_attention"),
    )
