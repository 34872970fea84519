from typing import Optional
from pydantic import BaseModel, Field


class DiningTableResponse(BaseModel):
    """Public view of a dining table, the record clients keep in sync."""
    id: int
    code: str
    name: Optional[str] = None
    description: Optional[str] = None
    needs_attention: bool = False

    class Config:
        from_attributes = True


class DiningTableCreate(BaseModel):
    code: str = Field(min_length=1, max_length=20)
    name: Optional[str] = Field(default=None, max_length=100)
    description: Optional[str] = None


class AttentionUpdate(BaseModel):
    needs_attention: bool
