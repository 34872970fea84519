from typing import Annotated, Literal, Union
from pydantic import BaseModel, Field

from schemas.dining_tables import DiningTableResponse


# Outgoing messages
class PongMessage(BaseModel):
    type: Literal["pong"] = "pong"


class TableStateMessage(BaseModel):
    """Snapshot sent once when a feed connection is accepted."""
    type: Literal["table_state"] = "table_state"
    table: DiningTableResponse


class TableUpdatedMessage(BaseModel):
    type: Literal["table_updated"] = "table_updated"
    table: DiningTableResponse


class ErrorMessage(BaseModel):
    type: Literal["error"] = "error"
    message: str


FeedMessage = Annotated[
    Union[TableStateMessage, TableUpdatedMessage, PongMessage, ErrorMessage],
    Field(discriminator="type"),
]
