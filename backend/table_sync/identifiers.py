import re
from dataclasses import dataclass
from typing import Optional

from table_sync.errors import InvalidIdentifier

CODE_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,20}$")


@dataclass(frozen=True)
class TableIdentifier:
    """How a page addresses its table: numeric primary key or short code."""

    table_id: Optional[int] = None
    code: Optional[str] = None

    def __post_init__(self):
        if (self.table_id is None) == (self.code is None):
            raise InvalidIdentifier("Exactly one of table_id or code is required")

    def __str__(self) -> str:
        return f"#{self.table_id}" if self.table_id is not None else f"code {self.code}"


def parse_table_identifier(
    path_id: Optional[str] = None,
    code: Optional[str] = None
) -> Optional[TableIdentifier]:
    """Build an identifier from the page path id or the ``code`` query param.

    Returns None when the page carries neither (plain menu page). Raises
    InvalidIdentifier for anything malformed.
    """
    if path_id is not None and path_id.strip():
        path_id = path_id.strip()
        if not (path_id.isascii() and path_id.isdigit()) or int(path_id) <= 0:
            raise InvalidIdentifier(f"Invalid table id: {path_id!r}")
        return TableIdentifier(table_id=int(path_id))

    if code is not None and code.strip():
        code = code.strip()
        if not CODE_PATTERN.match(code):
            raise InvalidIdentifier(f"Invalid table code: {code!r}")
        return TableIdentifier(code=code)

    return None
