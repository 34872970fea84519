import logging

from schemas.dining_tables import DiningTableResponse
from table_sync.backend import TableBackend
from table_sync.errors import TableNotFound
from table_sync.identifiers import TableIdentifier

logger = logging.getLogger(__name__)


class TableSnapshotFetcher:
    """Loads the current record of one table. No retries, no state."""

    def __init__(self, backend: TableBackend):
        self.backend = backend

    async def fetch(self, identifier: TableIdentifier) -> DiningTableResponse:
        """Return the table for ``identifier``.

        Raises TableNotFound when no row matches and TransientFailure when the
        store is unreachable. Deciding what a failure means for the page is
        left to the caller.
        """
        record = await self.backend.read(identifier)
        if record is None:
            logger.warning(f"[Fetcher] No table for {identifier}")
            raise TableNotFound(f"Table {identifier} not found")

        logger.info(f"[Fetcher] Loaded table {record.code} (ID: {record.id}, needs_attention={record.needs_attention})")
        return record
