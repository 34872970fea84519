import logging
from typing import Optional

from schemas.dining_tables import DiningTableResponse
from table_sync.actions import WaiterCallAction
from table_sync.backend import TableBackend
from table_sync.config import FetchFailurePolicy, client_settings
from table_sync.engine import Listener, Phase, ReconciliationEngine, Scheduler
from table_sync.errors import InvalidIdentifier, TableSyncError
from table_sync.fetcher import TableSnapshotFetcher
from table_sync.identifiers import TableIdentifier, parse_table_identifier
from table_sync.subscriber import ChangeFeedSubscriber

logger = logging.getLogger(__name__)


class PageController:
    """One guest page session for one table.

    Usage::

        async with PageController(backend, path_id="7") as page:
            page.add_listener(render)
            await page.call_waiter()
    """

    def __init__(
        self,
        backend: TableBackend,
        path_id: Optional[str] = None,
        code: Optional[str] = None,
        policy: Optional[FetchFailurePolicy] = None,
        reset_delay: Optional[float] = None,
        scheduler: Optional[Scheduler] = None,
    ):
        self.backend = backend
        self.policy = policy or client_settings.FETCH_FAILURE_POLICY
        self._raw_identifier = (path_id, code)
        has_identifier = any(value is not None and value.strip() for value in self._raw_identifier)

        self.engine = ReconciliationEngine(
            has_identifier=has_identifier,
            reset_delay=reset_delay,
            scheduler=scheduler,
        )
        self.fetcher = TableSnapshotFetcher(backend)
        self.call_waiter = WaiterCallAction(self.engine, backend)
        self.identifier: Optional[TableIdentifier] = None
        self.subscriber: Optional[ChangeFeedSubscriber] = None
        self._closed = False

    @property
    def phase(self) -> Phase:
        return self.engine.phase

    @property
    def table(self) -> Optional[DiningTableResponse]:
        return self.engine.table

    @property
    def error(self) -> Optional[str]:
        return self.engine.error

    @property
    def can_call_waiter(self) -> bool:
        return self.engine.can_call_waiter and not self.call_waiter.in_flight

    def add_listener(self, listener: Listener) -> None:
        self.engine.add_listener(listener)

    def back_to_menu(self) -> None:
        self.engine.back_to_menu()

    async def start(self) -> None:
        """Load the table and subscribe to its updates."""
        try:
            self.identifier = parse_table_identifier(*self._raw_identifier)
        except InvalidIdentifier as e:
            logger.warning(f"[PageController] {e.message}")
            self.engine.apply_fetch_failure(e, self.policy)
            return

        if self.identifier is None:
            return

        try:
            record = await self.fetcher.fetch(self.identifier)
        except TableSyncError as e:
            self.engine.apply_fetch_failure(e, self.policy)
            return

        if self._closed:
            return
        self.engine.apply_snapshot(record)

        self.subscriber = ChangeFeedSubscriber(self.backend, record.id)
        try:
            await self.subscriber.open(self.engine.apply_update)
        except TableSyncError as e:
            # The page still works, it just won't see staff updates until reloaded
            logger.warning(f"[PageController] No live updates for table {record.code}: {e.message}")

    async def refresh(self) -> None:
        """Re-fetch the table, e.g. when the page becomes visible again."""
        if self._closed or self.identifier is None or self.table is None:
            return

        try:
            record = await self.fetcher.fetch(TableIdentifier(table_id=self.table.id))
        except TableSyncError as e:
            logger.warning(f"[PageController] Refresh failed: {e.message}")
            return

        self.engine.apply_snapshot(record)

    async def close(self) -> None:
        """End the session. Safe to call on any path and more than once."""
        if self._closed:
            return
        self._closed = True
        self.engine.dispose()
        if self.subscriber is not None:
            await self.subscriber.close()

    async def __aenter__(self) -> "PageController":
        try:
            await self.start()
        except BaseException:
            await self.close()
            raise
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
