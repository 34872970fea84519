import logging

from table_sync.backend import TableBackend
from table_sync.engine import ReconciliationEngine
from table_sync.errors import WriteFailure

logger = logging.getLogger(__name__)


class WaiterCallAction:
    """The "call waiter" button: optimistic phase change plus one write."""

    def __init__(self, engine: ReconciliationEngine, backend: TableBackend):
        self.engine = engine
        self.backend = backend
        self._in_flight = False

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    async def __call__(self) -> bool:
        """Call a waiter. Returns True when the write was stored.

        Repeated presses while a call is pending or in flight do nothing. A
        failed write puts the page back where it was and leaves the message in
        ``engine.error``; pressing again retries.
        """
        if self._in_flight:
            logger.debug("[WaiterCall] Write already in flight, ignoring")
            return False

        table = self.engine.table
        previous = self.engine.begin_call()
        if previous is None:
            logger.debug(f"[WaiterCall] Not available while {self.engine.phase.value}")
            return False

        self._in_flight = True
        revision = self.engine.revision
        try:
            record = await self.backend.set_needs_attention(table.id, True)
        except WriteFailure as e:
            logger.warning(f"[WaiterCall] Table {table.code}: {e.message}")
            self.engine.revert_call(previous, e)
            return False
        finally:
            self._in_flight = False

        logger.info(f"[WaiterCall] Table {table.code} called a waiter")
        if self.engine.revision != revision:
            # The feed already delivered our echo, and maybe a resolution after it
            logger.debug(f"[WaiterCall] Table {table.code} moved on before the ack, dropping it")
            return True
        self.engine.apply_update(record)
        return True
