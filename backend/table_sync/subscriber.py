import asyncio
import inspect
import logging
from typing import Awaitable, Callable, Optional, Union

from schemas.dining_tables import DiningTableResponse
from table_sync.backend import TableBackend, TableFeed

logger = logging.getLogger(__name__)

UpdateHandler = Callable[[DiningTableResponse], Union[None, Awaitable[None]]]


class ChangeFeedSubscriber:
    """Owns the push subscription of one table for one page session.

    A single pump task reads the feed and awaits the handler for each record
    before reading the next, so deliveries never overlap and keep server order.
    """

    def __init__(self, backend: TableBackend, table_id: int):
        self.backend = backend
        self.table_id = table_id
        self._feed: Optional[TableFeed] = None
        self._task: Optional[asyncio.Task] = None
        self._opened = False
        self._closed = False
        self._feed_closed = False

    @property
    def is_open(self) -> bool:
        return self._task is not None and not self._task.done()

    async def open(self, handler: UpdateHandler) -> None:
        """Open the feed and start delivering to ``handler``. Raises TransientFailure."""
        if self._opened:
            raise RuntimeError(f"Feed for table {self.table_id} already opened")
        if self._closed:
            raise RuntimeError(f"Feed for table {self.table_id} already closed")
        self._opened = True

        self._feed = await self.backend.open_feed(self.table_id)
        if self._closed:
            # close() was requested while we were connecting
            await self._close_feed()
            return

        self._task = asyncio.create_task(self._pump(self._feed, handler))

    async def _pump(self, feed: TableFeed, handler: UpdateHandler) -> None:
        delivered = 0
        try:
            async for record in feed:
                if self._closed:
                    break
                if record.id != self.table_id:
                    logger.warning(f"[Subscriber] Dropping update for table {record.id}, subscribed to {self.table_id}")
                    continue

                result = handler(record)
                if inspect.isawaitable(result):
                    await result
                delivered += 1
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception(f"[Subscriber] Feed for table {self.table_id} stopped on an error")
        finally:
            logger.info(f"[Subscriber] Feed for table {self.table_id} ended after {delivered} updates")
            await self._close_feed()

    async def _close_feed(self) -> None:
        """Close the underlying feed, at most once."""
        if self._feed is None or self._feed_closed:
            return
        self._feed_closed = True
        await self._feed.aclose()

    async def close(self) -> None:
        """Stop deliveries and close the feed. Safe before open and safe to call more than once."""
        if self._closed:
            return
        self._closed = True

        task = self._task
        if task is not None and task is not asyncio.current_task() and not task.done():
            # A task cancelled before its first step never runs its finally block
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

        await self._close_feed()
