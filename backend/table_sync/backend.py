"""Backing store access for the table sync client.

The client only needs three things from the restaurant service: read one
table, flip its attention flag, and listen to updates for that one table.
"""

import logging
from abc import ABC, abstractmethod
from typing import AsyncIterator, Optional
from urllib.parse import quote

import httpx
import websockets
from pydantic import TypeAdapter, ValidationError
from websockets.exceptions import ConnectionClosed, WebSocketException

from schemas.dining_tables import DiningTableResponse
from schemas.websocket import FeedMessage, TableStateMessage, TableUpdatedMessage, ErrorMessage
from table_sync.config import client_settings
from table_sync.errors import TransientFailure, WriteFailure
from table_sync.identifiers import TableIdentifier

logger = logging.getLogger(__name__)

_feed_message_adapter = TypeAdapter(FeedMessage)


class TableFeed(ABC):
    """An open push channel for one table. Iterating yields table records."""

    @abstractmethod
    def __aiter__(self) -> AsyncIterator[DiningTableResponse]:
        pass

    @abstractmethod
    async def aclose(self) -> None:
        pass


class TableBackend(ABC):
    """Row store with subscriptions, as seen by one guest page."""

    @abstractmethod
    async def read(self, identifier: TableIdentifier) -> Optional[DiningTableResponse]:
        """Return the table, or None when no row matches. Raises TransientFailure."""
        pass

    @abstractmethod
    async def set_needs_attention(self, table_id: int, value: bool) -> DiningTableResponse:
        """Persist the flag and return the stored row. Raises WriteFailure."""
        pass

    @abstractmethod
    async def open_feed(self, table_id: int) -> TableFeed:
        """Open a feed filtered server side to one table. Raises TransientFailure."""
        pass

    async def aclose(self) -> None:
        pass


class WebSocketTableFeed(TableFeed):

    def __init__(self, websocket):
        self._websocket = websocket

    async def __aiter__(self):
        try:
            async for raw in self._websocket:
                try:
                    message = _feed_message_adapter.validate_json(raw)
                except ValidationError as e:
                    logger.warning(f"[TableFeed] Ignoring malformed message: {e}")
                    continue

                if isinstance(message, (TableStateMessage, TableUpdatedMessage)):
                    yield message.table
                elif isinstance(message, ErrorMessage):
                    logger.warning(f"[TableFeed] Server error: {message.message}")
        except ConnectionClosed as e:
            # Drops are not errors for the page, updates simply stop
            logger.warning(f"[TableFeed] Connection dropped: {e}")

    async def aclose(self) -> None:
        await self._websocket.close()


class HttpTableBackend(TableBackend):
    """Talks to the TableCall API over HTTP, and to its feeds over websockets."""

    def __init__(
        self,
        api_base_url: Optional[str] = None,
        ws_base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
        connect=websockets.connect,
    ):
        self.api_base_url = (api_base_url or client_settings.API_BASE_URL).rstrip("/")
        self.ws_base_url = (ws_base_url or client_settings.WS_BASE_URL).rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=self.api_base_url,
            timeout=timeout or client_settings.REQUEST_TIMEOUT,
        )
        self._connect = connect

    async def read(self, identifier: TableIdentifier) -> Optional[DiningTableResponse]:
        if identifier.table_id is not None:
            path = f"/api/dining_tables/{identifier.table_id}"
        else:
            path = f"/api/dining_tables/by_code/{quote(identifier.code, safe='')}"

        try:
            response = await self._client.get(path)
        except httpx.HTTPError as e:
            logger.error(f"[HttpTableBackend] GET {path} failed: {e}")
            raise TransientFailure() from e

        if response.status_code == 404:
            return None
        if response.is_error:
            logger.error(f"[HttpTableBackend] GET {path} returned {response.status_code}: {response.text}")
            raise TransientFailure()

        try:
            return DiningTableResponse.model_validate(response.json())
        except ValueError as e:
            logger.error(f"[HttpTableBackend] GET {path} returned an unexpected body: {e}")
            raise TransientFailure() from e

    async def set_needs_attention(self, table_id: int, value: bool) -> DiningTableResponse:
        path = f"/api/dining_tables/{table_id}"
        try:
            response = await self._client.patch(path, json={"needs_attention": value})
            response.raise_for_status()
            return DiningTableResponse.model_validate(response.json())
        except httpx.HTTPStatusError as e:
            logger.error(f"[HttpTableBackend] PATCH {path} returned {e.response.status_code}: {e.response.text}")
            raise WriteFailure() from e
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"[HttpTableBackend] PATCH {path} failed: {e}")
            raise WriteFailure() from e

    async def open_feed(self, table_id: int) -> TableFeed:
        url = f"{self.ws_base_url}/api/ws/dining_tables/{table_id}"
        try:
            websocket = await self._connect(url)
        except (OSError, WebSocketException) as e:
            logger.error(f"[HttpTableBackend] Could not open feed {url}: {e}")
            raise TransientFailure() from e
        logger.info(f"[HttpTableBackend] Feed open: {url}")
        return WebSocketTableFeed(websocket)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
