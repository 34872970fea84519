from table_sync.actions import WaiterCallAction
from table_sync.backend import HttpTableBackend, TableBackend, TableFeed
from table_sync.config import ClientSettings, FetchFailurePolicy, client_settings
from table_sync.controller import PageController
from table_sync.engine import Phase, ReconciliationEngine
from table_sync.errors import (
    InvalidIdentifier,
    TableNotFound,
    TableSyncError,
    TransientFailure,
    WriteFailure,
)
from table_sync.fetcher import TableSnapshotFetcher
from table_sync.identifiers import TableIdentifier, parse_table_identifier
from table_sync.storage import JsonFileKeyValueStore, KeyValueStore, MemoryKeyValueStore, SocialLinkGate
from table_sync.subscriber import ChangeFeedSubscriber

__all__ = [
    "ChangeFeedSubscriber",
    "ClientSettings",
    "FetchFailurePolicy",
    "HttpTableBackend",
    "InvalidIdentifier",
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "MemoryKeyValueStore",
    "PageController",
    "Phase",
    "ReconciliationEngine",
    "SocialLinkGate",
    "TableBackend",
    "TableFeed",
    "TableIdentifier",
    "TableNotFound",
    "TableSnapshotFetcher",
    "TableSyncError",
    "TransientFailure",
    "WaiterCallAction",
    "WriteFailure",
    "client_settings",
    "parse_table_identifier",
]
