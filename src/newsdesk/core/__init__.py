"""Core business logic."""

from newsdesk.core.facebook import FacebookClient, FacebookConfig
from newsdesk.core.gateways import (
    FeedItem,
    FeedSource,
    FeedUnavailable,
    RecordConflict,
    RecordStore,
    SyncError,
)
from newsdesk.core.parser import ParsedRecord, parse_post
from newsdesk.core.store import SQLRecordStore
from newsdesk.core.sync import SyncOrchestrator, SyncRunResult

__all__ = [
    "FacebookClient",
    "FacebookConfig",
    "FeedItem",
    "FeedSource",
    "FeedUnavailable",
    "ParsedRecord",
    "RecordConflict",
    "RecordStore",
    "SQLRecordStore",
    "SyncError",
    "SyncOrchestrator",
    "SyncRunResult",
    "parse_post",
]
