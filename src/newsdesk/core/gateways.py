"""Contracts between the sync engine and its collaborators."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from newsdesk.core.parser import ParsedRecord


@dataclass(frozen=True)
class FeedItem:
    """A post as returned by the feed source."""

    id: str
    message: str | None = None
    full_picture: str | None = None
    created_time: datetime | None = None
    permalink_url: str | None = None


class SyncError(Exception):
    """Base sync error."""


class FeedUnavailable(SyncError):
    """The feed source could not be read (network, auth, rate limit)."""


class RecordConflict(SyncError):
    """An insert lost the race on the external ID unique constraint."""


class FeedSource(ABC):
    """Source of recent feed items."""

    @abstractmethod
    async def fetch_recent(self, limit: int) -> list[FeedItem]:
        """Fetch up to ``limit`` most recent items, newest first.

        Raises:
            FeedUnavailable: the upstream call failed.
        """
        ...


class RecordStore(ABC):
    """Persistence used by the sync engine."""

    @abstractmethod
    async def list_known_external_ids(self) -> set[str]:
        """All external IDs already stored."""
        ...

    @abstractmethod
    async def insert_if_absent(self, record: "ParsedRecord") -> bool:
        """Insert a new record, returns False if nothing was created."""
        ...

    @abstractmethod
    async def get_last_sync_time(self) -> int:
        """Epoch ms of the last completed sync, 0 if never."""
        ...

    @abstractmethod
    async def set_last_sync_time(self, ts: int) -> None:
        """Persist the last completed sync time."""
        ...
