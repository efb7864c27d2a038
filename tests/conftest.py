"""Test configuration and fixtures."""

import asyncio
from collections.abc import AsyncGenerator
from datetime import UTC, datetime

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from newsdesk.core.gateways import FeedItem, FeedSource, RecordStore
from newsdesk.core.parser import ParsedRecord
from newsdesk.core.store import SQLRecordStore
from newsdesk.core.sync import SyncOrchestrator

COOLDOWN_MS = 10 * 60 * 1000
START_MS = 1_700_000_000_000


def make_post(post_id: str, message: str | None = None, **kwargs) -> FeedItem:
    """Build a feed item with a default two-line message."""
    if message is None:
        message = f"Headline for {post_id}\nBody for {post_id}"
    return FeedItem(id=post_id, message=message, **kwargs)


class FakeClock:
    """Controllable epoch-ms clock."""

    def __init__(self, now: int = START_MS) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class FakeFeedSource(FeedSource):
    """In-memory feed. Set ``gate`` to hold fetches until it is set."""

    def __init__(self, items: list[FeedItem] | None = None) -> None:
        self.items = list(items or [])
        self.calls = 0
        self.error: Exception | None = None
        self.gate: asyncio.Event | None = None

    async def fetch_recent(self, limit: int) -> list[FeedItem]:
        self.calls += 1
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.items[:limit]


class FakeRecordStore(RecordStore):
    """In-memory record store. IDs in ``conflicts`` lose the insert race."""

    def __init__(self, known: set[str] | None = None) -> None:
        self.records: dict[str, ParsedRecord | None] = dict.fromkeys(known or ())
        self.conflicts: set[str] = set()
        self.last_sync = 0

    async def list_known_external_ids(self) -> set[str]:
        return set(self.records)

    async def insert_if_absent(self, record: ParsedRecord) -> bool:
        if record.external_id in self.records or record.external_id in self.conflicts:
            return False
        self.records[record.external_id] = record
        return True

    async def get_last_sync_time(self) -> int:
        return self.last_sync

    async def set_last_sync_time(self, ts: int) -> None:
        self.last_sync = ts


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def feed() -> FakeFeedSource:
    return FakeFeedSource()


@pytest.fixture
def store() -> FakeRecordStore:
    return FakeRecordStore()


@pytest.fixture
def orchestrator(
    feed: FakeFeedSource, store: FakeRecordStore, clock: FakeClock
) -> SyncOrchestrator:
    """Orchestrator over in-memory fakes."""
    return SyncOrchestrator(
        source=feed,
        store=store,
        cooldown_ms=COOLDOWN_MS,
        batch_size=20,
        clock=clock,
    )


@pytest_asyncio.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Session factory over an in-memory database."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    await engine.dispose()


@pytest_asyncio.fixture
async def async_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """A session on the in-memory database."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def sql_store(session_factory: async_sessionmaker[AsyncSession]) -> SQLRecordStore:
    return SQLRecordStore(session_factory)


@pytest.fixture
def sample_record() -> ParsedRecord:
    return ParsedRecord(
        external_id="123_456",
        headline="Council approves new park",
        body="Construction starts in spring.",
        image_url="https://cdn.example.com/park.jpg",
        published_at=datetime(2025, 3, 1, 9, 30, tzinfo=UTC),
        source_url="https://www.facebook.com/123/posts/456",
    )
