"""SQL implementation of the record store."""

import logging
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlmodel import select

from newsdesk.core.gateways import RecordConflict, RecordStore
from newsdesk.core.parser import ParsedRecord
from newsdesk.models.article import Article, ArticleSource
from newsdesk.models.database import utcnow
from newsdesk.models.sync import SyncState

logger = logging.getLogger(__name__)

SYNC_STATE_ID = 1


class SQLRecordStore(RecordStore):
    """Record store over the articles and sync_state tables.

    Every operation uses its own short-lived session so the store can be shared
    by the orchestrator across runs.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory

    async def list_known_external_ids(self) -> set[str]:
        async with self.session_factory() as session:
            stmt = select(Article.external_id).where(Article.external_id.isnot(None))
            result = await session.execute(stmt)
            return set(result.scalars().all())

    async def insert_if_absent(self, record: ParsedRecord) -> bool:
        try:
            await self._insert(record)
        except RecordConflict:
            logger.info(f"Post {record.external_id} already stored, skipped")
            return False
        except SQLAlchemyError as e:
            logger.error(f"Insert failed for post {record.external_id}: {e}")
            return False
        return True

    async def _insert(self, record: ParsedRecord) -> None:
        """Insert one article, raises RecordConflict on a duplicate external ID."""
        article = Article(
            external_id=record.external_id,
            headline=record.headline,
            body=record.body,
            image_url=record.image_url,
            published_at=record.published_at,
            source_url=record.source_url,
            source=ArticleSource.FACEBOOK,
        )
        async with self.session_factory() as session:
            session.add(article)
            try:
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                raise RecordConflict(record.external_id) from e

    async def get_last_sync_time(self) -> int:
        async with self.session_factory() as session:
            state = await session.get(SyncState, SYNC_STATE_ID)
            return state.last_sync_at if state else 0

    async def set_last_sync_time(self, ts: int) -> None:
        async with self.session_factory() as session:
            state = await session.get(SyncState, SYNC_STATE_ID)
            if state is None:
                state = SyncState(id=SYNC_STATE_ID)
                session.add(state)
            state.last_sync_at = ts
            state.updated_at = utcnow()
            await session.commit()
