"""Article API."""

import math
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from newsdesk.core.sync import SyncOrchestrator, get_orchestrator
from newsdesk.models.article import Article
from newsdesk.models.database import get_session

router = APIRouter(prefix="/api/articles", tags=["articles"])


def serialize_article(article: Article) -> dict[str, Any]:
    """Render an article for JSON responses."""
    return {
        "id": article.id,
        "external_id": article.external_id,
        "headline": article.headline,
        "body": article.body,
        "image_url": article.image_url,
        "published_at": article.published_at.isoformat()
        if article.published_at
        else None,
        "source_url": article.source_url,
        "source": article.source,
        "is_modified": article.is_modified,
        "is_visible": article.is_visible,
        "created_at": article.created_at.isoformat(),
    }


async def paginate_articles(
    session: AsyncSession,
    page: int,
    limit: int,
    visible_only: bool,
) -> dict[str, Any]:
    """Newest-first page of articles with totals."""
    count_stmt = select(func.count()).select_from(Article)
    stmt = select(Article)
    if visible_only:
        count_stmt = count_stmt.where(Article.is_visible == True)  # noqa: E712
        stmt = stmt.where(Article.is_visible == True)  # noqa: E712

    total = (await session.execute(count_stmt)).scalar_one()

    stmt = (
        stmt.order_by(Article.published_at.desc(), Article.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    result = await session.execute(stmt)
    articles = result.scalars().all()

    return {
        "items": [serialize_article(a) for a in articles],
        "page": page,
        "limit": limit,
        "total": total,
        "total_pages": math.ceil(total / limit),
    }


@router.get("")
async def list_articles(
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(10, ge=1, le=100, description="Page size"),
    session: AsyncSession = Depends(get_session),
    orchestrator: SyncOrchestrator = Depends(get_orchestrator),
) -> dict:
    """List visible articles."""
    orchestrator.trigger()
    return await paginate_articles(session, page, limit, visible_only=True)


@router.get("/by-external/{external_id}")
async def get_article_by_external_id(
    external_id: str,
    session: AsyncSession = Depends(get_session),
    orchestrator: SyncOrchestrator = Depends(get_orchestrator),
) -> dict:
    """Get a visible article by its Facebook post ID."""
    orchestrator.trigger()
    stmt = select(Article).where(
        Article.external_id == external_id,
        Article.is_visible == True,  # noqa: E712
    )
    result = await session.execute(stmt)
    article = result.scalar_one_or_none()
    if not article:
        raise HTTPException(status_code=404, detail="Not found")
    return serialize_article(article)


@router.get("/{article_id}")
async def get_article(
    article_id: int,
    session: AsyncSession = Depends(get_session),
    orchestrator: SyncOrchestrator = Depends(get_orchestrator),
) -> dict:
    """Get a visible article."""
    orchestrator.trigger()
    article = await session.get(Article, article_id)
    if not article or not article.is_visible:
        raise HTTPException(status_code=404, detail="Not found")
    return serialize_article(article)
